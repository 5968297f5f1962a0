"""Interface IdentityVerifier - Puerto hacia el proveedor de identidad."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class Identity:
    """Identidad verificada del solicitante."""

    uid: str
    role: str = "customer"
    name: str | None = None
    email: str | None = None


class IdentityVerifier(ABC):
    """
    Verifica la credencial de una petición.

    La verificación real vive en un servicio externo; este puerto solo expone
    el resultado (uid y rol) a la capa de aplicación.
    """

    @abstractmethod
    async def verify(self, credential: str | None) -> Identity:
        """Lanza UnauthorizedError si la credencial falta o no es válida."""
        raise NotImplementedError
