"""Interface IdGenerator - Puerto para generación de identificadores de documentos."""

import uuid
from abc import ABC, abstractmethod


class IdGenerator(ABC):
    """
    Puerto para generación de identificadores únicos.

    Permite inyectar implementaciones fake para testing determinista.
    """

    @abstractmethod
    def new_id(self, prefix: str) -> str:
        """
        Genera un identificador único.

        Args:
            prefix: Prefijo legible del tipo de documento (ej: "bkg").
        """
        raise NotImplementedError


class RealIdGenerator(IdGenerator):
    """Implementación real basada en UUID v4."""

    def new_id(self, prefix: str) -> str:
        return f"{prefix}_{uuid.uuid4().hex}"


class FakeIdGenerator(IdGenerator):
    """Genera valores predecibles por prefijo para pruebas deterministas."""

    def __init__(self) -> None:
        self._counters: dict[str, int] = {}

    def new_id(self, prefix: str) -> str:
        self._counters[prefix] = self._counters.get(prefix, 0) + 1
        return f"{prefix}_{self._counters[prefix]:04d}"

    def reset(self) -> None:
        self._counters.clear()
