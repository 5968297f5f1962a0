from functools import lru_cache

from fastapi import Depends, Header

from app.application.interfaces.identity import Identity, IdentityVerifier
from app.domain.errors import UnauthorizedError
from app.infrastructure.in_memory.identity_verifier import HeaderIdentityVerifier


@lru_cache(maxsize=1)
def get_identity_verifier() -> IdentityVerifier:
    return HeaderIdentityVerifier()


async def get_current_user(
    authorization: str | None = Header(default=None),
    verifier: IdentityVerifier = Depends(get_identity_verifier),
) -> Identity:
    if not authorization:
        raise UnauthorizedError()
    scheme, _, credential = authorization.partition(" ")
    if scheme.lower() != "bearer" or not credential:
        raise UnauthorizedError("Se esperaba una credencial Bearer")
    return await verifier.verify(credential)
