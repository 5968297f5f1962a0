from app.application.interfaces.identity import Identity, IdentityVerifier
from app.domain.errors import UnauthorizedError


class HeaderIdentityVerifier(IdentityVerifier):
    """
    Development verifier: trusts a bearer credential of the form ``uid[:role]``.

    The credential carries no profile, so name and email stay empty. Production
    deployments plug a verifier backed by the identity provider that fills them.
    """

    async def verify(self, credential: str | None) -> Identity:
        if not credential:
            raise UnauthorizedError()
        uid, _, role = credential.strip().partition(":")
        if not uid:
            raise UnauthorizedError()
        return Identity(uid=uid, role=role or "customer")
