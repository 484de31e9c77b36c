# services/guard.py
import logging
from dataclasses import dataclass
from typing import Optional

from services.credentials import CredentialStore
from services.errors import TokenError, Unauthenticated
from services.tokens import TokenService

logger = logging.getLogger("services.guard")

BEARER_PREFIX = "bearer "


@dataclass(frozen=True)
class AuthContext:
    """The authenticated caller of a single request."""

    user_id: str
    name: str
    email: str


def extract_bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        raise Unauthenticated()
    if authorization[: len(BEARER_PREFIX)].lower() != BEARER_PREFIX:
        raise Unauthenticated()
    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise Unauthenticated()
    return token


class AuthGuard:
    """
    Resolves an Authorization header to a live user.

    Every failure is reported as the same Unauthenticated error; the reason is
    only logged.
    """

    def __init__(self, tokens: TokenService, credentials: CredentialStore):
        self.tokens = tokens
        self.credentials = credentials

    def authenticate(self, authorization: Optional[str]) -> AuthContext:
        token = extract_bearer_token(authorization)

        try:
            user_id = self.tokens.verify(token)
        except TokenError as e:
            logger.info("Rejected token: %s", type(e).__name__)
            raise Unauthenticated()

        user = self.credentials.get_by_id(user_id)
        if user is None:
            logger.info("Token subject %s no longer exists", user_id)
            raise Unauthenticated()

        return AuthContext(user_id=user.id, name=user.name, email=user.email)
