# services/tokens.py
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from jose import ExpiredSignatureError, JWTError, jwt

from services.errors import InvalidToken, TokenExpired


class TokenService:
    """
    Issues and verifies signed, self-expiring session tokens (JWT).

    Tokens carry the user id in ``sub`` and are not tracked server side, so a
    token stays valid until its ``exp`` passes.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(minutes=60),
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.secret = secret
        self.algorithm = algorithm
        self.ttl = ttl
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def issue(self, user_id: str) -> str:
        issued_at = self.clock()
        to_encode = {
            "sub": str(user_id),
            "iat": issued_at,
            "exp": issued_at + self.ttl,
        }
        return jwt.encode(to_encode, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> str:
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require_exp": True, "require_sub": True},
            )
        except ExpiredSignatureError:
            raise TokenExpired("token expired")
        except JWTError as e:
            raise InvalidToken(str(e))

        user_id = payload.get("sub")
        if not user_id or not isinstance(user_id, str):
            raise InvalidToken("missing subject")
        return user_id
