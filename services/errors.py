# services/errors.py
"""
Error kinds raised by the core services.

Each BillingError subclass carries the HTTP status it maps to and a generic,
client-safe message. The HTTP layer turns them into JSON bodies; nothing here
should ever carry internal detail that the client must not see.
"""
from typing import Any, Dict, List, Optional


class BillingError(Exception):
    status_code = 500
    message = "Server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.message
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"msg": self.message}


class ValidationError(BillingError):
    status_code = 400
    message = "Validation failed"

    def __init__(self, errors: Optional[List[Dict[str, Any]]] = None, message: Optional[str] = None):
        super().__init__(message)
        self.errors = errors or []

    def to_dict(self) -> Dict[str, Any]:
        return {"msg": self.message, "errors": self.errors}


class DuplicateUser(BillingError):
    status_code = 400
    message = "User already exists"


class InvalidCredentials(BillingError):
    status_code = 400
    message = "Invalid credentials"


class InvalidId(BillingError):
    status_code = 400
    message = "Invalid bill ID"


class Unauthenticated(BillingError):
    status_code = 401
    message = "Please authenticate"


class NotFound(BillingError):
    status_code = 404
    message = "Bill not found"


class InternalError(BillingError):
    status_code = 500
    message = "Server error"


# Token failures never reach the client directly; the auth guard folds them
# into Unauthenticated.
class TokenError(Exception):
    pass


class InvalidToken(TokenError):
    pass


class TokenExpired(TokenError):
    pass
