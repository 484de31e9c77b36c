from typing import Optional

from fastapi import APIRouter, Depends, Header, Request
from pydantic import BaseModel, EmailStr, Field, field_validator
from sqlalchemy.orm import Session

# Local imports
from database.db_session import get_db
from services.credentials import CredentialStore
from services.errors import InvalidCredentials
from services.guard import AuthContext, AuthGuard
from services.tokens import TokenService

# Router for authentication endpoints
router = APIRouter(prefix="/auth", tags=["auth"])


# ------------------------------
# Pydantic Schemas
# ------------------------------
class RegisterIn(BaseModel):
    name: str = Field(..., min_length=1, pattern=r"\S")
    email: EmailStr
    password: str = Field(..., min_length=6)

    @field_validator("password")
    @classmethod
    def fits_bcrypt(cls, value: str) -> str:
        # bcrypt silently ignores everything past 72 bytes
        if len(value.encode("utf-8")) > 72:
            raise ValueError("Password must be at most 72 bytes")
        return value


class LoginIn(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class Token(BaseModel):
    token: str


# ------------------------------
# Providers
# ------------------------------
def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_credential_store(db: Session = Depends(get_db)) -> CredentialStore:
    return CredentialStore(db)


# ------------------------------
# Routes
# ------------------------------
@router.post("/register", response_model=Token)
def register(
    payload: RegisterIn,
    credentials: CredentialStore = Depends(get_credential_store),
    tokens: TokenService = Depends(get_token_service),
):
    user = credentials.register(payload.name, payload.email, payload.password)
    return {"token": tokens.issue(user.id)}


@router.post("/login", response_model=Token)
def login(
    payload: LoginIn,
    credentials: CredentialStore = Depends(get_credential_store),
    tokens: TokenService = Depends(get_token_service),
):
    user = credentials.verify(payload.email, payload.password)
    if user is None:
        raise InvalidCredentials()
    return {"token": tokens.issue(user.id)}


# ------------------------------
# Current user dependency
# ------------------------------
def get_auth_context(
    authorization: Optional[str] = Header(None),
    tokens: TokenService = Depends(get_token_service),
    credentials: CredentialStore = Depends(get_credential_store),
) -> AuthContext:
    return AuthGuard(tokens, credentials).authenticate(authorization)
