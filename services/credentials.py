# services/credentials.py
import logging
from typing import Optional

from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from database.models import User
from services.errors import DuplicateUser, InternalError
from settings import BCRYPT_ROUNDS

logger = logging.getLogger("services.credentials")

# Password encryption setup; bcrypt salts every hash on its own
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)

# Compared against when the email is unknown so both paths cost one bcrypt verify.
_DUMMY_HASH = pwd_context.hash("not-a-real-password")


def normalize_email(email: str) -> str:
    return email.strip().lower()


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


class CredentialStore:
    """
    Users and their hashed passwords.

    Plaintext passwords only ever live for the duration of a hash/verify call.
    """

    def __init__(self, db: Session):
        self.db = db

    def find_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == normalize_email(email)).first()

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def register(self, name: str, email: str, password: str) -> User:
        email = normalize_email(email)
        if self.find_by_email(email):
            raise DuplicateUser()

        user = User(name=name.strip(), email=email, hashed_password=get_password_hash(password))
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # lost a race against a concurrent registration
            self.db.rollback()
            raise DuplicateUser()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to persist user")
            raise InternalError()
        self.db.refresh(user)

        logger.info("Registered user %s", user.id)
        return user

    def verify(self, email: str, password: str) -> Optional[User]:
        user = self.find_by_email(email)
        if user is None:
            verify_password(password, _DUMMY_HASH)
            return None
        if not verify_password(password, user.hashed_password):
            return None
        return user
