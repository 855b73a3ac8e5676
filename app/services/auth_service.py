from sqlalchemy.orm import Session
from typing import Optional, Dict
import logging
import uuid

from app.core.database import transaction
from app.core.exceptions import InvalidInputError
from app.core.security import verify_password, create_access_token, get_password_hash
from app.models.user import User

logger = logging.getLogger(__name__)

class AuthService:
    @staticmethod
    def register_user(email: str, password: str, db: Session, username: Optional[str] = None) -> User:
        email = email.strip().lower()
        if db.query(User).filter(User.email == email).first():
            raise InvalidInputError("Email is already registered")

        user = User(
            id=str(uuid.uuid4()),
            email=email,
            username=username or email.split("@")[0],
            hashed_password=get_password_hash(password),
        )
        with transaction(db):
            db.add(user)

        db.refresh(user)
        logger.info("Registered user %s", user.id)
        return user

    @staticmethod
    def authenticate_user(email: str, password: str, db: Session) -> Optional[User]:
        user = db.query(User).filter(User.email == email.strip().lower()).first()
        if not user or not verify_password(password, user.hashed_password):
            return None
        return user

    @staticmethod
    def generate_tokens(email: str) -> Dict[str, str]:
        return {
            "access_token": create_access_token(data={"sub": email}),
            "token_type": "bearer",
        }
