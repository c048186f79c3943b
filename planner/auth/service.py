"""Authentication service layer."""

import logging
from datetime import UTC, datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from planner.auth.schemas import Token, UserLogin, UserRegister
from planner.auth.utils import (
    create_access_token,
    create_refresh_token,
    get_password_hash,
    verify_password,
)
from planner.db.models import User

logger = logging.getLogger(__name__)


class AuthService:
    """Service class for authentication operations."""

    def __init__(self, db: Session):
        """Initialize auth service.

        Args:
            db: Database session.
        """
        self.db = db

    def _issue_token(self, user: User) -> Token:
        return Token(
            access_token=create_access_token(user.id, user.email),
            refresh_token=create_refresh_token(user.id),
        )

    def register(self, data: UserRegister) -> tuple[User, Token]:
        """Register a new user.

        Args:
            data: Registration data.

        Returns:
            tuple: (created User, Token).

        Raises:
            ValueError: If the email is already registered.
        """
        email = data.email.lower()
        existing = self.db.query(User).filter(func.lower(User.email) == email).first()
        if existing:
            raise ValueError("Email already registered")

        user = User(
            email=email,
            password_hash=get_password_hash(data.password),
            full_name=data.full_name.strip(),
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)

        logger.info("Registered user %s", user.id)
        return user, self._issue_token(user)

    def login(self, data: UserLogin) -> tuple[User | None, Token | None, str]:
        """Authenticate user and return token.

        Args:
            data: Login credentials.

        Returns:
            tuple: (User or None, Token or None, status message).
        """
        user = self.db.query(User).filter(func.lower(User.email) == data.email.lower()).first()

        if not user or not verify_password(data.password, user.password_hash):
            return None, None, "Invalid email or password."

        if not user.is_active:
            return None, None, "Your account has been deactivated."

        user.last_login = datetime.now(UTC)
        self.db.commit()

        return user, self._issue_token(user), "Login successful."


def get_auth_service(db: Session) -> AuthService:
    """Factory function for AuthService.

    Args:
        db: Database session.

    Returns:
        AuthService: Auth service instance.
    """
    return AuthService(db)
