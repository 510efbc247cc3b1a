"""Local sign-in state.

There is no account backend. Signing in only validates the form fields and
writes a session file; signing out deletes it.
"""

import logging
from datetime import UTC, datetime
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


class SessionError(Exception):
    """Sign-in, registration or session state error."""

    pass


class Session(BaseModel):
    """Persisted session."""

    authenticated: bool = True
    email: str | None = Field(default=None, description="Kept only with remember-me")
    signed_in_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


def password_strength(password: str) -> tuple[int, str]:
    """Rough strength score (0-100) and label for a password."""
    if not password:
        return 0, ""
    elif len(password) < 6:
        return 25, "Weak"
    elif len(password) < 8:
        return 50, "Fair"
    elif len(password) < 12:
        return 75, "Good"
    else:
        return 100, "Strong"


class SessionStore:
    """Reads and writes the session file."""

    def __init__(self, path: Path):
        self.path = path

    def load(self) -> Session | None:
        if not self.path.exists():
            return None
        try:
            return Session.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (ValidationError, OSError, UnicodeDecodeError):
            logger.warning("Ignoring unreadable session file: %s", self.path)
            return None

    @property
    def is_authenticated(self) -> bool:
        session = self.load()
        return session is not None and session.authenticated

    def login(self, email: str, password: str, remember: bool = False) -> Session:
        """Sign in. Any non-empty credentials are accepted."""
        if not email.strip() or not password:
            raise SessionError("Please fill in all required fields.")

        session = Session(email=email.strip() if remember else None)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(session.model_dump_json(), encoding="utf-8")
        logger.debug("Session written to %s", self.path)
        return session

    def register(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        confirm_password: str,
        agree_to_terms: bool,
    ) -> str:
        """Validate a registration form. Returns the normalized email.

        Registration does not sign in; the user logs in afterwards.
        """
        if not (first_name.strip() and last_name.strip() and email.strip() and password):
            raise SessionError("Please fill in all required fields.")
        if password != confirm_password:
            raise SessionError("Passwords do not match. Please try again.")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise SessionError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long.")
        if not agree_to_terms:
            raise SessionError("Please agree to the terms and conditions.")
        return email.strip()

    def logout(self) -> bool:
        """Delete the session. Returns True if one existed."""
        if self.path.exists():
            self.path.unlink()
            return True
        return False
