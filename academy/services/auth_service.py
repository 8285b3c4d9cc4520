"""
Authentication service
Email/password accounts with revocable JWT sessions
"""
import hashlib
import hmac
import logging
import os
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

from jose import jwt, JWTError
from sqlalchemy import select
from sqlalchemy.orm import Session

from academy.config import settings
from academy.models import AuthSession as AuthSessionRow, UserAccount
from academy.services.exceptions import AuthenticationError, ValidationError

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
PBKDF2_ITERATIONS = 100_000
MIN_PASSWORD_LENGTH = 6

SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"


@dataclass(frozen=True)
class AuthSession:
    """An authenticated session as handed to callers"""
    access_token: str
    session_id: uuid.UUID
    user_id: uuid.UUID
    email: str
    expires_at: datetime


SessionCallback = Callable[[str, Optional[AuthSession], Session], None]


def hash_password(password: str) -> str:
    salt = os.urandom(16)
    pwd_hash = hashlib.pbkdf2_hmac("sha256", password.encode(), salt, PBKDF2_ITERATIONS)
    return salt.hex() + ":" + pwd_hash.hex()


def verify_password(password: str, stored: str) -> bool:
    try:
        salt_hex, hash_hex = stored.split(":")
    except ValueError:
        return False
    pwd_hash = hashlib.pbkdf2_hmac("sha256", password.encode(), bytes.fromhex(salt_hex), PBKDF2_ITERATIONS)
    return hmac.compare_digest(pwd_hash, bytes.fromhex(hash_hex))


def _normalize_email(email: str) -> str:
    return (email or "").strip().lower()


class AuthService:
    """
    Sign up, sign in, sign out and session lookup

    Tokens carry the session id; a token only validates while its
    session row exists, so signing out revokes it immediately.
    Listeners registered with on_session_change are told about every
    sign in and sign out.
    """

    def __init__(self):
        self._listeners: List[SessionCallback] = []

    def on_session_change(self, callback: SessionCallback) -> Callable[[], None]:
        """
        Register a listener called as callback(event, session, db)

        Returns:
            Function that unregisters the listener
        """
        self._listeners.append(callback)

        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _notify(self, event: str, session: Optional[AuthSession], db: Session):
        for listener in list(self._listeners):
            listener(event, session, db)

    def sign_up(self, db: Session, email: str, password: str) -> UserAccount:
        email = _normalize_email(email)
        if "@" not in email:
            raise ValidationError("A valid email address is required", field="email")
        if len(password or "") < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters", field="password"
            )
        if db.scalars(select(UserAccount).where(UserAccount.email == email)).first():
            raise ValidationError("Email already registered", field="email")

        account = UserAccount(email=email, password_hash=hash_password(password))
        db.add(account)
        db.commit()
        db.refresh(account)
        logger.info(f"Account created: {account.id}")
        return account

    def sign_in(self, db: Session, email: str, password: str) -> AuthSession:
        email = _normalize_email(email)
        account = db.scalars(select(UserAccount).where(UserAccount.email == email)).first()
        if not account or not verify_password(password or "", account.password_hash):
            logger.info(f"Invalid credentials for: {email}")
            raise AuthenticationError("Invalid login credentials")

        expires_at = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        row = AuthSessionRow(user_id=account.id, expires_at=expires_at)
        db.add(row)
        db.commit()
        db.refresh(row)

        token = jwt.encode(
            {"sub": str(account.id), "sid": str(row.id), "email": account.email, "exp": expires_at},
            settings.SECRET_KEY,
            algorithm=ALGORITHM,
        )
        session = AuthSession(
            access_token=token,
            session_id=row.id,
            user_id=account.id,
            email=account.email,
            expires_at=expires_at,
        )
        logger.info(f"Signed in: {account.id}")
        self._notify(SIGNED_IN, session, db)
        return session

    def get_session(self, db: Session, token: str) -> Optional[AuthSession]:
        """Resolve a bearer token to its live session, or None"""
        if not token:
            return None
        try:
            payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
            session_id = uuid.UUID(payload["sid"])
            user_id = uuid.UUID(payload["sub"])
        except (JWTError, KeyError, ValueError) as e:
            logger.debug(f"Token rejected: {type(e).__name__}")
            return None

        row = db.get(AuthSessionRow, session_id)
        if row is None or row.user_id != user_id:
            return None

        expires_at = row.expires_at
        if expires_at.tzinfo is None:
            # SQLite returns naive datetimes
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        if expires_at <= datetime.now(timezone.utc):
            return None

        return AuthSession(
            access_token=token,
            session_id=session_id,
            user_id=user_id,
            email=payload.get("email", ""),
            expires_at=expires_at,
        )

    def sign_out(self, db: Session, token: str) -> bool:
        session = self.get_session(db, token)
        if session is None:
            return False
        row = db.get(AuthSessionRow, session.session_id)
        db.delete(row)
        db.commit()
        logger.info(f"Signed out: {session.user_id}")
        self._notify(SIGNED_OUT, session, db)
        return True


# Global instance
auth_service = AuthService()
