"""
Request dependencies: store, authenticated session and profile
"""
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from academy.database import SessionLocal, get_db
from academy.models import Profile
from academy.services.auth_service import AuthSession, auth_service
from academy.services.exceptions import AuthenticationError, PermissionDeniedError
from academy.store import Store


def get_store(db: Session = Depends(get_db)) -> Store:
    return Store(db)


def get_bearer_token(request: Request) -> str:
    header = request.headers.get("authorization", "")
    if header.lower().startswith("bearer "):
        return header[7:].strip()
    return ""


def identify_session_user(request: Request) -> None:
    """
    Set request.state.user_id when the bearer token belongs to a live session

    Runs in middleware, ahead of the request's own database session.
    """
    token = get_bearer_token(request)
    if not token:
        return
    db = SessionLocal()
    try:
        session = auth_service.get_session(db, token)
    finally:
        db.close()
    if session is not None:
        request.state.user_id = session.user_id


def get_auth_session(
    request: Request,
    db: Session = Depends(get_db)
) -> AuthSession:
    session = auth_service.get_session(db, get_bearer_token(request))
    if session is None:
        raise AuthenticationError()
    request.state.user_id = session.user_id
    return session


def get_current_profile(
    session: AuthSession = Depends(get_auth_session),
    store: Store = Depends(get_store)
) -> Profile:
    """The signed-in learner's profile, created on first use if absent"""
    return store.ensure_profile(session.user_id, session.email)


def get_manager(profile: Profile = Depends(get_current_profile)) -> Profile:
    if profile.role != "manager":
        raise PermissionDeniedError()
    return profile
