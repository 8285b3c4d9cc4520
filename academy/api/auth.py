"""
Authentication API endpoints
"""
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
import logging

from academy.database import get_db
from academy.deps import get_auth_session, get_bearer_token
from academy.schemas.auth import Credentials, SignUpResponse, SessionResponse
from academy.services.auth_service import AuthSession, auth_service

router = APIRouter(prefix="/api/auth", tags=["auth"])
logger = logging.getLogger(__name__)


def _session_response(session: AuthSession) -> SessionResponse:
    return SessionResponse(
        access_token=session.access_token,
        user_id=session.user_id,
        email=session.email,
        expires_at=session.expires_at,
    )


@router.post("/signup", response_model=SignUpResponse, status_code=201)
async def sign_up(credentials: Credentials, db: Session = Depends(get_db)):
    """Create an account; the learner signs in separately"""
    account = auth_service.sign_up(db, credentials.email, credentials.password)
    return SignUpResponse(user_id=account.id, email=account.email)


@router.post("/signin", response_model=SessionResponse)
async def sign_in(credentials: Credentials, db: Session = Depends(get_db)):
    """
    Sign in with email and password

    Creates the learner's profile on first sign in.
    """
    session = auth_service.sign_in(db, credentials.email, credentials.password)
    return _session_response(session)


@router.post("/signout")
async def sign_out(request: Request, db: Session = Depends(get_db)):
    """Revoke the current session token"""
    signed_out = auth_service.sign_out(db, get_bearer_token(request))
    return {"signed_out": signed_out}


@router.get("/session", response_model=SessionResponse)
async def get_session(session: AuthSession = Depends(get_auth_session)):
    return _session_response(session)
