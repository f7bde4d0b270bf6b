"""Auth router: registration, login and the signed session cookie."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from racelog.accounts import authenticate, get_user, register_user
from racelog.errors import NotFoundError

from backend.api.dependencies import Store
from backend.api.schemas.user import AuthStatus, Credentials, MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter()


# Hashing handlers are sync so FastAPI runs them in its threadpool
@router.post("/register", status_code=201)
def register(body: Credentials, store: Store) -> MessageResponse:
    """Create an account.  Does not log the new user in."""
    register_user(store, body.username, body.password)
    return MessageResponse(message="User registered successfully")


@router.post("/login")
def login(body: Credentials, request: Request, store: Store) -> MessageResponse:
    """Check credentials and bind the user to the session cookie."""
    user = authenticate(store, body.username, body.password)
    request.session["user_id"] = user["id"]
    logger.info("User %s logged in", user["id"])
    return MessageResponse(message="Login successful", username=user["username"])


@router.post("/logout")
async def logout(request: Request) -> MessageResponse:
    request.session.clear()
    return MessageResponse(message="Logged out successfully")


@router.get("/check")
async def check(request: Request, store: Store) -> AuthStatus:
    """Report whether the session cookie belongs to an existing user."""
    user_id = request.session.get("user_id")
    if user_id:
        try:
            user = get_user(store, user_id)
        except NotFoundError:
            request.session.clear()
        else:
            return AuthStatus(authenticated=True, username=user["username"])
    return AuthStatus(authenticated=False)
