"""Account management for the logged-in user."""

from __future__ import annotations

from fastapi import APIRouter, Request
from racelog.accounts import change_password, change_username, delete_account

from backend.api.dependencies import CurrentUser, Store
from backend.api.schemas.user import (
    AccountDelete,
    MessageResponse,
    PasswordUpdate,
    UsernameUpdate,
)

router = APIRouter()


@router.put("/username")
async def update_username(
    body: UsernameUpdate, current_user: CurrentUser, store: Store
) -> MessageResponse:
    user = change_username(store, current_user.user_id, body.username)
    return MessageResponse(message="Username updated successfully", username=user["username"])


@router.put("/password")
def update_password(
    body: PasswordUpdate, current_user: CurrentUser, store: Store
) -> MessageResponse:
    change_password(store, current_user.user_id, body.current_password, body.new_password)
    return MessageResponse(message="Password changed successfully")


@router.delete("")
def remove_account(
    body: AccountDelete, request: Request, current_user: CurrentUser, store: Store
) -> MessageResponse:
    """Delete the account and every record it owns, then end the session.

    The password must be re-entered; nothing is deleted if it is wrong.
    """
    delete_account(store, current_user.user_id, body.password)
    request.session.clear()
    return MessageResponse(message="Account deleted successfully")
