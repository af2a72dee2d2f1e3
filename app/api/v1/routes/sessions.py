"""Realtime session endpoints used by the web client.

The client registers its session (and browser notification permission),
then polls its queue for in-app toasts and browser notifications.
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from infrastructure.services import SessionRegistryDep
from modules.alerts.schemas import (
    ConnectSessionRequest,
    DrainResponse,
    PermissionUpdateRequest,
    SessionResponse,
)

router = APIRouter(prefix="/sessions", tags=["Sessions"])


@router.post("/{user_id}", response_model=SessionResponse)
def connect_session(
    user_id: str, body: ConnectSessionRequest, sessions: SessionRegistryDep
):
    session = sessions.connect(
        user_id,
        browser_supported=body.browser_supported,
        permission=body.permission,
    )
    return SessionResponse(
        user_id=user_id,
        connected=True,
        can_show_browser_notifications=session.can_show_browser_notifications,
    )


@router.put("/{user_id}/permission", response_model=SessionResponse)
def update_permission(
    user_id: str, body: PermissionUpdateRequest, sessions: SessionRegistryDep
):
    if not sessions.update_permission(user_id, body.permission):
        raise HTTPException(status_code=404, detail=f"No session for user '{user_id}'")
    return SessionResponse(
        user_id=user_id,
        connected=True,
        can_show_browser_notifications=sessions.can_show_browser_notifications(user_id),
    )


@router.delete("/{user_id}", response_model=SessionResponse)
def disconnect_session(user_id: str, sessions: SessionRegistryDep):
    if not sessions.disconnect(user_id):
        raise HTTPException(status_code=404, detail=f"No session for user '{user_id}'")
    return SessionResponse(user_id=user_id, connected=False)


@router.get("/{user_id}/messages", response_model=DrainResponse)
def drain_messages(
    user_id: str,
    sessions: SessionRegistryDep,
    limit: Optional[int] = Query(default=None, ge=1),
):
    """Return and remove the queued messages of a connected user."""
    if not sessions.is_connected(user_id):
        raise HTTPException(status_code=404, detail=f"No session for user '{user_id}'")
    return DrainResponse(
        user_id=user_id, messages=sessions.drain(user_id, limit=limit), limit=limit
    )
