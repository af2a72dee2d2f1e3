"""Administrative endpoints over the alert dispatcher.

Thin adapters: they call the dispatcher and translate orchestration errors
into HTTP statuses (unknown alert 404, wrong state 409).
"""

from datetime import datetime, timedelta
from typing import List, NoReturn, Optional

from fastapi import APIRouter, HTTPException, Query, Request

from api.dependencies.rate_limits import get_limiter
from infrastructure.logging import get_module_logger
from infrastructure.services import AlertDispatcherDep, SettingsDep
from modules.alerts import (
    Alert,
    AlertError,
    AlertStats,
    AlertStatus,
    AlertType,
    DeliveryAttempt,
    NotFoundError,
)
from modules.alerts.models import utcnow
from modules.alerts.schemas import CancelResponse, CleanResponse, DispatchResponse

logger = get_module_logger()

router = APIRouter(prefix="/alerts", tags=["Alerts"])
limiter = get_limiter()


def _raise_http(exc: AlertError) -> NoReturn:
    status_code = 404 if isinstance(exc, NotFoundError) else 409
    logger.info(
        "alert_admin_request_rejected",
        error=type(exc).__name__,
        detail=str(exc),
        status_code=status_code,
    )
    raise HTTPException(status_code=status_code, detail=str(exc)) from exc


def _dispatch_response(dispatcher, alert_id: str, results) -> DispatchResponse:
    alert = dispatcher.get_alert(alert_id)
    return DispatchResponse(
        alert_id=alert_id,
        status=alert.status if alert else AlertStatus.FAILED,
        results=results,
    )


@router.get("/stats", response_model=AlertStats)
@limiter.limit("30/minute")
def get_stats(request: Request, dispatcher: AlertDispatcherDep):  # pylint: disable=unused-argument
    """Totals and counts by status, type and severity."""
    return dispatcher.get_stats()


@router.get("/", response_model=List[Alert])
@limiter.limit("30/minute")
def list_alerts(
    request: Request,  # pylint: disable=unused-argument
    dispatcher: AlertDispatcherDep,
    status: Optional[AlertStatus] = None,
    type: Optional[AlertType] = None,
):
    """List stored alerts, optionally filtered by status and type."""
    alerts = dispatcher.get_all_alerts()
    if status is not None:
        alerts = [a for a in alerts if a.status == status]
    if type is not None:
        alerts = [a for a in alerts if a.type == type]
    return alerts


@router.post("/clean", response_model=CleanResponse)
@limiter.limit("5/minute")
def clean_history(
    request: Request,  # pylint: disable=unused-argument
    dispatcher: AlertDispatcherDep,
    settings: SettingsDep,
    older_than: Optional[datetime] = None,
    older_than_days: Optional[int] = Query(default=None, ge=0),
):
    """Remove alerts created before a cutoff.

    The cutoff is ``older_than`` when given, else ``older_than_days`` ago,
    else the configured retention period.
    """
    if older_than is None:
        days = (
            older_than_days
            if older_than_days is not None
            else settings.alerts.history_retention_days
        )
        older_than = utcnow() - timedelta(days=days)
    removed = dispatcher.clean_history(older_than)
    return CleanResponse(older_than=older_than, removed=removed)


@router.get("/{alert_id}", response_model=Alert)
def get_alert(alert_id: str, dispatcher: AlertDispatcherDep):
    alert = dispatcher.get_alert(alert_id)
    if alert is None:
        _raise_http(NotFoundError(alert_id))
    return alert


@router.get("/{alert_id}/history", response_model=List[DeliveryAttempt])
def get_history(alert_id: str, dispatcher: AlertDispatcherDep):
    """Delivery attempts of an alert, oldest first."""
    if dispatcher.get_alert(alert_id) is None:
        _raise_http(NotFoundError(alert_id))
    return dispatcher.get_delivery_attempts(alert_id)


@router.post("/{alert_id}/retry", response_model=DispatchResponse)
@limiter.limit("10/minute")
def retry_alert(request: Request, alert_id: str, dispatcher: AlertDispatcherDep):  # pylint: disable=unused-argument
    try:
        results = dispatcher.retry(alert_id)
    except AlertError as exc:
        _raise_http(exc)
    return _dispatch_response(dispatcher, alert_id, results)


@router.post("/{alert_id}/send", response_model=DispatchResponse)
@limiter.limit("10/minute")
def send_alert_now(request: Request, alert_id: str, dispatcher: AlertDispatcherDep):  # pylint: disable=unused-argument
    """Send a pending or scheduled alert immediately."""
    try:
        results = dispatcher.send_now(alert_id)
    except AlertError as exc:
        _raise_http(exc)
    return _dispatch_response(dispatcher, alert_id, results)


@router.post("/{alert_id}/cancel", response_model=CancelResponse)
@limiter.limit("10/minute")
def cancel_alert(request: Request, alert_id: str, dispatcher: AlertDispatcherDep):  # pylint: disable=unused-argument
    try:
        cancelled = dispatcher.cancel(alert_id)
    except AlertError as exc:
        _raise_http(exc)
    if not cancelled:
        _raise_http(NotFoundError(alert_id))
    return CancelResponse(alert_id=alert_id, cancelled=True)


@router.post("/{alert_id}/delivered", response_model=Alert)
def mark_delivered(alert_id: str, dispatcher: AlertDispatcherDep):
    try:
        return dispatcher.mark_delivered(alert_id)
    except AlertError as exc:
        _raise_http(exc)


@router.post("/{alert_id}/read", response_model=Alert)
def mark_read(alert_id: str, dispatcher: AlertDispatcherDep):
    try:
        return dispatcher.mark_read(alert_id)
    except AlertError as exc:
        _raise_http(exc)
