from fastapi import APIRouter, Request

from api.dependencies.rate_limits import get_limiter
from infrastructure.services import AlertDispatcherDep, SettingsDep

router = APIRouter(tags=["System"])
limiter = get_limiter()


# Load balancer healthchecks hit these every few seconds, hence the generous limit.
@router.get("/version")
@limiter.limit("50/minute")
def get_version(request: Request, settings: SettingsDep):  # pylint: disable=unused-argument
    """Get the version of the application."""
    return {"version": settings.GIT_SHA}


@router.get("/health")
@limiter.limit("50/minute")
def get_health(request: Request, dispatcher: AlertDispatcherDep):  # pylint: disable=unused-argument
    """Healthcheck endpoint, including the observers attached to the dispatcher."""
    return {
        "status": "ok",
        "observers": [observer.id for observer in dispatcher.get_observers()],
    }
