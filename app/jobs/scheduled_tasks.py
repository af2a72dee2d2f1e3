import threading
import time
from datetime import timedelta

import schedule

from infrastructure.configuration import Settings
from infrastructure.logging import get_module_logger
from modules.alerts import AlertDispatcher
from modules.alerts.models import utcnow

logger = get_module_logger()


def safe_run(job):
    def wrapper(*args, **kwargs):
        try:
            job(*args, **kwargs)
        except Exception as e:  # pylint: disable=broad-except
            logger.error(
                "safe_run_error",
                function=job.__name__,
                module=job.__module__,
                error=str(e),
                job_args=args,
                job_kwargs=kwargs,
            )

    return wrapper


def init(dispatcher: AlertDispatcher, settings: Settings):
    alerts = settings.alerts
    logger.info(
        "scheduled_tasks_initialized",
        dispatch_interval_seconds=alerts.scheduler_interval_seconds,
        history_retention_days=alerts.history_retention_days,
    )

    schedule.every(alerts.scheduler_interval_seconds).seconds.do(
        safe_run(dispatch_scheduled_alerts), dispatcher=dispatcher
    )
    schedule.every(5).minutes.do(safe_run(scheduler_heartbeat))
    schedule.every().day.at("03:00").do(
        safe_run(clean_alert_history),
        dispatcher=dispatcher,
        retention_days=alerts.history_retention_days,
    )


def scheduler_heartbeat():
    logger.info("running_scheduler_heartbeat", time=time.ctime())


def dispatch_scheduled_alerts(dispatcher: AlertDispatcher):
    dispatched = dispatcher.dispatch_due()
    if dispatched:
        logger.info("scheduled_alerts_sent", count=len(dispatched))


def clean_alert_history(dispatcher: AlertDispatcher, retention_days: int):
    cutoff = utcnow() - timedelta(days=retention_days)
    removed = dispatcher.clean_history(cutoff)
    logger.info("alert_history_retention_applied", removed=removed, cutoff=cutoff.isoformat())


def run_continuously(interval=1):
    """Continuously run, while executing pending jobs at each
    elapsed time interval.
    @return cease_continuous_run: threading. Event which can
    be set to cease continuous run. Missed jobs are not run
    more than once: a job registered every second with a one
    minute interval runs once per minute, not sixty times.
    """
    cease_continuous_run = threading.Event()

    class ScheduleThread(threading.Thread):
        @classmethod
        def run(cls):
            while not cease_continuous_run.is_set():
                schedule.run_pending()
                time.sleep(interval)

    continuous_thread = ScheduleThread(daemon=True)
    continuous_thread.start()
    return cease_continuous_run
