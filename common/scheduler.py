"""
Background task scheduler for the vacation sweep and payment status refresh.
Uses APScheduler to run tasks in the background without requiring external services.
"""
import logging
import atexit
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from django.conf import settings
from django.utils import timezone

logger = logging.getLogger(__name__)

# Global scheduler instance
scheduler = None


def process_vacations_job():
    """
    Finalize notice-period residents whose vacation date has arrived.
    Runs at each hour in VACATION_SWEEP_HOURS (00:00 and 06:00 by default).
    """
    from residents.services import VacationScheduler

    try:
        logger.info("Starting scheduled vacation sweep...")
        result = VacationScheduler().process_overdue_vacations()
        logger.info(
            f"Scheduled vacation sweep completed: {result.processed_count} processed, "
            f"{len(result.skipped)} skipped, {result.failed_count} failed"
        )
        return result
    except Exception as e:
        logger.error(f"Error in scheduled vacation sweep: {str(e)}", exc_info=True)


def refresh_payment_status_job():
    """
    Recompute cached payment status for every active branch.
    Runs daily at PAYMENT_STATUS_REFRESH_TIME (00:01 by default).
    """
    from branches.models import Branch
    from payments.services import PaymentService

    service = PaymentService()
    changed = 0
    for branch_id in Branch.objects.filter(is_active=True).values_list('id', flat=True):
        try:
            changed += service.refresh_all_for_branch(branch_id)
        except Exception as e:
            logger.error(f"Error refreshing payment status for branch #{branch_id}: {str(e)}", exc_info=True)
    logger.info(f"Scheduled payment status refresh completed: {changed} resident(s) changed")
    return changed


def start_scheduler():
    """
    Initialize and start the background scheduler.
    This should be called once when Django starts.
    """
    global scheduler

    if scheduler is not None and scheduler.running:
        logger.warning("Scheduler is already running")
        return

    try:
        scheduler = BackgroundScheduler()
        tz = timezone.get_current_timezone()

        sweep_hours = ','.join(str(hour) for hour in getattr(settings, 'VACATION_SWEEP_HOURS', [0, 6]))
        scheduler.add_job(
            process_vacations_job,
            trigger=CronTrigger(hour=sweep_hours, minute=0, timezone=tz),
            id='process_vacations',
            name='Process Overdue Vacations',
            replace_existing=True,
            max_instances=1,  # Prevent overlapping runs
            coalesce=True  # Combine multiple pending executions into one
        )

        refresh_hour, refresh_minute = getattr(settings, 'PAYMENT_STATUS_REFRESH_TIME', (0, 1))
        scheduler.add_job(
            refresh_payment_status_job,
            trigger=CronTrigger(hour=refresh_hour, minute=refresh_minute, timezone=tz),
            id='refresh_payment_status',
            name='Refresh Payment Status',
            replace_existing=True,
            max_instances=1,
            coalesce=True
        )

        scheduler.start()
        logger.info("Background scheduler started successfully")
        logger.info(f"Vacation sweep scheduled at hours {sweep_hours} ({tz})")
        logger.info(f"Payment status refresh scheduled at {refresh_hour:02d}:{refresh_minute:02d} ({tz})")

        atexit.register(lambda: stop_scheduler())

    except Exception as e:
        logger.error(f"Failed to start scheduler: {str(e)}", exc_info=True)
        scheduler = None


def stop_scheduler():
    """
    Stop the background scheduler.
    Should be called when Django shuts down.
    """
    global scheduler

    if scheduler is not None and scheduler.running:
        try:
            scheduler.shutdown(wait=True)
            logger.info("Background scheduler stopped")
        except Exception as e:
            logger.error(f"Error stopping scheduler: {str(e)}", exc_info=True)
        finally:
            scheduler = None
