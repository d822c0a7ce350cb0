from django.apps import AppConfig
import logging
import os
import sys

logger = logging.getLogger(__name__)


class CommonConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'common'
    verbose_name = 'Common'

    def ready(self):
        """
        Start the vacation sweep and payment refresh scheduler.
        Only runs in the serving process, never during migrations or tests.
        """
        from django.conf import settings

        if not getattr(settings, 'ENABLE_BACKGROUND_SCHEDULER', False):
            return

        # runserver's autoreloader parent process has RUN_MAIN unset
        if 'runserver' in sys.argv and os.environ.get('RUN_MAIN') != 'true':
            return

        if len(sys.argv) > 1 and sys.argv[1] in ['migrate', 'makemigrations', 'test', 'collectstatic', 'shell',
                                                  'process_vacations', 'refresh_payment_status']:
            return

        try:
            from .scheduler import start_scheduler
            start_scheduler()
            logger.info("Background task scheduler initialized")
        except Exception as e:
            logger.error(f"Failed to initialize scheduler: {str(e)}", exc_info=True)
