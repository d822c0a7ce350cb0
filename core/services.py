"""
Base service classes.
Services contain business logic and orchestrate between repositories.
"""
from typing import Optional
from datetime import date
from django.utils import timezone
import logging

from core.events import emit_activity

logger = logging.getLogger(__name__)


class BaseService:
    """
    Base service class providing common functionality.
    Services should contain business logic and use repositories for data access.
    """

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__module__)

    @staticmethod
    def resolve_today(today: Optional[date] = None) -> date:
        """Business date for an operation; callers may pin it explicitly"""
        return today or timezone.localdate()

    def log_info(self, message: str, **context):
        """Log info message with context"""
        self.logger.info(f"{message} | Context: {context}")

    def log_warning(self, message: str, **context):
        """Log warning message with context"""
        self.logger.warning(f"{message} | Context: {context}")

    def log_error(self, message: str, error: Exception = None, **context):
        """Log error message with context"""
        if error:
            self.logger.error(f"{message} | Context: {context}", exc_info=error)
        else:
            self.logger.error(f"{message} | Context: {context}")

    def emit(self, event_type, entity, user=None, branch_id=None, description="", metadata=None):
        """Publish an activity event once the current transaction commits"""
        emit_activity(
            event_type=event_type,
            entity_type=entity.__class__.__name__,
            entity_id=entity.pk,
            user=user,
            branch_id=branch_id,
            description=description,
            metadata=metadata,
        )
