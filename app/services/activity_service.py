from typing import Optional, Dict, Any
import logging
import uuid

from app.models.activity_log import ActivityLog

logger = logging.getLogger(__name__)

class ActivityService:
    @staticmethod
    def log_task(
        action: str,
        entity_type: str,
        user_id: Optional[str] = None,
        entity_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None
    ):
        """
        Background task to write activity log.
        Creates its own DB session to ensure persistence after request logic finishes.
        """
        from app.core.database import SessionLocal
        db = SessionLocal()
        try:
            db.add(ActivityLog(
                id=str(uuid.uuid4()),
                user_id=user_id,
                action=action,
                entity_type=entity_type,
                entity_id=entity_id,
                details=details,
                ip_address=ip_address,
                user_agent=user_agent
            ))
            db.commit()
        except Exception:
            logger.exception("Failed to write activity log for %s %s", action, entity_type)
            db.rollback()
        finally:
            db.close()

    @staticmethod
    def log(
        action: str,
        entity_type: str,
        entity_id: str = None,
        user_id: str = None,
        details: dict = None,
        request=None,
        background_tasks=None,
    ):
        """
        Record an audit entry. Written after the response is sent when
        ``background_tasks`` is given, immediately otherwise.
        """
        ip_address = None
        user_agent = None
        if request is not None:
            ip_address = request.client.host if request.client else None
            user_agent = request.headers.get("user-agent")

        kwargs = dict(
            action=action,
            entity_type=entity_type,
            user_id=user_id,
            entity_id=entity_id,
            details=details,
            ip_address=ip_address,
            user_agent=user_agent,
        )
        if background_tasks is not None:
            background_tasks.add_task(ActivityService.log_task, **kwargs)
        else:
            ActivityService.log_task(**kwargs)
