import logging
from flask import request
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class AuditLogger:
    """Log important actions for audit trail"""

    @staticmethod
    def log_action(
        user_id: str,
        action: str,
        entity_type: str = None,
        entity_id: str = None,
        description: str = None,
        changes: dict = None
    ):
        """
        Record an action, taking IP and user agent from the current request.

        Audit failures are logged and never break the calling request.
        """
        from jetsetgo.models import AuditLog
        from jetsetgo.extensions import db

        log = AuditLog(
            user_id=user_id,
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            description=description,
            changes=changes,
            ip_address=request.remote_addr,
            user_agent=(request.headers.get('User-Agent') or '')[:500]
        )

        try:
            db.session.add(log)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Failed to write audit log '{action}': {str(e)}")
            return None
        return log
