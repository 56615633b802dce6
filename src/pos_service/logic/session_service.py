"""
Business logic for terminating user sessions.
"""

from typing import Optional

from pos_service.dal import DalHandler
from pos_service.handlers.utils.observability import add_count_metric, logger, tracer


class SessionService:
    """Business logic service for session termination."""

    def __init__(self, dal_handler: DalHandler):
        self.dal = dal_handler

    @tracer.capture_method
    def logout(self, session_id: Optional[str]) -> bool:
        """
        Terminate the session identified by ``session_id``.

        A missing id or an id with no matching row counts as already logged
        out; neither is an error.

        Args:
            session_id: Session id taken from the request cookie, if any

        Returns:
            True if a session row was removed
        """
        add_count_metric("LogoutCount")

        if not session_id:
            logger.info("Logout without session cookie")
            return False

        removed = self.dal.delete_session_by_id(session_id) > 0
        if removed:
            add_count_metric("SessionDeleted")

        logger.info("Logout processed", extra={"session_removed": removed})
        return removed
