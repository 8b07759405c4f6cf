# growth_garden/core/logging_tracking.py

import logging
from typing import Any, Dict, Optional
from logging.handlers import RotatingFileHandler

from growth_garden.core.utils import utc_now

# Configure module logger
logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

# --- Log-Once-Per-Session Utility ---
_logged_once_set = set()
def log_once_per_session(level: str, msg: str):
    """
    Log a message only once per process/session, regardless of how many times it's called.
    Usage: log_once_per_session('warning', 'Storage is not persistent')
    """
    key = f"{level}:{msg}"
    if key in _logged_once_set:
        return
    _logged_once_set.add(key)
    if level.lower() == 'warning':
        logger.warning(msg)
    elif level.lower() == 'error':
        logger.error(msg)
    elif level.lower() == 'info':
        logger.info(msg)
    else:
        logger.log(logging.getLevelName(level.upper()), msg)

def setup_global_rotating_error_log(logfile: str = 'error.log', max_bytes: int = 1_000_000, backup_count: int = 3):
    root_logger = logging.getLogger()
    # Only add if not already present
    if not any(isinstance(h, RotatingFileHandler) and getattr(h, 'baseFilename', None) == logfile for h in root_logger.handlers):
        handler = RotatingFileHandler(logfile, maxBytes=max_bytes, backupCount=backup_count)
        handler.setLevel(logging.WARNING)
        handler.setFormatter(logging.Formatter('%(asctime)s %(levelname)s %(name)s: %(message)s'))
        root_logger.addHandler(handler)


class GardenActivityLogger:
    """
    Logs garden mutations (goals planted, actions completed, reflections,
    habit check-ins) as structured log records. Nothing is persisted locally;
    the remote API owns the data, this is the client-side footprint.
    """

    def __init__(self, user_id: Optional[str] = None):
        self.user_id = user_id

    def log_event(
        self,
        resource: str,  # e.g. 'goals', 'actions', 'daily-habits'
        event_type: str,  # e.g. 'created', 'completed', 'reflected', 'deleted'
        resource_id: Optional[str] = None,
        succeeded: bool = True,
        event_metadata: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Logs one event and returns the record that was logged."""
        if not resource or not event_type:
            logger.error("Resource and event type are required for logging a garden event.")
            return {}

        record = {
            "resource": resource,
            "event_type": event_type,
            "resource_id": resource_id,
            "user_id": self.user_id,
            "succeeded": succeeded,
            "timestamp": utc_now().isoformat(),
            "event_metadata": event_metadata or {},
        }
        if succeeded:
            logger.info("Garden event %s/%s (id=%s, user=%s)", resource, event_type, resource_id, self.user_id)
        else:
            logger.warning(
                "Garden event %s/%s failed (id=%s, user=%s): %s",
                resource, event_type, resource_id, self.user_id, record["event_metadata"].get("error"),
            )
        return record
