import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ..config import settings
from ..db import get_db

logger = logging.getLogger("agricraft")

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(level=level or settings.LOG_LEVEL, format=LOG_FORMAT)


# Log failed/incomplete stages to Mongo; never raises
async def log_error(
    stage: str,
    error: str,
    extra: Optional[Dict[str, Any]] = None,
    db=None,
):
    logger.error("[%s] %s", stage, error)
    try:
        db = db if db is not None else get_db()
        await db["logs"].insert_one({
            "created_at": datetime.now(timezone.utc),
            "stage": stage,
            "error": error,
            "extra": extra or {},
        })
    except Exception as e:
        logger.warning("[log_error] could not persist error log: %s", e)
