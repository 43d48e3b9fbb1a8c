from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

PACKAGE_LOGGER = "inventory_insights"


def configure_logging(level: str = "INFO") -> logging.Logger:
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    if logger.handlers:
        return logger
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    logger.addHandler(handler)
    return logger


def log_action(
    logger: logging.Logger,
    module: str,
    action: str,
    actor_role: str | None,
    trace_id: str | None,
    outcome: str,
) -> None:
    logger.info(
        json.dumps(
            {
                "ts": datetime.now(timezone.utc).isoformat(),
                "module": module,
                "action": action,
                "actor_role": actor_role,
                "trace_id": trace_id,
                "outcome": outcome,
            }
        )
    )
