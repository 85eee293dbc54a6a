import json
import logging
from datetime import datetime, timezone


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel(logging.INFO)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    return logger


def log_event(
    logger: logging.Logger,
    module: str,
    action: str,
    outcome: str,
    *,
    level: int = logging.INFO,
    **context,
) -> None:
    payload = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "level": logging.getLevelName(level),
        "module": module,
        "action": action,
        "outcome": outcome,
    }
    payload.update({key: value for key, value in context.items() if value is not None})
    logger.log(level, json.dumps(payload, default=str))
