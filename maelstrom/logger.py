"""
Logging setup shared by the API server and the capture CLI.
"""

import logging
from pathlib import Path
from typing import List, Optional

# per-request transport logs
NOISY_LOGGERS = ("urllib3", "httpx", "httpcore")


def setup_logger(
    log_level: str = "INFO", log_file: Optional[str] = "logs/maelstrom.log"
) -> None:
    """
    Configure the root logger.

    Args:
        log_level: log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: path of the log file, or None to log to stderr only
    """
    level = getattr(logging, log_level.upper())
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.insert(0, logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )

    # transport logs only at DEBUG
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if level <= logging.DEBUG else logging.WARNING)
