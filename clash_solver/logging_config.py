import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from clash_solver.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str | None = None, log_dir: str | None = None) -> logging.Logger:
    """
    Wire the "clash_solver" logger tree (store, layout, catalog, snapshots,
    request log) to the console and a rotating file under LOG_DIR.
    Calling it again only updates the level.
    """
    level = (level or settings.LOG_LEVEL).upper()
    logger = logging.getLogger("clash_solver")
    logger.setLevel(level)

    if getattr(logger, "_clash_solver_configured", False):
        return logger

    log_dir = Path(log_dir or settings.LOG_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)

    file_handler = RotatingFileHandler(
        log_dir / settings.LOG_FILE,
        maxBytes=settings.LOG_MAX_BYTES,
        backupCount=settings.LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)

    logger.addHandler(console)
    logger.addHandler(file_handler)
    logger._clash_solver_configured = True
    return logger
