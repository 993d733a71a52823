import logging
from pathlib import Path
from typing import Optional, Union

from typedwire.config import get_settings


def get_logger(name: str, level: Optional[Union[int, str]] = None) -> logging.Logger:
    """Get a named logger with standard formatting.

    Example:
        logger = get_logger(__name__)
        logger.info("This is an info message.")

    The level defaults to ``TYPEDWIRE_LOG_LEVEL``. A file handler is added only
    when ``TYPEDWIRE_LOG_DIR`` is set.

    Returns:
        logging.Logger: Configured logger instance.
    """
    settings = get_settings()
    if level is None:
        level = settings.log_level
    logger = logging.getLogger(name)

    # avoid adding duplicate handlers if called repeatedly (common in tests)
    if logger.handlers:
        logger.setLevel(level)
        return logger

    logs_dir = None
    if settings.log_dir:
        logs_dir = Path(settings.log_dir)
        try:
            logs_dir.mkdir(parents=True, exist_ok=True)
        except OSError:
            # fall back to streaming only
            logs_dir = None

    formatter = logging.Formatter(
        '%(asctime)s     || %(name)s \n%(levelname)s   || %(message)s \n',
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    if logs_dir is not None:
        filehandler = logging.FileHandler(str(logs_dir / f"{name}.log"), encoding="utf-8")
        filehandler.setFormatter(formatter)
        logger.addHandler(filehandler)

    logger.setLevel(level)
    # stop passing records to the root logger (avoid duplicated messages)
    logger.propagate = False
    logger.debug("'%s' initialized with level %s", name, logging.getLevelName(logger.level))
    return logger
