import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(module)s.%(funcName)s:%(lineno)d] - %(message)s"


def setup_logging(log_level: int | str = logging.INFO, logger_name: str = "member_search") -> logging.Logger:
    """
    Configure the package logger with a console handler.

    Args:
        log_level: Minimum level to emit (e.g. logging.INFO or "DEBUG").
        logger_name: Logger to configure; module loggers under it inherit the handler.

    Returns:
        The configured logger.
    """
    logger = logging.getLogger(logger_name)

    # Repeated startups (tests, reloads) must not stack handlers
    if logger.handlers:
        logger.setLevel(log_level)
        return logger

    logger.setLevel(log_level)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return logger
