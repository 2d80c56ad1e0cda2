import logging
import os
from logging.handlers import TimedRotatingFileHandler

LOG_FORMAT = "[%(asctime)s][%(levelname)s][%(filename)s:%(lineno)d] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_logger(name: str = "logconv", level=logging.INFO, log_dir=None, backup_days: int = 7):
    """
    Logger for conversion runs.

    Always logs to the console; with log_dir set it also writes
    <log_dir>/<name>.log, rolled over at midnight.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # handlers are attached once per logger name
    if logger.handlers:
        return logger

    fmt = logging.Formatter(LOG_FORMAT, DATE_FORMAT)
    handlers = [logging.StreamHandler()]
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        handlers.append(TimedRotatingFileHandler(
            os.path.join(log_dir, f"{name}.log"),
            when="midnight", backupCount=backup_days, encoding="utf-8",
        ))

    for handler in handlers:
        handler.setFormatter(fmt)
        logger.addHandler(handler)
    return logger
