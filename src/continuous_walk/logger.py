import os
import sys
from loguru import logger

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}"


def setup_logging(level: str = "INFO", log_dir: str = None,
                  rotation: str = "1 day", retention: str = "30 days") -> None:
    """
    Configure the global loguru logger

    - stderr sink at the given level
    - optional daily file sink under log_dir, rotated and pruned
    Calling it again replaces the previous sinks.
    """
    logger.remove()
    logger.add(sys.stderr, level=level, format=LOG_FORMAT)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        logger.add(
            sink=os.path.join(log_dir, "{time:YYYY-MM-DD}.log"),
            rotation=rotation,
            retention=retention,
            level=level,
            format=LOG_FORMAT,
            backtrace=True,
            diagnose=True,
        )

    logger.debug("Logger initialized (level={}, log_dir={})", level, log_dir)
