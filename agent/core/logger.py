import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from datetime import datetime
from typing import Optional

from config.settings import settings

# twikit 내부 HTTP 로그 (요청마다 INFO) 는 WARNING 이상만
NOISY_LOGGERS = ("httpx", "httpcore")

FORMAT = '[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def log_file_path(log_dir: Optional[str] = None) -> str:
    """swiper_YYYYMMDD.log (하루 단위)"""
    return os.path.join(log_dir or settings.LOG_DIR, f"swiper_{datetime.now().strftime('%Y%m%d')}.log")


def setup_logger(
    name: str = "agent",
    level: Optional[str] = None,
    log_dir: Optional[str] = None,
    console: bool = True,
) -> logging.Logger:
    """
    Configure the root "agent" logger once; modules log through children
    ("agent.swipe.queue", "agent.api", ...) which propagate here.

    console=False keeps stdout free for the terminal card view (file only).
    """
    logger = logging.getLogger(name)
    logger.setLevel(level or settings.LOG_LEVEL)

    if logger.handlers:
        return logger

    formatter = logging.Formatter(FORMAT, datefmt=DATE_FORMAT)

    # 1. File Handler - 10MB x 5
    path = log_file_path(log_dir)
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    file_handler = RotatingFileHandler(path, maxBytes=10*1024*1024, backupCount=5, encoding='utf-8')
    file_handler.setFormatter(formatter)
    file_handler.setLevel(logging.DEBUG)
    logger.addHandler(file_handler)

    # 2. Console Handler
    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        console_handler.setLevel(logging.INFO)
        logger.addHandler(console_handler)

    for noisy in NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.WARNING)

    return logger
