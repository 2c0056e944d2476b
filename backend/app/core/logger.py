"""
로거(Logger) 모듈

- 모듈마다 get_logger(__name__)로 받아서 쓴다
- 레벨은 settings.LOG_LEVEL (.env의 LOG_LEVEL=DEBUG 등)
- 같은 이름으로 여러 번 불려도 핸들러는 한 번만 붙임
"""

import logging

from backend.app.core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_level(name: str) -> int:
    # 모르는 이름이면 INFO
    level = logging.getLevelName(str(name).strip().upper())
    return level if isinstance(level, int) else logging.INFO


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger  # 이미 설정되어 있으면 중복 설정 방지

    logger.setLevel(resolve_level(settings.LOG_LEVEL))

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)
    return logger
