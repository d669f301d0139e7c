import logging
import sys
from typing import Optional

from billing_docs.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(log_level: Optional[str] = None) -> None:
    """애플리케이션 전역 로깅을 설정한다.

    stdout 콘솔 핸들러 하나만 루트 로거에 붙인다.
    레벨은 인자 > settings.log_level 순서로 결정된다.
    """

    level = (log_level or settings.log_level or "INFO").upper()

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level, logging.INFO))
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    root_logger.addHandler(handler)

    # reportlab/PIL 디버그 로그는 너무 많다
    logging.getLogger("PIL").setLevel(logging.WARNING)
