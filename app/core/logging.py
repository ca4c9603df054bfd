"""전역 로깅 설정

모듈에서는 get_logger(__name__)로 로거를 얻고, 부가 정보는 extra로 전달합니다.

    logger.warning("Webhook URL rejected", extra={"endpoint_id": endpoint.id})

- 개발 환경: 컬러 한 줄 로그 (extra는 key=value로 뒤에 붙음)
- 그 외: JSON 한 줄 로그 (extra는 최상위 필드)

모든 레코드에는 현재 요청 ID(request_id)가 붙습니다. 부수 효과 태스크는
생성 시점의 컨텍스트를 복사하므로 원래 요청 ID가 그대로 남습니다.
"""

import json
import logging
import sys
from typing import Any

from app.core.config import settings

# LogRecord 기본 속성 (extra 필드 구분용)
RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime", "request_id"}


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in RESERVED_ATTRS and not key.startswith("_")
    }


class RequestContextFilter(logging.Filter):
    """레코드에 request_id 추가"""

    def filter(self, record: logging.LogRecord) -> bool:
        # 미들웨어 패키지가 이 모듈을 import하므로 지연 import
        from app.core.middlewares.context import get_request_id

        record.request_id = get_request_id() or "-"
        return True


class ColoredFormatter(logging.Formatter):
    """컬러 로그 포맷터 (개발 환경용)"""

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.RESET)
        levelname = record.levelname
        record.levelname = f"{color}{levelname}{self.RESET}"
        try:
            line = super().format(record)
        finally:
            record.levelname = levelname

        extra = _extra_fields(record)
        if extra:
            line += " | " + " ".join(f"{k}={v}" for k, v in extra.items())
        return line


class JsonFormatter(logging.Formatter):
    """JSON 한 줄 포맷터 (로그 수집 시스템용)"""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", "-"),
        }
        payload.update(_extra_fields(record))
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logging() -> None:
    """애플리케이션 로깅 설정"""
    log_level = logging.DEBUG if settings.debug else logging.INFO

    formatter: logging.Formatter
    if settings.is_development:
        formatter = ColoredFormatter(
            fmt=(
                "%(asctime)s | %(levelname)-8s | %(request_id)s | "
                "%(name)s:%(lineno)d | %(message)s"
            ),
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        formatter = JsonFormatter(datefmt="%Y-%m-%dT%H:%M:%S%z")

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    handler.setLevel(log_level)
    handler.addFilter(RequestContextFilter())

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    # 외부 라이브러리 로그 레벨 조정
    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.database_echo else logging.WARNING
    )
    for name in ("httpx", "httpcore", "botocore", "PIL"):
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """로거 인스턴스 반환 (보통 __name__ 사용)"""
    return logging.getLogger(name)
