"""
Logging: 로깅 설정, 민감 정보 마스킹, 수신 이벤트 기록

규칙:
- 토큰/비밀번호는 로그에 남기지 않음
- uvicorn access log는 쿼리 스트링(토큰)을 그대로 출력하므로 사용하지 않음
"""

import logging
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from src.domain.constants import TOKEN_QUERY_PARAM

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MASK = "***"


def configure_logging(level: str | int = logging.INFO) -> None:
    """
    루트 로거 설정 (스크립트 진입점용).

    Args:
        level: 로그 레벨 (이름 또는 숫자)
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
    )


def redact_url(url: str) -> str:
    """
    URL의 token 쿼리 값을 마스킹.

    Args:
        url: 원본 URL (절대 또는 path?query)

    Returns:
        token 값이 *** 로 바뀐 URL
    """
    parts = urlsplit(url)
    if not parts.query:
        return url

    query = [
        (key, MASK if key == TOKEN_QUERY_PARAM else value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
    ]
    return urlunsplit(parts._replace(query=urlencode(query, safe="*")))


def log_receive_event(kind: str, client: str | None, **fields: Any) -> None:
    """
    수신 이벤트 기록 (사진/텍스트 1건당 한 줄).

    Args:
        kind: "photo" 또는 "text"
        client: 송신자 주소
        **fields: path, size, length 등
    """
    details = " ".join(f"{k}={v}" for k, v in fields.items())
    logger.info("received %s from %s %s", kind, client or "unknown", details)


def log_rejected_request(
    method: str,
    url: str,
    client: str | None,
    code: str,
    status_code: int,
) -> None:
    """거절된 요청 기록 (URL은 마스킹)."""
    level = logging.WARNING if status_code < 500 else logging.ERROR
    logger.log(
        level,
        "rejected %s %s from %s: %s (%d)",
        method,
        redact_url(url),
        client or "unknown",
        code,
        status_code,
    )
