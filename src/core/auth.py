"""
인증: 세션 토큰 + (선택) 비밀번호

검사 순서 (첫 실패에서 중단):
1. 토큰: 쿼리 파라미터가 세션 토큰과 정확히 일치
2. 비밀번호 (require_password일 때만):
   - 설정된 비밀번호가 비어 있으면 500 (fail closed, 절대 통과 금지)
   - X-Auth 헤더 값이 앞뒤 공백 제거 후 정확히 일치

두 검사는 서로 독립된 함수로 유지한다.
"""

import hmac

from src.domain.errors import ErrorCodes, ReceiverError
from src.domain.schemas import ReceiverConfig


def _secure_equals(provided: str, expected: str) -> bool:
    """바이트 단위 정확 비교 (상수 시간)."""
    return hmac.compare_digest(
        provided.encode("utf-8"),
        expected.encode("utf-8"),
    )


def check_token(provided: str | None, session_token: str) -> None:
    """
    토큰 검사.

    Args:
        provided: 요청의 token 쿼리 파라미터 (없으면 None)
        session_token: 이번 실행의 세션 토큰

    Raises:
        ReceiverError: TOKEN_INVALID (401)
    """
    if provided is None or not session_token:
        raise ReceiverError(ErrorCodes.TOKEN_INVALID)
    if not _secure_equals(provided, session_token):
        raise ReceiverError(ErrorCodes.TOKEN_INVALID)


def check_password(
    provided: str | None,
    require_password: bool,
    password: str,
) -> None:
    """
    비밀번호 검사.

    require_password=False면 아무것도 하지 않는다.

    Args:
        provided: X-Auth 헤더 값 (없으면 None)
        require_password: 비밀번호 필요 여부
        password: 설정된 비밀번호

    Raises:
        ReceiverError: PASSWORD_NOT_CONFIGURED (500), PASSWORD_INVALID (401)
    """
    if not require_password:
        return

    expected = password.strip()
    if not expected:
        raise ReceiverError(ErrorCodes.PASSWORD_NOT_CONFIGURED)

    if provided is None:
        raise ReceiverError(ErrorCodes.PASSWORD_INVALID)
    if not _secure_equals(provided.strip(), expected):
        raise ReceiverError(ErrorCodes.PASSWORD_INVALID)


def authenticate(
    config: ReceiverConfig,
    token: str | None,
    password_header: str | None,
) -> None:
    """토큰 → 비밀번호 순으로 검사."""
    check_token(token, config.session_token)
    check_password(password_header, config.require_password, config.password)
