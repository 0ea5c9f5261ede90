"""
ID 생성: session token, 파일명 suffix

규칙:
- 세션 토큰은 실행마다 새로 발급 (설정 파일에 저장 금지)
- 파일명 suffix는 충돌 회피용 (의미 없음)
"""

import uuid

from src.domain.constants import UNIQUE_SUFFIX_LENGTH


def generate_session_token() -> str:
    """
    세션 토큰 생성.

    고유성 보장: UUID v4
    포맷: 32자리 hex (하이픈 없음)

    Returns:
        session token 문자열
    """
    return uuid.uuid4().hex


def generate_unique_suffix() -> str:
    """
    파일명 충돌 회피용 suffix.

    포맷: hex 8자리

    Returns:
        suffix 문자열
    """
    return uuid.uuid4().hex[:UNIQUE_SUFFIX_LENGTH]
