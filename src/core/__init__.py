"""
Core layer: 인증, 사진 저장, ID, 네트워크 헬퍼.

이 모듈만 건드리면 보안/데이터 사고 → 가장 보수적으로 관리

역할:
- 토큰/비밀번호 검사 (fail closed)
- 충돌 없는 파일명, 부분 파일 정리
"""

from .auth import authenticate, check_password, check_token
from .ids import generate_session_token, generate_unique_suffix
from .logging import configure_logging, log_receive_event, redact_url
from .network import build_endpoint_url, get_lan_ipv4
from .photos import PhotoStore, claim_photo_path, resolve_extension

__all__ = [
    # auth
    "authenticate",
    "check_token",
    "check_password",
    # ids
    "generate_session_token",
    "generate_unique_suffix",
    # logging
    "configure_logging",
    "log_receive_event",
    "redact_url",
    # network
    "build_endpoint_url",
    "get_lan_ipv4",
    # photos
    "PhotoStore",
    "claim_photo_path",
    "resolve_extension",
]
