"""
네트워크 헬퍼: LAN IP 탐색, 엔드포인트 URL 생성

송신 기기(휴대폰)가 호출할 URL을 화면/QR에 표시하기 위한 용도.
"""

import logging
import socket
from urllib.parse import quote

from src.domain.constants import LAN_IP_PLACEHOLDER, PHOTO_ROUTE, TOKEN_QUERY_PARAM

logger = logging.getLogger(__name__)

# 실제로 패킷을 보내지 않음 (UDP connect는 라우팅 테이블 조회만 수행)
_PROBE_ADDRESS = ("192.0.2.1", 80)


def _is_usable_ipv4(address: str) -> bool:
    return bool(address) and not address.startswith(("127.", "0.", "169.254."))


def get_lan_ipv4() -> str | None:
    """
    이 머신의 첫 번째 비-루프백 IPv4 주소.

    1. 기본 경로의 로컬 주소 (UDP connect)
    2. 호스트명으로 조회한 주소 목록

    Returns:
        IPv4 문자열 또는 None (찾지 못한 경우)
    """
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as probe:
            probe.connect(_PROBE_ADDRESS)
            address = probe.getsockname()[0]
        if _is_usable_ipv4(address):
            return address
    except OSError as e:
        logger.debug(f"Default route probe failed: {e}")

    try:
        infos = socket.getaddrinfo(socket.gethostname(), None, socket.AF_INET)
    except OSError as e:
        logger.debug(f"Hostname lookup failed: {e}")
        return None

    for info in infos:
        address = str(info[4][0])
        if _is_usable_ipv4(address):
            return address

    return None


def build_endpoint_url(
    host: str | None,
    port: int,
    token: str,
    route: str = PHOTO_ROUTE,
) -> str:
    """
    송신자가 호출할 엔드포인트 URL.

    포맷: http://{host}:{port}{route}?token={token}

    Args:
        host: LAN IP (None이면 LAN-IP 자리표시자)
        port: 리스너 포트
        token: 세션 토큰
        route: /push-photo 또는 /push-text

    Returns:
        URL 문자열
    """
    host = host or LAN_IP_PLACEHOLDER
    return f"http://{host}:{port}{route}?{TOKEN_QUERY_PARAM}={quote(token, safe='')}"
