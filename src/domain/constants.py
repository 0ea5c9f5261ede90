"""
Domain Constants: 수신기 전역 상수.

라우트, 인증 파라미터, 파일명 정책 등 시스템 전반에서 사용되는 값들.
"""

import sys

# =============================================================================
# Routes (HTTP 엔드포인트)
# =============================================================================

PHOTO_ROUTE = "/push-photo"
TEXT_ROUTE = "/push-text"

ACK_BODY = "ok"

# =============================================================================
# Authentication (인증)
# =============================================================================
# 토큰: 쿼리 파라미터 (?token=...)
# 비밀번호: 커스텀 헤더 (X-Auth: ...)

TOKEN_QUERY_PARAM = "token"
PASSWORD_HEADER = "X-Auth"

# =============================================================================
# Form Fields (폼 필드명)
# =============================================================================

PHOTO_FIELD = "file"
TEXT_FIELD = "text"

# =============================================================================
# Listener (리스너)
# =============================================================================

BIND_HOST = "0.0.0.0"
DEFAULT_PORT = 5055
DEFAULT_SAVE_FOLDER = "~/Pictures/PhotoPopups"
DEFAULT_GRACEFUL_TIMEOUT = 30.0  # seconds

# 엔드포인트 URL 표시용 (LAN IP 탐색 실패 시)
LAN_IP_PLACEHOLDER = "LAN-IP"

# =============================================================================
# Photo Files (사진 파일명 정책)
# =============================================================================
# save_folder/
# └── YYYY-MM-DD/
#     ├── HH-mm-ss_fff.jpg
#     └── HH-mm-ss_fff_<unique>.jpg   (같은 밀리초 충돌 시)

DAY_FOLDER_FORMAT = "%Y-%m-%d"
TIME_STEM_FORMAT = "%H-%M-%S"

RECOGNIZED_PHOTO_EXTENSIONS = (
    ".jpg",
    ".jpeg",
    ".png",
    ".gif",
    ".bmp",
    ".webp",
    ".heic",
    ".heif",
    ".tif",
    ".tiff",
)
DEFAULT_PHOTO_EXTENSION = ".jpg"

UNIQUE_SUFFIX_LENGTH = 8
MAX_NAME_ATTEMPTS = 16

# 스트리밍 쓰기 청크 크기
UPLOAD_CHUNK_SIZE = 64 * 1024

# 폼 필드 크기 한도: raw body 경로와 동일하게 제한 없음 (Starlette 기본값은 1MB)
FORM_FIELD_MAX_SIZE = sys.maxsize

# =============================================================================
# Content Types
# =============================================================================

MULTIPART_CONTENT_TYPE = "multipart/form-data"
FORM_URLENCODED_CONTENT_TYPE = "application/x-www-form-urlencoded"
FORM_CONTENT_TYPES = (MULTIPART_CONTENT_TYPE, FORM_URLENCODED_CONTENT_TYPE)
