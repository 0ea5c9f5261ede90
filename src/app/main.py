"""
FastAPI 애플리케이션 팩토리.

수신기마다 설정/콜백이 다르므로 모듈 전역 app 대신 create_app()으로 생성한다.
실행은 ReceiverService (src.app.receiver) 또는 scripts/run_receiver.py.
"""

import logging
from pathlib import Path
from typing import Any

import yaml
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from src.app.routes import push
from src.app.routes.push import PhotoSavedCallback, TextReceivedCallback
from src.core.logging import log_rejected_request
from src.core.photos import PhotoStore
from src.domain.errors import ReceiverError
from src.domain.schemas import ReceiverConfig

logger = logging.getLogger(__name__)

# =============================================================================
# Configuration
# =============================================================================


def load_config(config_path: Path | None = None) -> dict:
    """설정 파일 로드."""
    if config_path is None:
        # 프로젝트 루트의 default.yaml
        config_path = Path(__file__).parent.parent.parent / "default.yaml"

    if not config_path.exists():
        return {}

    with open(config_path, encoding="utf-8") as f:
        data: dict[Any, Any] = yaml.safe_load(f) or {}
        return data


# =============================================================================
# Error Handling
# =============================================================================


async def receiver_error_handler(request: Request, exc: ReceiverError) -> JSONResponse:
    """
    ReceiverError → HTTP 응답.

    본문: {"code": ..., "message": ...} (토큰/비밀번호 미포함)
    """
    log_rejected_request(
        request.method,
        str(request.url),
        request.client.host if request.client else None,
        exc.code,
        exc.status_code,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"code": exc.code, "message": exc.message},
    )


# =============================================================================
# App Factory
# =============================================================================


def create_app(
    config: ReceiverConfig,
    on_photo_saved: PhotoSavedCallback,
    on_text_received: TextReceivedCallback | None = None,
) -> FastAPI:
    """
    수신 앱 생성.

    Args:
        config: 수신기 설정 (읽기 전용)
        on_photo_saved: 사진 저장 후 호출 (저장 경로)
        on_text_received: 텍스트 수신 시 호출 (없으면 조용히 ok)

    Returns:
        FastAPI 앱 (라우트 2개)
    """
    app = FastAPI(
        title="Photo Push Receiver",
        description="원격 기기 → 사진/텍스트 수신",
        version="0.1.0",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    app.state.receiver_config = config
    app.state.photo_store = PhotoStore(config.save_folder)
    app.state.on_photo_saved = on_photo_saved
    app.state.on_text_received = on_text_received

    app.add_exception_handler(ReceiverError, receiver_error_handler)
    app.include_router(push.api_router, tags=["Push API"])

    return app
