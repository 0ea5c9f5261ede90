"""
Push Routes: 원격 기기(휴대폰)에서 사진/텍스트 수신.

- POST /push-photo?token=... → multipart, field "file" → 저장 후 on_photo_saved
- POST /push-text?token=...  → form field "text" 또는 raw UTF-8 body → on_text_received

공통:
- 인증은 본문을 읽기 전에 수행 (실패 시 즉시 응답)
- 콜백은 응답 전에 await (송신자가 ok를 받으면 콜백이 이미 실행됨)
- 실패는 ReceiverError로 올리고 앱 예외 핸들러가 응답으로 변환
"""

import inspect
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
from starlette.datastructures import FormData, UploadFile
from starlette.exceptions import HTTPException

from src.core.auth import authenticate
from src.core.logging import log_receive_event
from src.core.photos import PhotoStore
from src.domain.constants import (
    ACK_BODY,
    FORM_CONTENT_TYPES,
    FORM_FIELD_MAX_SIZE,
    MULTIPART_CONTENT_TYPE,
    PASSWORD_HEADER,
    PHOTO_FIELD,
    PHOTO_ROUTE,
    TEXT_FIELD,
    TEXT_ROUTE,
    TOKEN_QUERY_PARAM,
    UPLOAD_CHUNK_SIZE,
)
from src.domain.errors import ErrorCodes, ReceiverError
from src.domain.schemas import ReceiverConfig

logger = logging.getLogger(__name__)

PhotoSavedCallback = Callable[[Path], Awaitable[Any] | None]
TextReceivedCallback = Callable[[str], Awaitable[Any] | None]


# =============================================================================
# App State Accessors
# =============================================================================

def get_receiver_config(request: Request) -> ReceiverConfig:
    """Request에서 ReceiverConfig 가져오기."""
    return request.app.state.receiver_config


def get_photo_store(request: Request) -> PhotoStore:
    """Request에서 PhotoStore 가져오기."""
    return request.app.state.photo_store


def require_auth(request: Request) -> None:
    """
    인증 의존성 (두 라우트 공통).

    본문을 읽지 않고 쿼리/헤더만 본다.
    """
    authenticate(
        get_receiver_config(request),
        token=request.query_params.get(TOKEN_QUERY_PARAM),
        password_header=request.headers.get(PASSWORD_HEADER),
    )


# =============================================================================
# Helpers
# =============================================================================

def _media_type(request: Request) -> str:
    """Content-Type에서 파라미터(boundary, charset) 제거."""
    content_type = request.headers.get("content-type", "")
    return content_type.split(";", 1)[0].strip().lower()


def _client_host(request: Request) -> str | None:
    return request.client.host if request.client else None


@asynccontextmanager
async def _open_form(request: Request) -> AsyncIterator[FormData]:
    """
    폼 파싱 (multipart / urlencoded).

    필드 크기는 raw body와 같이 제한하지 않는다. 파서 오류(boundary 누락,
    깨진 multipart 등)는 FORM_INVALID로 변환해 공통 에러 응답으로 보낸다.
    """
    try:
        form = await request.form(max_part_size=FORM_FIELD_MAX_SIZE)
    except HTTPException as e:
        raise ReceiverError(ErrorCodes.FORM_INVALID, detail=e.detail) from e

    try:
        yield form
    finally:
        await form.close()


async def _iter_upload(upload: UploadFile, first_chunk: bytes) -> AsyncIterator[bytes]:
    """이미 읽은 첫 청크 + 나머지 청크."""
    yield first_chunk
    while True:
        chunk = await upload.read(UPLOAD_CHUNK_SIZE)
        if not chunk:
            break
        yield chunk


async def _notify(callback: Callable[[Any], Any], payload: Any, kind: str) -> None:
    """
    콜백 호출 후 완료까지 대기.

    코루틴 함수/일반 함수 모두 허용 (반환값이 awaitable이면 await).

    Raises:
        ReceiverError: CALLBACK_FAILED (500)
    """
    try:
        result = callback(payload)
        if inspect.isawaitable(result):
            await result
    except Exception as e:
        logger.error(f"{kind} callback failed: {e}", exc_info=True)
        raise ReceiverError(ErrorCodes.CALLBACK_FAILED, kind=kind) from e


# =============================================================================
# Routes
# =============================================================================

api_router = APIRouter(dependencies=[Depends(require_auth)])


@api_router.post(PHOTO_ROUTE, response_class=PlainTextResponse)
async def push_photo(request: Request) -> PlainTextResponse:
    """
    사진 업로드.

    1. 인증 (의존성)
    2. multipart/form-data 확인 → 아니면 400 (파일시스템 접근 없음)
    3. file 파트 확인 (filename 있는 파일 파트, 1바이트 이상) → 아니면 400
    4. day-folder 생성 + 스트리밍 저장 → 실패 시 500
    5. on_photo_saved(path) await → 200 "ok"
    """
    if _media_type(request) != MULTIPART_CONTENT_TYPE:
        raise ReceiverError(ErrorCodes.UNSUPPORTED_CONTENT_TYPE)

    store = get_photo_store(request)

    async with _open_form(request) as form:
        upload = form.get(PHOTO_FIELD)
        # filename 없는 파트는 문자열 필드로 디코딩되어 원본 바이트를 잃는다
        if not isinstance(upload, UploadFile):
            raise ReceiverError(ErrorCodes.FILE_MISSING)

        # 빈 파일이면 디렉터리도 만들지 않는다
        first_chunk = await upload.read(UPLOAD_CHUNK_SIZE)
        if not first_chunk:
            raise ReceiverError(ErrorCodes.FILE_EMPTY)

        result = await store.save(_iter_upload(upload, first_chunk), upload.filename)

    if not result.success or result.path is None:
        logger.error(f"Photo write failed: {result.to_dict()}")
        raise ReceiverError(ErrorCodes.WRITE_FAILED, errno=result.errno_code)

    log_receive_event(
        "photo", _client_host(request), path=result.path, size=result.size
    )
    await _notify(request.app.state.on_photo_saved, result.path, "photo")

    return PlainTextResponse(ACK_BODY)


@api_router.post(TEXT_ROUTE, response_class=PlainTextResponse)
async def push_text(request: Request) -> PlainTextResponse:
    """
    텍스트 메시지.

    폼 요청이면 text 필드, 아니면 raw body (UTF-8).
    공백만 있으면 400. 콜백에는 받은 그대로 전달 (trim 없음).
    """
    if _media_type(request) in FORM_CONTENT_TYPES:
        async with _open_form(request) as form:
            value = form.get(TEXT_FIELD)
        text = value if isinstance(value, str) else ""
    else:
        body = await request.body()
        try:
            text = body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ReceiverError(ErrorCodes.TEXT_INVALID_ENCODING) from e

    if not text.strip():
        raise ReceiverError(ErrorCodes.TEXT_EMPTY)

    log_receive_event("text", _client_host(request), length=len(text))

    callback = request.app.state.on_text_received
    if callback is not None:
        await _notify(callback, text, "text")

    return PlainTextResponse(ACK_BODY)
