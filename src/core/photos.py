"""
사진 저장: day-folder, 충돌 없는 파일명, 스트리밍 쓰기

규칙:
- 경로: save_folder/YYYY-MM-DD/HH-mm-ss_fff[_<unique>].<ext>
- 파일명은 배타적 생성(xb)으로 선점 → 같은 밀리초에도 덮어쓰기 없음
- 쓰기 실패/취소 시 부분 파일 삭제, 성공으로 보고하지 않음
- fsync 실패는 경고만 (데이터는 보존)
"""

import logging
import os
from collections.abc import AsyncIterator, Callable
from datetime import datetime
from pathlib import Path
from typing import BinaryIO

from starlette.concurrency import run_in_threadpool

from src.core.ids import generate_unique_suffix
from src.domain.constants import (
    DAY_FOLDER_FORMAT,
    DEFAULT_PHOTO_EXTENSION,
    MAX_NAME_ATTEMPTS,
    RECOGNIZED_PHOTO_EXTENSIONS,
    TIME_STEM_FORMAT,
)
from src.domain.errors import ErrorCodes
from src.domain.schemas import UploadResult

logger = logging.getLogger(__name__)


# =============================================================================
# Naming
# =============================================================================

def resolve_extension(filename: str | None) -> str:
    """
    업로드 파일명에서 확장자 결정.

    인식 가능한 이미지 확장자면 소문자로, 아니면 .jpg

    Args:
        filename: 송신자가 보낸 파일명 (없을 수 있음)

    Returns:
        "." 포함 확장자
    """
    if not filename:
        return DEFAULT_PHOTO_EXTENSION

    # 경로 구분자가 섞여 와도 마지막 이름만 본다
    name = filename.replace("\\", "/").rsplit("/", 1)[-1]
    ext = Path(name).suffix.lower()
    if ext in RECOGNIZED_PHOTO_EXTENSIONS:
        return ext
    return DEFAULT_PHOTO_EXTENSION


def day_folder_name(now: datetime) -> str:
    """YYYY-MM-DD"""
    return now.strftime(DAY_FOLDER_FORMAT)


def timestamp_stem(now: datetime) -> str:
    """HH-mm-ss_fff (밀리초)"""
    return f"{now.strftime(TIME_STEM_FORMAT)}_{now.microsecond // 1000:03d}"


def claim_photo_path(day_dir: Path, stem: str, extension: str) -> tuple[Path, BinaryIO]:
    """
    충돌 없는 파일 경로 선점.

    1. {stem}{ext} 배타적 생성 시도
    2. 이미 있으면 {stem}_{unique}{ext}로 재시도

    Args:
        day_dir: day-folder (존재해야 함)
        stem: 타임스탬프 stem
        extension: 확장자

    Returns:
        (선점한 경로, 쓰기용 파일 핸들)

    Raises:
        FileExistsError: MAX_NAME_ATTEMPTS 안에 빈 이름을 찾지 못함
        OSError: 파일 생성 실패
    """
    candidate = day_dir / f"{stem}{extension}"
    for _ in range(MAX_NAME_ATTEMPTS):
        try:
            return candidate, open(candidate, "xb")
        except FileExistsError:
            candidate = day_dir / f"{stem}_{generate_unique_suffix()}{extension}"

    raise FileExistsError(f"No free file name for {stem}{extension} in {day_dir}")


def _fsync_quietly(handle: BinaryIO, path: Path) -> None:
    """fsync 시도 (경고만, 실패해도 계속)."""
    try:
        handle.flush()
        os.fsync(handle.fileno())
    except OSError as e:
        logger.warning("fsync failed for %s: %s (data preserved)", path, e)


def _remove_partial(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Failed to remove partial file %s: %s", path, e)


# =============================================================================
# Photo Store
# =============================================================================

class PhotoStore:
    """
    사진 저장소.

    여러 요청이 동시에 사용한다. 공유 상태는 파일시스템뿐이며
    디렉터리 생성은 멱등(exist_ok), 파일명 선점은 배타적 생성으로 처리한다.
    """

    def __init__(
        self,
        save_folder: Path,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Args:
            save_folder: 사진 저장 기본 폴더
            clock: 현재 시각 공급자 (테스트에서 고정 가능)
        """
        self.save_folder = Path(save_folder)
        self.clock = clock

    def ensure_save_folder(self) -> None:
        """기본 폴더 생성 (중간 디렉터리 포함)."""
        self.save_folder.mkdir(parents=True, exist_ok=True)

    def day_dir(self, now: datetime) -> Path:
        """오늘의 day-folder 경로 (생성하지 않음)."""
        return self.save_folder / day_folder_name(now)

    async def save(
        self,
        chunks: AsyncIterator[bytes],
        filename: str | None,
    ) -> UploadResult:
        """
        청크 스트림을 새 사진 파일로 저장.

        보장:
        - day-folder 지연 생성
        - 같은 밀리초 업로드도 서로 다른 파일
        - 실패/취소 시 부분 파일 삭제 후 실패 결과 (취소는 예외 전파)

        Args:
            chunks: 파일 바이트 청크 (비동기)
            filename: 원본 파일명 (확장자 결정용)

        Returns:
            UploadResult
        """
        now = self.clock()
        extension = resolve_extension(filename)
        day_dir = self.day_dir(now)

        try:
            await run_in_threadpool(day_dir.mkdir, parents=True, exist_ok=True)
            path, handle = await run_in_threadpool(
                claim_photo_path, day_dir, timestamp_stem(now), extension
            )
        except OSError as e:
            return UploadResult(
                success=False,
                error_code=ErrorCodes.WRITE_FAILED,
                errno_code=e.errno,
                error_message=str(e),
            )

        size = 0
        completed = False
        try:
            with handle:
                async for chunk in chunks:
                    if not chunk:
                        continue
                    await run_in_threadpool(handle.write, chunk)
                    size += len(chunk)
                await run_in_threadpool(_fsync_quietly, handle, path)
            completed = True
        except OSError as e:
            return UploadResult(
                success=False,
                error_code=ErrorCodes.WRITE_FAILED,
                errno_code=e.errno,
                error_message=str(e),
            )
        finally:
            if not completed:
                _remove_partial(path)

        return UploadResult(success=True, path=path, size=size)
