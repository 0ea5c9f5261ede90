"""
Pytest fixtures for the receiver tests.

구성:
- 경로/설정 fixture
- 콜백 기록기 (호출 횟수, 인자 확인용)
"""

from collections.abc import Generator
from pathlib import Path

import pytest
import yaml

from src.domain.schemas import ReceiverConfig

# =============================================================================
# Path Fixtures
# =============================================================================

@pytest.fixture
def project_root() -> Path:
    """프로젝트 루트 경로."""
    return Path(__file__).parent.parent


@pytest.fixture
def default_config_path(project_root: Path) -> Path:
    """default.yaml 경로."""
    return project_root / "default.yaml"


@pytest.fixture
def default_config(default_config_path: Path) -> dict:
    """기본 설정 로드."""
    with open(default_config_path, encoding="utf-8") as f:
        return yaml.safe_load(f)


@pytest.fixture
def save_folder(tmp_path: Path) -> Generator[Path, None, None]:
    """
    사진 저장 폴더 (아직 생성되지 않은 경로).

    start/첫 업로드가 폴더를 만드는지 확인하기 위해 미리 만들지 않는다.
    """
    yield tmp_path / "photos"


# =============================================================================
# Config Fixtures
# =============================================================================

@pytest.fixture
def session_token() -> str:
    """테스트용 세션 토큰."""
    return "abc123"


@pytest.fixture
def receiver_config(save_folder: Path, session_token: str) -> ReceiverConfig:
    """비밀번호 없는 설정 (토큰만)."""
    return ReceiverConfig(
        port=0,
        session_token=session_token,
        save_folder=save_folder,
        require_password=False,
    )


@pytest.fixture
def password_config(save_folder: Path, session_token: str) -> ReceiverConfig:
    """비밀번호 필요 설정."""
    return ReceiverConfig(
        port=0,
        session_token=session_token,
        save_folder=save_folder,
        require_password=True,
        password="p@ss",
    )


@pytest.fixture
def misconfigured_password_config(save_folder: Path, session_token: str) -> ReceiverConfig:
    """비밀번호 필요 + 비밀번호 없음 (fail closed)."""
    return ReceiverConfig(
        port=0,
        session_token=session_token,
        save_folder=save_folder,
        require_password=True,
        password="",
    )


# =============================================================================
# Callback Fixtures
# =============================================================================

class CallbackRecorder:
    """콜백 호출 기록."""

    def __init__(self) -> None:
        self.photos: list[Path] = []
        self.texts: list[str] = []

    async def on_photo_saved(self, path: Path) -> None:
        self.photos.append(path)

    async def on_text_received(self, text: str) -> None:
        self.texts.append(text)


@pytest.fixture
def recorder() -> CallbackRecorder:
    """콜백 기록기."""
    return CallbackRecorder()
