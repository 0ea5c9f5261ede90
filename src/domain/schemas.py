"""
Data schemas for the receiver.

규칙:
- ReceiverConfig는 실행 중 읽기 전용 (frozen)
- UploadResult는 영속화하지 않음 (요청 범위에서만 사용)
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from src.domain.constants import DEFAULT_PORT, DEFAULT_SAVE_FOLDER
from src.domain.errors import ConfigurationError, ErrorCodes

# =============================================================================
# Receiver Config
# =============================================================================


@dataclass(frozen=True)
class ReceiverConfig:
    """
    수신기 설정.

    호출자가 start() 시점에 넘기고, 서비스 실행 중에는 변경되지 않는다.

    password는 require_password=True일 때만 의미가 있다.
    비어 있으면 비밀번호가 필요한 모든 요청을 500으로 거절한다 (fail closed).
    """
    port: int
    session_token: str
    save_folder: Path
    require_password: bool = True
    password: str = ""

    def validate(self) -> None:
        """
        필수 설정 검증.

        Raises:
            ConfigurationError: port 범위 밖, token/save_folder 비어 있음
        """
        if isinstance(self.port, bool) or not isinstance(self.port, int):
            raise ConfigurationError(ErrorCodes.CONFIG_INVALID, field="port")
        if not 0 <= self.port <= 65535:
            raise ConfigurationError(
                ErrorCodes.CONFIG_INVALID, field="port", value=self.port
            )
        if not self.session_token:
            raise ConfigurationError(ErrorCodes.CONFIG_INVALID, field="session_token")
        if not str(self.save_folder).strip():
            raise ConfigurationError(ErrorCodes.CONFIG_INVALID, field="save_folder")

    @property
    def password_misconfigured(self) -> bool:
        """비밀번호가 필요하지만 설정되지 않은 상태."""
        return self.require_password and not self.password.strip()

    @classmethod
    def from_mapping(
        cls,
        data: Mapping[str, Any],
        session_token: str,
    ) -> "ReceiverConfig":
        """
        YAML 설정(receiver 섹션)에서 생성.

        세션 토큰은 설정 파일에서 읽지 않는다 (실행마다 새로 발급).

        Args:
            data: receiver 섹션 dict
            session_token: 이번 실행의 세션 토큰

        Returns:
            ReceiverConfig
        """
        save_folder = data.get("save_folder") or DEFAULT_SAVE_FOLDER
        return cls(
            port=int(data.get("port", DEFAULT_PORT)),
            session_token=session_token,
            save_folder=Path(str(save_folder)).expanduser(),
            require_password=bool(data.get("require_password", True)),
            password=str(data.get("password") or ""),
        )


# =============================================================================
# Lifecycle
# =============================================================================


class ReceiverState(str, Enum):
    """
    수신기 생명주기 상태.

    stopped → starting → running → stopping → stopped
    """
    STOPPED = "stopped"
    STARTING = "starting"
    RUNNING = "running"
    STOPPING = "stopping"


# =============================================================================
# Upload Result
# =============================================================================


@dataclass
class UploadResult:
    """
    사진 저장 결과.

    성공: path + size
    실패: error_code + errno_code + error_message (원인 보존)
    """
    success: bool
    path: Path | None = None
    size: int = 0
    error_code: str | None = None
    errno_code: int | None = None
    error_message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """로그 직렬화용."""
        return {
            "success": self.success,
            "path": str(self.path) if self.path else None,
            "size": self.size,
            "error_code": self.error_code,
            "errno": self.errno_code,
            "error_message": self.error_message,
        }
