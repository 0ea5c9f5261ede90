"""
test_schemas.py - ReceiverConfig / UploadResult 테스트
"""

from dataclasses import FrozenInstanceError, replace
from pathlib import Path

import pytest

from src.domain.errors import ConfigurationError, ErrorCodes
from src.domain.schemas import ReceiverConfig, ReceiverState, UploadResult


class TestReceiverConfigValidate:
    """ReceiverConfig.validate 테스트."""

    def test_valid_config(self, receiver_config: ReceiverConfig):
        """정상 설정은 통과."""
        receiver_config.validate()

    @pytest.mark.parametrize("port", [-1, 65536, 100000])
    def test_port_out_of_range(self, tmp_path: Path, port: int):
        """포트 범위 밖 → CONFIG_INVALID."""
        config = ReceiverConfig(port=port, session_token="t", save_folder=tmp_path)

        with pytest.raises(ConfigurationError) as exc_info:
            config.validate()

        assert exc_info.value.code == ErrorCodes.CONFIG_INVALID
        assert exc_info.value.context["field"] == "port"

    def test_port_must_be_int(self, tmp_path: Path):
        """문자열/bool 포트 거절."""
        for port in ("5055", True):
            config = ReceiverConfig(port=port, session_token="t", save_folder=tmp_path)  # type: ignore[arg-type]
            with pytest.raises(ConfigurationError):
                config.validate()

    def test_empty_token(self, tmp_path: Path):
        """세션 토큰 없음 → CONFIG_INVALID."""
        config = ReceiverConfig(port=5055, session_token="", save_folder=tmp_path)

        with pytest.raises(ConfigurationError) as exc_info:
            config.validate()

        assert exc_info.value.context["field"] == "session_token"

    def test_empty_save_folder(self):
        """저장 폴더 없음 → CONFIG_INVALID."""
        config = ReceiverConfig(port=5055, session_token="t", save_folder="")  # type: ignore[arg-type]

        with pytest.raises(ConfigurationError) as exc_info:
            config.validate()

        assert exc_info.value.context["field"] == "save_folder"

    def test_empty_password_is_not_a_startup_error(self, misconfigured_password_config):
        """비밀번호 미설정은 시작을 막지 않음 (요청마다 500)."""
        misconfigured_password_config.validate()

        assert misconfigured_password_config.password_misconfigured is True

    def test_whitespace_password_is_misconfigured(self, receiver_config: ReceiverConfig):
        """공백뿐인 비밀번호도 미설정으로 취급 (요청 검사와 동일 기준)."""
        config = replace(receiver_config, require_password=True, password="   ")

        assert config.password_misconfigured is True
        assert replace(config, password=" p ").password_misconfigured is False

    def test_frozen(self, receiver_config: ReceiverConfig):
        """실행 중 변경 불가."""
        with pytest.raises(FrozenInstanceError):
            receiver_config.port = 1  # type: ignore[misc]


class TestReceiverConfigFromMapping:
    """ReceiverConfig.from_mapping 테스트."""

    def test_from_default_yaml(self, default_config: dict):
        """default.yaml receiver 섹션 → 안전한 기본값."""
        config = ReceiverConfig.from_mapping(default_config["receiver"], session_token="tok")

        assert config.port == 5055
        assert config.require_password is True
        assert config.password == ""
        assert config.password_misconfigured is True
        assert config.save_folder == Path("~/Pictures/PhotoPopups").expanduser()
        assert config.session_token == "tok"

    def test_defaults_for_empty_mapping(self):
        """빈 설정 → 기본 포트/폴더, 비밀번호 필요."""
        config = ReceiverConfig.from_mapping({}, session_token="tok")

        assert config.port == 5055
        assert config.require_password is True
        assert config.save_folder.name == "PhotoPopups"

    def test_overrides(self, tmp_path: Path):
        """값 지정."""
        config = ReceiverConfig.from_mapping(
            {
                "port": "6000",
                "require_password": False,
                "password": None,
                "save_folder": str(tmp_path),
            },
            session_token="tok",
        )

        assert config.port == 6000
        assert config.require_password is False
        assert config.password == ""
        assert config.save_folder == tmp_path


class TestReceiverState:
    """ReceiverState 테스트."""

    def test_values(self):
        assert [s.value for s in ReceiverState] == [
            "stopped",
            "starting",
            "running",
            "stopping",
        ]


class TestUploadResult:
    """UploadResult 테스트."""

    def test_to_dict_success(self, tmp_path: Path):
        result = UploadResult(success=True, path=tmp_path / "a.jpg", size=3)

        data = result.to_dict()

        assert data["success"] is True
        assert data["path"] == str(tmp_path / "a.jpg")
        assert data["size"] == 3

    def test_to_dict_failure(self):
        result = UploadResult(
            success=False,
            error_code=ErrorCodes.WRITE_FAILED,
            errno_code=28,
            error_message="No space left on device",
        )

        data = result.to_dict()

        assert data["path"] is None
        assert data["errno"] == 28
