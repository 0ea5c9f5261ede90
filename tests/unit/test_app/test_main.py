"""
test_main.py - 앱 팩토리 / 설정 로드 테스트
"""

from pathlib import Path

from src.app.main import create_app, load_config
from src.core.photos import PhotoStore


class TestLoadConfig:
    """load_config 함수 테스트."""

    def test_default_yaml(self):
        """프로젝트 루트 default.yaml 로드."""
        config = load_config()

        assert config["receiver"]["port"] == 5055
        assert config["receiver"]["require_password"] is True

    def test_missing_file_returns_empty(self, tmp_path: Path):
        """파일 없으면 빈 dict."""
        assert load_config(tmp_path / "missing.yaml") == {}

    def test_empty_file_returns_empty(self, tmp_path: Path):
        """빈 파일도 빈 dict."""
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")

        assert load_config(path) == {}

    def test_custom_file(self, tmp_path: Path):
        """지정 파일 로드."""
        path = tmp_path / "custom.yaml"
        path.write_text("receiver:\n  port: 6000\n", encoding="utf-8")

        assert load_config(path) == {"receiver": {"port": 6000}}


class TestCreateApp:
    """create_app 함수 테스트."""

    def test_state(self, receiver_config, recorder):
        """설정/콜백/저장소가 app.state에 연결됨."""
        app = create_app(receiver_config, recorder.on_photo_saved, recorder.on_text_received)

        assert app.state.receiver_config is receiver_config
        assert isinstance(app.state.photo_store, PhotoStore)
        assert app.state.photo_store.save_folder == receiver_config.save_folder
        assert app.state.on_photo_saved == recorder.on_photo_saved
        assert app.state.on_text_received == recorder.on_text_received

    def test_only_push_routes(self, receiver_config, recorder):
        """라우트는 /push-photo, /push-text 두 개뿐 (docs 비활성)."""
        app = create_app(receiver_config, recorder.on_photo_saved)

        paths = {route.path for route in app.routes}

        assert paths == {"/push-photo", "/push-text"}

    def test_text_callback_optional(self, receiver_config, recorder):
        """텍스트 콜백 없으면 None."""
        app = create_app(receiver_config, recorder.on_photo_saved)

        assert app.state.on_text_received is None
