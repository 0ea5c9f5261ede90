#!/usr/bin/env python3
"""
run_receiver.py - 사진/텍스트 수신기 실행 스크립트

default.yaml(receiver 섹션) + 환경변수(.env 지원)로 설정을 만들고,
세션 토큰을 새로 발급해 송신자가 호출할 URL을 출력한 뒤 Ctrl+C까지 수신한다.

환경변수:
- PHOTO_RECEIVER_PORT
- PHOTO_RECEIVER_PASSWORD
- PHOTO_RECEIVER_SAVE_FOLDER

사용법:
    # 기본 실행
    uv run python scripts/run_receiver.py

    # 포트/폴더 지정, 비밀번호 없이
    uv run python scripts/run_receiver.py --port 6000 --save-folder /tmp/photos --no-password
"""

import argparse
import asyncio
import logging
import os
import signal
import sys
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

sys.path.insert(0, str(Path(__file__).parent.parent))

from src.app.main import load_config  # noqa: E402
from src.core.ids import generate_session_token  # noqa: E402
from src.core.logging import configure_logging  # noqa: E402
from src.core.network import build_endpoint_url, get_lan_ipv4  # noqa: E402
from src.app.receiver import ReceiverService  # noqa: E402
from src.domain.constants import (  # noqa: E402
    DEFAULT_GRACEFUL_TIMEOUT,
    PHOTO_ROUTE,
    TEXT_ROUTE,
)
from src.domain.errors import ReceiverError  # noqa: E402
from src.domain.schemas import ReceiverConfig  # noqa: E402

logger = logging.getLogger(__name__)

ENV_PREFIX = "PHOTO_RECEIVER_"


def merge_settings(
    file_settings: dict[str, Any],
    env: dict[str, str],
    args: argparse.Namespace,
) -> dict[str, Any]:
    """
    설정 병합.

    우선순위: CLI 인자 > 환경변수 > default.yaml
    """
    settings = dict(file_settings)

    if env.get(f"{ENV_PREFIX}PORT"):
        settings["port"] = int(env[f"{ENV_PREFIX}PORT"])
    if f"{ENV_PREFIX}PASSWORD" in env:
        settings["password"] = env[f"{ENV_PREFIX}PASSWORD"]
    if env.get(f"{ENV_PREFIX}SAVE_FOLDER"):
        settings["save_folder"] = env[f"{ENV_PREFIX}SAVE_FOLDER"]

    if args.port is not None:
        settings["port"] = args.port
    if args.save_folder is not None:
        settings["save_folder"] = args.save_folder
    if args.no_password:
        settings["require_password"] = False

    return settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="사진/텍스트 수신기")
    parser.add_argument("--config", type=Path, default=None, help="설정 파일 (기본: default.yaml)")
    parser.add_argument("--port", type=int, default=None, help="리스너 포트")
    parser.add_argument("--save-folder", default=None, help="사진 저장 폴더")
    parser.add_argument("--no-password", action="store_true", help="비밀번호 검사 끄기 (토큰만)")
    parser.add_argument("--log-level", default=None, help="로그 레벨 (DEBUG, INFO, ...)")
    return parser


async def on_photo_saved(path: Path) -> None:
    """저장된 사진 경로 출력 (팝업/클립보드는 UI 계층 담당)."""
    logger.info(f"📸 Photo saved: {path}")


async def on_text_received(text: str) -> None:
    """수신 텍스트 출력."""
    logger.info(f"💬 Text received ({len(text)} chars): {text[:80]}")


async def serve(config: ReceiverConfig, graceful_timeout: float | None) -> None:
    """중지 신호까지 수신."""
    service = ReceiverService(graceful_timeout=graceful_timeout)
    await service.start(config, on_photo_saved, on_text_received)

    host = get_lan_ipv4()
    port = service.port or config.port
    print(f"Photo endpoint: {build_endpoint_url(host, port, config.session_token, PHOTO_ROUTE)}")
    print(f"Text endpoint:  {build_endpoint_url(host, port, config.session_token, TEXT_ROUTE)}")

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except (NotImplementedError, RuntimeError):
            # Windows: KeyboardInterrupt로 처리
            pass

    try:
        await stop_event.wait()
    finally:
        await service.stop()


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)

    data = load_config(args.config)
    configure_logging(args.log_level or data.get("logging", {}).get("level", "INFO"))

    settings = merge_settings(data.get("receiver", {}) or {}, dict(os.environ), args)
    config = ReceiverConfig.from_mapping(settings, session_token=generate_session_token())
    graceful_timeout = settings.get("graceful_timeout", DEFAULT_GRACEFUL_TIMEOUT)

    try:
        asyncio.run(serve(config, graceful_timeout))
    except ReceiverError as e:
        logger.error(f"Receiver failed to start: {e}")
        return 1
    except KeyboardInterrupt:
        pass

    return 0


if __name__ == "__main__":
    sys.exit(main())
