"""
Receiver Service: 리스너 생명주기 (start/stop)

상태:
    stopped → starting → running → stopping → stopped

규칙:
- start: 설정 검증 → save_folder 생성 → 0.0.0.0:port 바인드 → running
  - 이미 running이면 no-op (재바인드 없음)
  - 설정 오류 → ConfigurationError, 바인드 실패 → BindError (상태는 stopped)
- stop: 새 연결 차단 → 처리 중인 요청 완료 대기 (graceful drain) → 소켓 해제
  - 이미 stopped면 no-op
- start/stop은 내부 락으로 직렬화
"""

import asyncio
import logging
import math
import socket
from pathlib import Path

import uvicorn

from src.app.main import create_app
from src.app.routes.push import PhotoSavedCallback, TextReceivedCallback
from src.domain.constants import BIND_HOST, DEFAULT_GRACEFUL_TIMEOUT
from src.domain.errors import BindError, ConfigurationError, ErrorCodes
from src.domain.schemas import ReceiverConfig, ReceiverState

logger = logging.getLogger(__name__)

# 서버 시작 확인 폴링 간격 (seconds)
STARTUP_POLL_INTERVAL = 0.01


def bind_listener(host: str, port: int) -> socket.socket:
    """
    리스닝 소켓 바인드.

    uvicorn의 bind_socket()은 실패 시 프로세스를 종료하므로 직접 바인드한다.

    Raises:
        BindError: 포트 사용 중/권한 없음 등
    """
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
        sock.set_inheritable(True)
    except OSError as e:
        sock.close()
        raise BindError(
            ErrorCodes.BIND_FAILED, host=host, port=port, errno=e.errno
        ) from e
    return sock


class ReceiverService:
    """
    수신기 서비스.

    리스너 소켓과 uvicorn 서버를 소유하며, 실행 중인 동안
    save_folder 생명주기를 관리한다. 설정과 콜백은 호출자 소유.

    Usage:
        service = ReceiverService()
        await service.start(config, on_photo_saved, on_text_received)
        ...
        await service.stop()
    """

    def __init__(
        self,
        host: str = BIND_HOST,
        graceful_timeout: float | None = DEFAULT_GRACEFUL_TIMEOUT,
    ):
        """
        Args:
            host: 바인드 주소 (기본 0.0.0.0, 모든 인터페이스)
            graceful_timeout: stop 시 처리 중 요청 대기 한도 (None = 무제한)
        """
        self.host = host
        self.graceful_timeout = graceful_timeout

        self._state = ReceiverState.STOPPED
        self._lock = asyncio.Lock()
        self._config: ReceiverConfig | None = None
        self._socket: socket.socket | None = None
        self._bound_port: int | None = None
        self._server: uvicorn.Server | None = None
        self._serve_task: asyncio.Task[None] | None = None

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def state(self) -> ReceiverState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state == ReceiverState.RUNNING

    @property
    def config(self) -> ReceiverConfig | None:
        return self._config

    @property
    def port(self) -> int | None:
        """실제로 바인드된 포트 (port=0 설정 시 OS가 배정한 포트)."""
        return self._bound_port

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def start(
        self,
        config: ReceiverConfig,
        on_photo_saved: PhotoSavedCallback,
        on_text_received: TextReceivedCallback | None = None,
    ) -> None:
        """
        수신 시작.

        Args:
            config: 수신기 설정
            on_photo_saved: 사진 저장 후 콜백 (필수)
            on_text_received: 텍스트 콜백 (선택)

        Raises:
            ConfigurationError: 설정/콜백 누락, save_folder 생성 실패
            BindError: 포트 바인드 또는 서버 시작 실패
        """
        async with self._lock:
            if self._state == ReceiverState.RUNNING:
                logger.debug("Receiver already running on port %s", self.port)
                return

            if config is None:
                raise ConfigurationError(ErrorCodes.CONFIG_INVALID, field="config")
            if on_photo_saved is None:
                raise ConfigurationError(ErrorCodes.CALLBACK_MISSING)
            config.validate()

            self._state = ReceiverState.STARTING
            try:
                await self._start_locked(config, on_photo_saved, on_text_received)
            except BaseException:
                await self._release()
                self._state = ReceiverState.STOPPED
                raise

            self._config = config
            self._state = ReceiverState.RUNNING
            logger.info(
                "Receiver listening on %s:%s (save_folder=%s, password=%s)",
                self.host,
                self.port,
                config.save_folder,
                "required" if config.require_password else "off",
            )
            if config.password_misconfigured:
                logger.warning(
                    "Password is required but empty: every request will be refused"
                )

    async def _start_locked(
        self,
        config: ReceiverConfig,
        on_photo_saved: PhotoSavedCallback,
        on_text_received: TextReceivedCallback | None,
    ) -> None:
        save_folder = Path(config.save_folder)
        try:
            save_folder.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigurationError(
                ErrorCodes.SAVE_FOLDER_UNAVAILABLE,
                save_folder=str(save_folder),
                errno=e.errno,
            ) from e

        self._socket = bind_listener(self.host, config.port)
        self._bound_port = int(self._socket.getsockname()[1])

        app = create_app(config, on_photo_saved, on_text_received)
        uvicorn_config = uvicorn.Config(
            app,
            log_config=None,
            access_log=False,  # 쿼리 스트링에 토큰이 있음
            lifespan="off",
            # 1초 미만 값이 0으로 내려가면 drain 없이 즉시 취소됨
            timeout_graceful_shutdown=(
                math.ceil(self.graceful_timeout)
                if self.graceful_timeout is not None
                else None
            ),
        )
        self._server = uvicorn.Server(uvicorn_config)
        self._serve_task = asyncio.create_task(
            self._server.serve(sockets=[self._socket])
        )
        self._serve_task.add_done_callback(self._on_serve_done)

        while not self._server.started:
            if self._serve_task.done():
                exc = self._serve_task.exception()
                raise BindError(
                    ErrorCodes.SERVER_START_FAILED, port=config.port
                ) from exc
            await asyncio.sleep(STARTUP_POLL_INTERVAL)

    def _on_serve_done(self, task: asyncio.Task[None]) -> None:
        """
        stop() 없이 서버가 끝난 경우 (uvicorn 자체 시그널 처리 등) stopped로 전환.

        stop()/시작 실패 정리는 _release()가 태스크를 먼저 떼어내므로 여기서 무시된다.
        """
        if task is not self._serve_task or self._state != ReceiverState.RUNNING:
            return

        exc = None if task.cancelled() else task.exception()
        if exc is not None:
            logger.error(f"Receiver server exited unexpectedly: {exc}")
        else:
            logger.warning("Receiver server exited without stop()")

        if self._socket is not None:
            self._socket.close()
        self._server = None
        self._serve_task = None
        self._socket = None
        self._bound_port = None
        self._config = None
        self._state = ReceiverState.STOPPED

    async def stop(self) -> None:
        """
        수신 중지 (graceful drain).

        새 연결은 즉시 거절, 처리 중인 요청은 완료(콜백 포함)까지 기다린 뒤
        소켓을 해제한다. 이미 stopped면 no-op.
        """
        async with self._lock:
            if self._state == ReceiverState.STOPPED:
                return

            self._state = ReceiverState.STOPPING
            logger.info("Receiver stopping (draining in-flight requests)")
            try:
                await self._release()
            finally:
                self._config = None
                self._state = ReceiverState.STOPPED
            logger.info("Receiver stopped")

    async def _release(self) -> None:
        """서버 종료 대기 + 소켓 해제."""
        server, task, sock = self._server, self._serve_task, self._socket
        self._server = None
        self._serve_task = None
        self._socket = None

        try:
            if server is not None and task is not None:
                server.should_exit = True
                try:
                    await task
                except Exception as e:
                    logger.warning(f"Receiver server exited with error: {e}")
        finally:
            if sock is not None:
                sock.close()
            self._bound_port = None
