"""
Error definitions for the receiver.

규칙:
- 조용한 실패 금지 → ReceiverError로 명시적 실패
- 에러 코드가 HTTP 상태를 결정
- context에 토큰/비밀번호 절대 포함 금지
"""

from typing import Any


class ReceiverError(Exception):
    """
    수신기 에러.

    요청 처리 중 발생하면 앱의 예외 핸들러가 HTTP 응답으로 변환하고,
    시작 시 발생하면 start() 호출자에게 그대로 전파된다.

    Usage:
        raise ReceiverError(ErrorCodes.TOKEN_INVALID, client="10.0.0.5")
    """

    def __init__(self, code: str, **context: Any) -> None:
        self.code = code
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        return f"[{self.code}] {ctx_str}" if ctx_str else f"[{self.code}]"

    @property
    def status_code(self) -> int:
        """에러 코드에 대응하는 HTTP 상태."""
        return ERROR_STATUS.get(self.code, 500)

    @property
    def message(self) -> str:
        """송신자에게 보여줄 설명 (민감 정보 없음)."""
        return ERROR_MESSAGES.get(self.code, "Internal error")

    def to_dict(self) -> dict[str, Any]:
        """로그/JSON 직렬화용."""
        return {
            "code": self.code,
            **self.context,
        }


class ConfigurationError(ReceiverError):
    """설정 누락/오류. start()에서 발생."""


class BindError(ReceiverError):
    """리스너 바인드 실패. start()에서 발생, 서비스는 stopped 유지."""


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCodes:
    """에러 코드 상수. 새 코드 추가 시 ERROR_STATUS/ERROR_MESSAGES에도 추가."""

    # === Startup ===
    CONFIG_INVALID = "CONFIG_INVALID"
    CALLBACK_MISSING = "CALLBACK_MISSING"
    SAVE_FOLDER_UNAVAILABLE = "SAVE_FOLDER_UNAVAILABLE"
    BIND_FAILED = "BIND_FAILED"
    SERVER_START_FAILED = "SERVER_START_FAILED"

    # === Auth ===
    TOKEN_INVALID = "TOKEN_INVALID"
    PASSWORD_INVALID = "PASSWORD_INVALID"
    PASSWORD_NOT_CONFIGURED = "PASSWORD_NOT_CONFIGURED"  # fail closed

    # === Malformed request ===
    UNSUPPORTED_CONTENT_TYPE = "UNSUPPORTED_CONTENT_TYPE"
    FORM_INVALID = "FORM_INVALID"
    FILE_MISSING = "FILE_MISSING"
    FILE_EMPTY = "FILE_EMPTY"
    TEXT_EMPTY = "TEXT_EMPTY"
    TEXT_INVALID_ENCODING = "TEXT_INVALID_ENCODING"

    # === I/O ===
    WRITE_FAILED = "WRITE_FAILED"
    CALLBACK_FAILED = "CALLBACK_FAILED"


ERROR_STATUS: dict[str, int] = {
    ErrorCodes.TOKEN_INVALID: 401,
    ErrorCodes.PASSWORD_INVALID: 401,
    ErrorCodes.PASSWORD_NOT_CONFIGURED: 500,
    ErrorCodes.UNSUPPORTED_CONTENT_TYPE: 400,
    ErrorCodes.FORM_INVALID: 400,
    ErrorCodes.FILE_MISSING: 400,
    ErrorCodes.FILE_EMPTY: 400,
    ErrorCodes.TEXT_EMPTY: 400,
    ErrorCodes.TEXT_INVALID_ENCODING: 400,
    ErrorCodes.WRITE_FAILED: 500,
    ErrorCodes.CALLBACK_FAILED: 500,
}

ERROR_MESSAGES: dict[str, str] = {
    ErrorCodes.CONFIG_INVALID: "Receiver configuration is invalid",
    ErrorCodes.CALLBACK_MISSING: "Photo callback is required",
    ErrorCodes.SAVE_FOLDER_UNAVAILABLE: "Save folder could not be created",
    ErrorCodes.BIND_FAILED: "Could not bind the listener port",
    ErrorCodes.SERVER_START_FAILED: "HTTP server failed to start",
    ErrorCodes.TOKEN_INVALID: "Invalid or missing token",
    ErrorCodes.PASSWORD_INVALID: "Invalid or missing password",
    ErrorCodes.PASSWORD_NOT_CONFIGURED: "Server requires a password but none is configured",
    ErrorCodes.UNSUPPORTED_CONTENT_TYPE: "Expected multipart/form-data",
    ErrorCodes.FORM_INVALID: "Malformed form body",
    ErrorCodes.FILE_MISSING: "Missing file part 'file' (send it as a file upload with a filename)",
    ErrorCodes.FILE_EMPTY: "Uploaded file is empty",
    ErrorCodes.TEXT_EMPTY: "Text is empty",
    ErrorCodes.TEXT_INVALID_ENCODING: "Body is not valid UTF-8",
    ErrorCodes.WRITE_FAILED: "Failed to save the photo",
    ErrorCodes.CALLBACK_FAILED: "Receiver failed to process the payload",
}
