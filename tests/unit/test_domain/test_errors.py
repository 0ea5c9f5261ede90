"""
test_errors.py - 에러 정의 테스트

DoD:
- 에러 코드 → HTTP 상태 매핑
- 메시지/직렬화에 context 포함
"""

import pytest

from src.domain.errors import (
    ERROR_MESSAGES,
    BindError,
    ConfigurationError,
    ErrorCodes,
    ReceiverError,
)


class TestReceiverError:
    """ReceiverError 테스트."""

    def test_message_format(self):
        """[CODE] key='value' 포맷."""
        error = ReceiverError(ErrorCodes.BIND_FAILED, port=5055)

        assert str(error) == "[BIND_FAILED] port=5055"

    def test_message_without_context(self):
        """context 없으면 [CODE]만."""
        assert str(ReceiverError(ErrorCodes.TEXT_EMPTY)) == "[TEXT_EMPTY]"

    def test_to_dict(self):
        """직렬화."""
        error = ReceiverError(ErrorCodes.WRITE_FAILED, errno=28)

        assert error.to_dict() == {"code": "WRITE_FAILED", "errno": 28}

    @pytest.mark.parametrize(
        "code,status",
        [
            (ErrorCodes.TOKEN_INVALID, 401),
            (ErrorCodes.PASSWORD_INVALID, 401),
            (ErrorCodes.PASSWORD_NOT_CONFIGURED, 500),
            (ErrorCodes.UNSUPPORTED_CONTENT_TYPE, 400),
            (ErrorCodes.FORM_INVALID, 400),
            (ErrorCodes.FILE_MISSING, 400),
            (ErrorCodes.FILE_EMPTY, 400),
            (ErrorCodes.TEXT_EMPTY, 400),
            (ErrorCodes.TEXT_INVALID_ENCODING, 400),
            (ErrorCodes.WRITE_FAILED, 500),
            (ErrorCodes.CALLBACK_FAILED, 500),
        ],
    )
    def test_status_codes(self, code: str, status: int):
        """에러 코드별 HTTP 상태."""
        assert ReceiverError(code).status_code == status

    def test_unknown_code_is_500(self):
        """알 수 없는 코드 → 500."""
        error = ReceiverError("SOMETHING_ELSE")

        assert error.status_code == 500
        assert error.message == "Internal error"

    def test_every_code_has_message(self):
        """모든 에러 코드에 메시지 정의."""
        codes = [v for k, v in vars(ErrorCodes).items() if k.isupper()]

        assert set(codes) <= set(ERROR_MESSAGES)

    def test_startup_errors_are_receiver_errors(self):
        """ConfigurationError/BindError도 ReceiverError로 잡힘."""
        assert issubclass(ConfigurationError, ReceiverError)
        assert issubclass(BindError, ReceiverError)
