from typing import Any, Dict

from ..validation import ValidationResult
from .base import Request, RequestBuilder


MAX_CREDENTIAL_LENGTH = 255


class LoginRequest(Request):
    """POST /auth/login; qBittorrent answers with a SID cookie."""

    endpoint = "/auth/login"
    requires_auth = False

    @classmethod
    def builder(cls) -> "LoginRequestBuilder":
        return LoginRequestBuilder()

    @classmethod
    def create(cls, username: str, password: str) -> "LoginRequest":
        return cls.builder().username(username).password(password).build()

    @property
    def username(self) -> str:
        return self._get("username", "")

    @property
    def password(self) -> str:
        return self._get("password", "")

    def validate(self) -> ValidationResult:
        result = ValidationResult.success()
        for field, value in (("username", self.username), ("password", self.password)):
            if not value:
                result.add_error(f"{field} cannot be empty")
            elif len(value) > MAX_CREDENTIAL_LENGTH:
                result.add_error(f"{field} cannot exceed {MAX_CREDENTIAL_LENGTH} characters")
        return result

    def to_array(self) -> Dict[str, str]:
        return {"username": self.username, "password": self.password}

    def get_summary(self) -> Dict[str, Any]:
        summary = super().get_summary()
        summary["username"] = self.username
        return summary

    def __repr__(self) -> str:
        return f"LoginRequest(username={self.username!r})"


class LoginRequestBuilder(RequestBuilder[LoginRequest]):
    request_class = LoginRequest
    required_fields = ("username", "password")

    def username(self, username: str):
        return self._set("username", username)

    def password(self, password: str):
        return self._set("password", password)


class LogoutRequest(Request):
    """POST /auth/logout; ends the session behind the SID cookie."""

    endpoint = "/auth/logout"

    @classmethod
    def builder(cls) -> "LogoutRequestBuilder":
        return LogoutRequestBuilder()

    @classmethod
    def create(cls) -> "LogoutRequest":
        return cls.builder().build()

    def to_array(self) -> Dict[str, str]:
        return {}


class LogoutRequestBuilder(RequestBuilder[LogoutRequest]):
    request_class = LogoutRequest
