"""Platform error envelope models."""

from dataclasses import dataclass
from typing import Any

import httpx

SUCCESS_RESULT = "0"


@dataclass
class ErrorDetail:
    """Error information extracted from a platform response body.

    Data endpoints answer with `{"result": "0", "desc": ..., "data": ...}`;
    the identity endpoint uses the OAuth shape
    `{"error": ..., "error_description": ...}`. Both end up here.
    """

    code: str | None = None  # platform result code or OAuth error name
    message: str | None = None  # human-readable description
    errors: list[dict] | None = None  # per-field problems, when reported

    # Remaining members of the body
    extensions: dict[str, Any] | None = None

    @classmethod
    def from_payload(cls, data: Any) -> "ErrorDetail | None":
        """Build from an already decoded JSON body, or None if it has no error fields."""
        if not isinstance(data, dict):
            return None

        if "result" in data or "desc" in data:
            code = data.get("result")
            message = data.get("desc")
            known = {"result", "desc", "data", "errors"}
        elif "error" in data:
            code = data.get("error")
            message = data.get("error_description")
            known = {"error", "error_description", "errors"}
        else:
            return None

        errors = data.get("errors")
        extensions = {k: v for k, v in data.items() if k not in known}

        return cls(
            code=str(code) if code is not None else None,
            message=message,
            errors=errors if isinstance(errors, list) else None,
            extensions=extensions if extensions else None,
        )

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ErrorDetail | None":
        try:
            data = response.json()
        except (ValueError, TypeError, AttributeError):
            # JSON decode errors or an empty body
            return None
        return cls.from_payload(data)

    @property
    def is_success(self) -> bool:
        return self.code == SUCCESS_RESULT

    def to_exception_message(self) -> str:
        lines = []

        if self.message:
            lines.append(self.message)
        if self.code is not None:
            lines.append(f"Result Code: {self.code}")
        if self.errors:
            lines.append("Field errors:")
            for item in self.errors:
                lines.append(f"  - {item}")

        return "\n".join(lines) if lines else "Unknown platform error"
