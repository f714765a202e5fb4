"""Error types and status mapping."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from http import HTTPStatus
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .cancellation import CancellationToken

_MAX_BODY_LENGTH = 200


def _status_text(status: int | None) -> str:
    if status is None:
        return "unknown"
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return "unknown"


class CencliError(Exception):
    """Base exception for this package."""

    title = "Unknown Error"
    should_print_usage = False

    def __init__(
        self,
        message: str,
        *,
        http_status: int | None = None,
        cause: str | None = None,
    ) -> None:
        super().__init__(message)
        self.http_status = http_status
        self.cause = cause

    @property
    def status(self) -> str:
        return _status_text(self.http_status)


class UsageError(CencliError):
    """Invalid input supplied by the caller."""

    title = "Usage Error"
    should_print_usage = True

    def __init__(self, message: str) -> None:
        super().__init__(message, cause="validation")


class InvalidPaginationParamsError(UsageError):
    title = "Invalid Pagination Params"


class InvalidAssetIDError(UsageError):
    title = "Invalid Asset ID"

    def __init__(self, asset_id: str, reason: str) -> None:
        super().__init__(f"invalid asset ID: {asset_id} ({reason})")
        self.asset_id = asset_id
        self.reason = reason


class NoAssetsError(UsageError):
    title = "No Assets Provided"

    def __init__(self) -> None:
        super().__init__("you must provide at least one asset")


class MixedAssetTypesError(UsageError):
    title = "Mixed Asset Types"

    def __init__(self, *types_found: str) -> None:
        super().__init__("mixed asset types: " + ", ".join(str(t) for t in types_found))
        self.types_found = tuple(types_found)


class OperationInterruptedError(CencliError):
    """The run was cancelled before it completed."""

    title = "Interrupted"

    def __init__(self) -> None:
        super().__init__(
            "the operation's context was cancelled before it completed",
            cause="cancelled",
        )


class DeadlineExceededError(CencliError):
    """The run's deadline expired before it completed."""

    title = "Timeout"

    def __init__(self) -> None:
        super().__init__(
            "the operation timed out before it could be completed",
            cause="deadline",
        )


class TransportError(CencliError):
    """Network/transport-level failure."""

    title = "Network Error"


class ProtocolError(CencliError):
    """Response shape or body could not be interpreted."""

    title = "Unexpected API Response"


class ClientNotConfiguredError(CencliError):
    title = "Censys Client Not Configured"

    def __init__(self) -> None:
        super().__init__("The API client is not configured.")


class ClientClosedError(CencliError):
    """Raised when client is used after close."""

    title = "Client Closed"


class ApiStructuredError(CencliError):
    """Problem-details error body returned by the API."""

    title = "Error Returned from Censys API"

    def __init__(
        self,
        *,
        title: str | None = None,
        detail: str | None = None,
        status: int | None = None,
        type_: str | None = None,
        instance: str | None = None,
        errors: Sequence[Mapping[str, object]] = (),
        http_status: int | None = None,
    ) -> None:
        self.error_title = title
        self.detail = detail
        self.type = type_
        self.instance = instance
        self.errors = tuple(dict(item) for item in errors)
        resolved_status = status if status is not None else http_status
        super().__init__(
            self._render(resolved_status),
            http_status=resolved_status,
            cause=_cause_for_status(resolved_status),
        )

    def _render(self, status: int | None) -> str:
        data: dict[str, object] = {}
        for key, value in (
            ("title", self.error_title),
            ("detail", self.detail),
            ("status", status),
            ("type", self.type),
            ("instance", self.instance),
        ):
            if value is not None:
                data[key] = value
        if self.errors:
            data["errors"] = [
                {k: v for k, v in item.items() if k in {"location", "message", "value"} and v is not None}
                for item in self.errors
            ]
        return json.dumps(data, indent=2, default=str)


class ApiUnauthorizedError(CencliError):
    """Authentication rejected by the API."""

    title = "Unauthorized to Access Censys API"

    def __init__(
        self,
        *,
        code: int | None = None,
        status_name: str | None = None,
        message: str | None = None,
        reason: str | None = None,
        http_status: int | None = None,
    ) -> None:
        lines: list[str] = []
        if code is not None:
            lines.append(f"Code: {code}")
        if status_name is not None:
            lines.append(f"Status: {status_name}")
        if message is not None:
            lines.append(f"Message: {message}")
        if reason is not None:
            lines.append(f"Reason: {reason}")
        super().__init__(
            "\n".join(lines) or "unauthorized",
            http_status=code if code is not None else http_status,
            cause="unauthorized",
        )
        self.reason = reason


class ApiGenericError(CencliError):
    """Non-structured error response."""

    def __init__(self, message: str, *, http_status: int, body: str = "") -> None:
        super().__init__(
            f"{message} (status code: {http_status})\n{_render_body(body)}".strip(),
            http_status=http_status,
            cause=_cause_for_status(http_status),
        )
        self.body = body

    @property
    def title(self) -> str:  # type: ignore[override]
        if self.http_status == 429:
            return "Rate Limit Exceeded"
        return "Error Returned from Censys API"


class PartialError(CencliError):
    """Wraps an error raised after some data was already retrieved."""

    def __init__(self, error: CencliError) -> None:
        super().__init__(
            f"{error}\n\nsome data was successfully retrieved before this error occurred",
            http_status=error.http_status,
            cause=error.cause,
        )
        self.error = error

    @property
    def title(self) -> str:  # type: ignore[override]
        return f"{self.error.title} (partial data)"

    @property
    def should_print_usage(self) -> bool:  # type: ignore[override]
        return self.error.should_print_usage


def _render_body(body: str) -> str:
    try:
        parsed = json.loads(body)
    except ValueError:
        if len(body) > _MAX_BODY_LENGTH:
            return body[:_MAX_BODY_LENGTH] + f"... (truncated {len(body) - _MAX_BODY_LENGTH} bytes)"
        return body
    return json.dumps(parsed, indent=2)


def _cause_for_status(status: int | None) -> str | None:
    if status is None:
        return None
    if status == 429:
        return "rate_limited"
    if status >= 500:
        return "server_transient"
    if status >= 400:
        return "validation"
    return None


def _to_int(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _optional_str(value: object) -> str | None:
    return str(value) if value is not None else None


def classify_http_error(
    payload: Mapping[str, object] | None,
    *,
    http_status: int | None,
    body_text: str = "",
) -> CencliError | None:
    """Map an HTTP status and decoded body to a domain exception."""

    if http_status is not None and 200 <= http_status < 300:
        return None
    if http_status is None:
        return ProtocolError("response carries no HTTP status")

    if isinstance(payload, Mapping):
        auth = payload.get("error")
        if http_status in {401, 403} and isinstance(auth, Mapping):
            return ApiUnauthorizedError(
                code=_to_int(auth.get("code")),
                status_name=_optional_str(auth.get("status")),
                message=_optional_str(auth.get("message")),
                reason=_optional_str(auth.get("reason")),
                http_status=http_status,
            )
        if any(key in payload for key in ("title", "detail", "errors")):
            raw_errors = payload.get("errors")
            errors = (
                [item for item in raw_errors if isinstance(item, Mapping)]
                if isinstance(raw_errors, list)
                else []
            )
            return ApiStructuredError(
                title=_optional_str(payload.get("title")),
                detail=_optional_str(payload.get("detail")),
                status=_to_int(payload.get("status")),
                type_=_optional_str(payload.get("type")),
                instance=_optional_str(payload.get("instance")),
                errors=errors,
                http_status=http_status,
            )

    return ApiGenericError(
        "API error occurred",
        http_status=http_status,
        body=body_text,
    )


def classify_cancellation(token: "CancellationToken") -> CencliError:
    """Classify a triggered cancellation token into a user-facing error."""

    if token.deadline_exceeded:
        return DeadlineExceededError()
    return OperationInterruptedError()


def ensure_cencli_error(exc: BaseException) -> CencliError:
    if isinstance(exc, CencliError):
        return exc
    wrapped = CencliError(str(exc) or exc.__class__.__name__)
    wrapped.__cause__ = exc
    return wrapped


def to_partial_error(error: CencliError | None) -> PartialError | None:
    if error is None:
        return None
    if isinstance(error, PartialError):
        return error
    return PartialError(error)


def _unwrap(error: BaseException | None) -> BaseException | None:
    while isinstance(error, PartialError):
        error = error.error
    return error


def is_interrupted(error: BaseException | None) -> bool:
    return isinstance(_unwrap(error), OperationInterruptedError)


def is_deadline_exceeded(error: BaseException | None) -> bool:
    return isinstance(_unwrap(error), DeadlineExceededError)


__all__ = [
    "CencliError",
    "UsageError",
    "InvalidPaginationParamsError",
    "InvalidAssetIDError",
    "NoAssetsError",
    "MixedAssetTypesError",
    "OperationInterruptedError",
    "DeadlineExceededError",
    "TransportError",
    "ProtocolError",
    "ClientNotConfiguredError",
    "ClientClosedError",
    "ApiStructuredError",
    "ApiUnauthorizedError",
    "ApiGenericError",
    "PartialError",
    "classify_http_error",
    "classify_cancellation",
    "ensure_cencli_error",
    "to_partial_error",
    "is_interrupted",
    "is_deadline_exceeded",
]
