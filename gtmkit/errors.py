"""Error types, API error mapping and retry with exponential backoff."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable, Iterable, TypeVar

T = TypeVar("T")

RETRYABLE_CODES = frozenset({403, 429})
MAX_BACKOFF_SECONDS = 32


class GtmError(Exception):
    """Base class for Tag Manager errors."""


class _CategorisedError(GtmError):
    reason = ""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(f"{self.reason}: {detail}" if detail else self.reason)


class NotFoundError(_CategorisedError):
    """The requested resource does not exist."""

    reason = "resource not found"


class ConflictError(_CategorisedError):
    """The resource changed since it was read (fingerprint mismatch)."""

    reason = "resource conflict - fingerprint mismatch"


class RateLimitError(_CategorisedError):
    """Too many requests were made."""

    reason = "rate limit exceeded"


class PermissionDeniedError(_CategorisedError):
    """The caller lacks the permissions for the request."""

    reason = "insufficient permissions"


class InvalidRequestError(_CategorisedError):
    """The request was rejected as malformed."""

    reason = "invalid request"


@dataclass(frozen=True)
class ApiErrorItem:
    """One entry of the error list an API response carries."""

    reason: str = ""
    message: str = ""


class ApiError(Exception):
    """An error response returned by the Tag Manager API."""

    def __init__(
        self,
        code: int,
        message: str = "",
        errors: Iterable[ApiErrorItem] = (),
        body: str = "",
    ) -> None:
        self.code = code
        self.message = message
        self.errors = list(errors)
        self.body = body
        if message:
            text = f"googleapi: Error {code}: {message}"
        else:
            text = f"googleapi: got HTTP response code {code}"
        super().__init__(text)


class Cancelled(Exception):
    """The operation's context was cancelled."""


class DeadlineExceeded(Exception):
    """The operation's context ran past its deadline."""


class Context:
    """Cancellation and deadline for a running operation."""

    def __init__(self, timeout: float | None = None) -> None:
        self._event = threading.Event()
        self._deadline = None if timeout is None else time.monotonic() + timeout

    def cancel(self) -> None:
        """Cancel the context; waiting operations stop."""
        self._event.set()

    def check(self) -> None:
        """Raise if the context is cancelled or past its deadline."""
        if self._event.is_set():
            raise Cancelled("context canceled")
        if self._deadline is not None and time.monotonic() >= self._deadline:
            raise DeadlineExceeded("context deadline exceeded")

    def wait(self, seconds: float) -> None:
        """Sleep for ``seconds`` unless the context ends first, then raise."""
        self.check()
        timeout = seconds
        capped = False
        if self._deadline is not None:
            remaining = max(0.0, self._deadline - time.monotonic())
            if remaining < timeout:
                timeout = remaining
                capped = True
        self._event.wait(timeout)
        if self._event.is_set():
            raise Cancelled("context canceled")
        if capped:
            raise DeadlineExceeded("context deadline exceeded")
        self.check()


def format_api_error_detail(api_error: ApiError) -> str:
    """Collect the message, the error reasons and the body of an API error."""
    detail = api_error.message
    for item in api_error.errors:
        detail += f"\n  reason={item.reason}: {item.message}"
    if api_error.body:
        detail += f"\n  body: {api_error.body}"
    return detail


_CODE_ERRORS: dict[int, type[_CategorisedError]] = {
    404: NotFoundError,
    409: ConflictError,
    403: PermissionDeniedError,
    429: RateLimitError,
    400: InvalidRequestError,
}


def map_google_error(err: BaseException | None) -> BaseException | None:
    """Translate an API error into the matching package error.

    Errors that are not API errors come back unchanged.
    """
    if err is None:
        return None
    if not isinstance(err, ApiError):
        return err
    detail = format_api_error_detail(err)
    error_type = _CODE_ERRORS.get(err.code)
    mapped: GtmError
    if error_type is None:
        mapped = GtmError(f"API error {err.code}: {detail}")
    else:
        mapped = error_type(detail)
    mapped.__cause__ = err
    return mapped


def retry_with_backoff(
    fn: Callable[[], T],
    max_retries: int = 3,
    context: Context | None = None,
) -> T:
    """Call ``fn``, retrying rate-limit errors (403, 429) with exponential backoff.

    Waits 1, 2, 4 ... seconds between attempts, capped at 32 seconds.
    """
    ctx = Context() if context is None else context
    for attempt in range(max_retries + 1):
        ctx.check()
        try:
            return fn()
        except ApiError as exc:
            if exc.code not in RETRYABLE_CODES or attempt >= max_retries:
                raise
            ctx.wait(min(2**attempt, MAX_BACKOFF_SECONDS))
    raise GtmError("max retries exceeded")