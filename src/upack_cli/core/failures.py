"""Transport failure translation.

Maps ``httpx`` failures raised by a feed adapter into
:class:`~upack_cli.exceptions.FeedError` with a message the user can act
on.  The original failure is always kept as ``__cause__``.
"""

from __future__ import annotations

import logging

import httpx

from upack_cli.exceptions import FeedError

logger = logging.getLogger(__name__)

FEED_NOT_FOUND_MESSAGE = "No UPack feed was found at the given URL"
PACKAGE_NOT_FOUND_MESSAGE = "The specified universal package was not found at the given URL"
INCORRECT_CREDENTIALS_MESSAGE = "The server rejected the username or password given"


def _plain_text_body(response: httpx.Response) -> str | None:
    """Return the stripped ``text/plain`` body, or ``None``.

    Reading the body is best-effort: an unread stream or a decoding
    problem leaves the message without a body.
    """
    media_type = response.headers.get("content-type", "").split(";")[0].strip()
    if media_type.lower() != "text/plain":
        return None
    try:
        body = response.text
    except Exception:  # noqa: BLE001
        logger.debug("could not read failure response body", exc_info=True)
        return None
    return body.strip() or None


def translate_feed_failure(
    failure: httpx.HTTPError,
    not_found_message: str = FEED_NOT_FOUND_MESSAGE,
) -> FeedError:
    """Build the user-facing error for a feed transport *failure*.

    Rules
    -----
    * ``404`` → *not_found_message*.
    * ``401`` → :data:`INCORRECT_CREDENTIALS_MESSAGE`, nothing appended.
    * Any other status → the failure's own message.
    * A non-blank ``text/plain`` body is appended as ``message: body``
      (except for ``401``).
    * Failures with no response (connect errors, timeouts) keep their own
      message.
    """
    message = str(failure) or type(failure).__name__

    if isinstance(failure, httpx.HTTPStatusError):
        response = failure.response
        status = response.status_code
        if status == httpx.codes.UNAUTHORIZED:
            message = INCORRECT_CREDENTIALS_MESSAGE
        else:
            if status == httpx.codes.NOT_FOUND:
                message = not_found_message
            body = _plain_text_body(response)
            if body:
                message = f"{message}: {body}"

    error = FeedError(message)
    error.__cause__ = failure
    return error
