import asyncio
import functools
import logging
import re
import ssl

from googleapiclient.errors import HttpError

from core.errors import (
    FormatterError,
    InvalidInputError,
    NotAuthenticatedError,
    RemoteForbiddenError,
    RemoteNotFoundError,
    TransientToolError,
)

logger = logging.getLogger(__name__)

_DOC_URL_RE = re.compile(r"/document/d/([a-zA-Z0-9_-]+)")
_DOC_ID_RE = re.compile(r"^[a-zA-Z0-9_-]{20,}$")


def require_text(value: str | None, param_name: str) -> str:
    """Validate that a required string is present and not blank."""
    if not isinstance(value, str) or not value.strip():
        raise InvalidInputError(f"Missing required string: {param_name}")
    return value


def extract_document_id(value: str | None) -> str:
    """
    Resolve a Google Docs URL or bare document ID to the document ID.

    Raises:
        InvalidInputError: If the input is empty or not a recognizable Docs link.
    """
    text = require_text(value, "doc_url").strip()

    match = _DOC_URL_RE.search(text)
    if match:
        return match.group(1)

    if _DOC_ID_RE.match(text):
        return text

    raise InvalidInputError("Invalid Google Doc link.")


def classify_http_error(error: HttpError, document_id: str | None = None) -> FormatterError:
    """
    Map a Google API HttpError to the formatter error taxonomy.

    Args:
        error: The HttpError raised by googleapiclient
        document_id: Optional resource identifier to keep in the error

    Returns:
        The matching FormatterError (not raised)
    """
    status = error.resp.status
    if status == 404:
        return RemoteNotFoundError(document_id)
    if status == 403:
        return RemoteForbiddenError(document_id)
    if status == 401:
        return NotAuthenticatedError("Authentication expired. Please reconnect your Google account.")
    return TransientToolError(f"Google API error: {error}", status_code=status)


def handle_http_errors(operation: str, is_read_only: bool = False):
    """
    A decorator to handle Google API HttpErrors and transient SSL errors in a standardized way.

    It wraps a coroutine, catches HttpError, logs a detailed error message,
    and raises the classified FormatterError instead.

    If is_read_only is True, it will also catch ssl.SSLError and retry with
    exponential backoff. After exhausting retries, it raises a TransientToolError.

    Args:
        operation (str): The name of the decorated operation (e.g., 'load_document').
        is_read_only (bool): If True, the operation is considered safe to retry on
                             transient network errors. Defaults to False.
    """

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            max_retries = 3
            base_delay = 1

            for attempt in range(max_retries):
                try:
                    return await func(*args, **kwargs)
                except ssl.SSLError as e:
                    if is_read_only and attempt < max_retries - 1:
                        delay = base_delay * (2**attempt)
                        logger.warning(
                            f"SSL error in {operation} on attempt {attempt + 1}: {e}. Retrying in {delay} seconds..."
                        )
                        await asyncio.sleep(delay)
                    else:
                        logger.error(f"SSL error in {operation} on final attempt: {e}. Raising exception.")
                        raise TransientToolError(
                            f"A transient SSL error occurred in '{operation}'. "
                            "This is likely a temporary network or certificate issue. Please try again shortly."
                        ) from e
                except HttpError as error:
                    document_id = kwargs.get("document_id")
                    if document_id is None and args:
                        document_id = getattr(args[0], "document_id", None)
                    classified = classify_http_error(error, document_id)
                    logger.error(f"API error in {operation}: {error}", exc_info=True)
                    raise classified from error

        return wrapper

    return decorator
