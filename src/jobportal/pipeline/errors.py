"""Terminal error handling for the request pipeline."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from starlette.responses import JSONResponse, Response

from jobportal.pipeline.context import RequestContext

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong!"

ErrorHandler = Callable[[RequestContext, BaseException], Awaitable[Response]]


async def handle_error(context: RequestContext, error: BaseException) -> Response:
    """
    Turn any unhandled failure into a generic 500 response.

    The traceback goes to the log only; the client always gets the same body.

    Args:
        context: Context of the failed request
        error: The exception raised by a stage or route collaborator

    Returns:
        JSON 500 response
    """
    logger.error(
        "Unhandled error while processing %s %s: %s",
        context.method,
        context.path,
        error,
        exc_info=(type(error), error, error.__traceback__),
    )
    return JSONResponse({"message": GENERIC_ERROR_MESSAGE}, status_code=500)
