"""Pipeline driver: runs ordered stages, then dispatches to the routes."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from starlette.datastructures import MutableHeaders
from starlette.requests import Request
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from jobportal.pipeline.context import RequestContext
from jobportal.pipeline.errors import ErrorHandler, handle_error
from jobportal.pipeline.results import Continue, Fail, Respond, Stage, StageResult

logger = logging.getLogger(__name__)


class _ResponseSender:
    """Wraps ``send`` to apply context finalizers to the response start."""

    def __init__(self, context: RequestContext, send: Send) -> None:
        self.context = context
        self._send = send
        self.started = False
        self.status_code: int | None = None

    async def __call__(self, message: Message) -> None:
        if message["type"] == "http.response.start":
            headers = MutableHeaders(scope=message)
            await self.context.finalize(headers)
            self.started = True
            self.status_code = message["status"]
        await self._send(message)


def _replay_body(body: bytes, receive: Receive) -> Receive:
    """Build a ``receive`` that yields an already-read body once."""
    delivered = False

    async def replay() -> Message:
        nonlocal delivered
        if not delivered:
            delivered = True
            return {"type": "http.request", "body": body, "more_body": False}
        return await receive()

    return replay


class Pipeline:
    """
    ASGI middleware running a fixed, ordered list of stages per request.

    Each stage returns ``Continue``, ``Respond`` or ``Fail``. The first
    ``Respond`` is sent as-is and route dispatch never runs; ``Fail`` and
    any exception raised by a stage or by the wrapped app go to the error
    handler. A request is handled at most once: there is no retry.
    """

    def __init__(
        self,
        app: ASGIApp,
        stages: Sequence[Stage] = (),
        error_handler: ErrorHandler = handle_error,
    ) -> None:
        self.app = app
        self.stages = tuple(stages)
        self.error_handler = error_handler

    async def run_stages(self, context: RequestContext) -> StageResult:
        """
        Run stages in order until one stops the request.

        Args:
            context: Fresh request context

        Returns:
            The stopping ``Respond``/``Fail``, or ``Continue`` once every stage passed
        """
        for stage in self.stages:
            result = await stage(context)
            if not isinstance(result, Continue):
                return result
            context = result.context
        return Continue(context)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope, receive)
        context = RequestContext(request=request)
        request.state.context = context
        sender = _ResponseSender(context, send)

        try:
            result = await self.run_stages(context)
            if isinstance(result, Respond):
                await result.response(scope, receive, sender)
            elif isinstance(result, Fail):
                await self._fail(context, result.error, sender)
            else:
                if context.raw_body is not None:
                    receive = _replay_body(context.raw_body, receive)
                await self.app(scope, receive, sender)
        except Exception as exc:
            await self._fail(context, exc, sender)
        finally:
            logger.info("%s %s -> %s", context.method, context.path, sender.status_code)

    async def _fail(
        self, context: RequestContext, error: BaseException, sender: _ResponseSender
    ) -> None:
        if sender.started:
            # Headers are already on the wire; let the server close the connection
            logger.error(
                "Error after response started for %s %s",
                context.method,
                context.path,
                exc_info=(type(error), error, error.__traceback__),
            )
            raise error
        response = await self.error_handler(context, error)
        await response(context.request.scope, context.request.receive, sender)
