"""Tagged results returned by pipeline stages."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from starlette.responses import Response

if TYPE_CHECKING:
    from jobportal.pipeline.context import RequestContext


@dataclass(frozen=True)
class Continue:
    """Hand the (possibly annotated) context to the next stage."""

    context: "RequestContext"


@dataclass(frozen=True)
class Respond:
    """Stop the pipeline and send this response."""

    response: Response


@dataclass(frozen=True)
class Fail:
    """Stop the pipeline and pass the error to the error handler."""

    error: BaseException


StageResult = Union[Continue, Respond, Fail]
Stage = Callable[["RequestContext"], Awaitable[StageResult]]
