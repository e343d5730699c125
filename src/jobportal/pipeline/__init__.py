"""Request pipeline: ordered stages, a driver, and terminal error handling."""

from jobportal.pipeline.context import AuthContext, RequestContext
from jobportal.pipeline.driver import Pipeline
from jobportal.pipeline.errors import GENERIC_ERROR_MESSAGE, handle_error
from jobportal.pipeline.results import Continue, Fail, Respond, Stage, StageResult
from jobportal.pipeline.stages import build_stages

__all__ = [
    "AuthContext",
    "Continue",
    "Fail",
    "GENERIC_ERROR_MESSAGE",
    "Pipeline",
    "RequestContext",
    "Respond",
    "Stage",
    "StageResult",
    "build_stages",
    "handle_error",
]
