"""Request pipeline stages, in the order ``build_stages`` mounts them."""

from __future__ import annotations

import json
import logging
from datetime import timedelta
from http.cookies import SimpleCookie
from urllib.parse import parse_qs

from starlette.concurrency import run_in_threadpool
from starlette.datastructures import MutableHeaders
from starlette.responses import FileResponse, JSONResponse, Response

from jobportal.config import PipelineConfig
from jobportal.pipeline.context import AuthContext, RequestContext
from jobportal.pipeline.results import Continue, Respond, Stage, StageResult
from jobportal.sessions.session import Session
from jobportal.sessions.signing import sign, unsign
from jobportal.sessions.store import SessionStore
from jobportal.utils.file_storage import resolve_upload_path

logger = logging.getLogger(__name__)

CORS_ALLOW_METHODS = "GET,HEAD,PUT,PATCH,POST,DELETE"
BODY_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


def _message(status_code: int, message: str) -> Respond:
    return Respond(JSONResponse({"message": message}, status_code=status_code))


# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------


def cors_stage(config: PipelineConfig) -> Stage:
    """
    Enforce the origin allow-list.

    Requests without an ``Origin`` header are same-origin or non-browser
    calls and pass untouched. Allowed origins are echoed back verbatim,
    never as ``*``, because credentialed requests reject wildcards.
    """

    async def cors(context: RequestContext) -> StageResult:
        origin = context.request.headers.get("origin")
        if origin is None:
            return Continue(context)
        if not config.is_allowed_origin(origin):
            logger.warning("Rejected %s %s from origin %s", context.method, context.path, origin)
            return _message(403, "Origin not allowed")

        async def add_cors_headers(headers: MutableHeaders) -> None:
            headers["Access-Control-Allow-Origin"] = origin
            headers["Access-Control-Allow-Credentials"] = "true"
            headers.add_vary_header("Origin")

        context.on_response(add_cors_headers, repeat=True)

        request_method = context.request.headers.get("access-control-request-method")
        if context.method == "OPTIONS" and request_method:
            preflight = Response(status_code=204)
            preflight.headers["Access-Control-Allow-Methods"] = CORS_ALLOW_METHODS
            requested_headers = context.request.headers.get("access-control-request-headers")
            if requested_headers:
                preflight.headers["Access-Control-Allow-Headers"] = requested_headers
                preflight.headers.append("Vary", "Access-Control-Request-Headers")
            return Respond(preflight)
        return Continue(context)

    return cors


# ---------------------------------------------------------------------------
# Body parsing
# ---------------------------------------------------------------------------


def _media_type(content_type: str) -> str:
    return content_type.split(";", 1)[0].strip().lower()


def _parse_form(raw: bytes) -> dict[str, str | list[str]]:
    parsed = parse_qs(raw.decode("utf-8"), keep_blank_values=True)
    return {key: values[0] if len(values) == 1 else values for key, values in parsed.items()}


def body_stage(config: PipelineConfig) -> Stage:
    """
    Read and decode JSON and URL-encoded bodies into ``context.body``.

    Other content types (multipart uploads in particular) are left unread
    for the route collaborator to stream.
    """

    async def parse_body(context: RequestContext) -> StageResult:
        if context.method not in BODY_METHODS:
            return Continue(context)

        media_type = _media_type(context.request.headers.get("content-type", ""))
        is_json = media_type == "application/json" or media_type.endswith("+json")
        is_form = media_type == "application/x-www-form-urlencoded"
        if not (is_json or is_form):
            return Continue(context)

        declared = context.request.headers.get("content-length")
        if declared and declared.isdigit() and int(declared) > config.body_limit:
            return _message(413, "Request body too large")

        # Chunked bodies carry no Content-Length; stop reading once over the limit
        chunks = []
        size = 0
        async for chunk in context.request.stream():
            size += len(chunk)
            if size > config.body_limit:
                return _message(413, "Request body too large")
            chunks.append(chunk)
        raw = b"".join(chunks)
        context.raw_body = raw
        if not raw:
            return Continue(context)

        try:
            context.body = json.loads(raw.decode("utf-8")) if is_json else _parse_form(raw)
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.info("Malformed body on %s %s: %s", context.method, context.path, exc)
            return _message(400, "Malformed request body")
        return Continue(context)

    return parse_body


# ---------------------------------------------------------------------------
# Cookies and sessions
# ---------------------------------------------------------------------------


def cookie_stage() -> Stage:
    """Expose the ``Cookie`` header as a name to value mapping."""

    async def parse_cookies(context: RequestContext) -> StageResult:
        context.cookies = dict(context.request.cookies)
        return Continue(context)

    return parse_cookies


def _cookie_header(config: PipelineConfig, value: str, max_age: int) -> str:
    cookie: SimpleCookie = SimpleCookie()
    name = config.session_cookie_name
    cookie[name] = value
    cookie[name]["path"] = "/"
    cookie[name]["httponly"] = True
    cookie[name]["max-age"] = max_age
    cookie[name]["samesite"] = config.cookie_samesite.capitalize()
    if config.cookie_secure:
        cookie[name]["secure"] = True
    return cookie.output(header="").strip()


def session_stage(config: PipelineConfig, store: SessionStore) -> Stage:
    """
    Resolve the session named by the signed session cookie.

    Unknown, expired or tampered cookies get a fresh in-memory session.
    Storage is lazy: a new session is persisted only once something is
    written to it, so anonymous traffic never creates store entries.
    Existing sessions have their expiry pushed forward on every request.
    A regenerated session is stored under its new id and the old record
    is deleted.
    """

    async def load_session(context: RequestContext) -> StageResult:
        session = None
        signed = context.cookies.get(config.session_cookie_name)
        sid = unsign(signed, config.session_secret) if signed else None
        if sid is not None:
            record = await store.get(sid)
            if record is not None:
                session = Session(sid, record.data, is_new=False)
        if session is None:
            session = Session.create()

        context.session = session
        context.auth = AuthContext(user_id=session.get("user_id"))

        async def commit_session(headers: MutableHeaders) -> None:
            if session.previous_id is not None:
                await store.destroy(session.previous_id)
            if session.destroyed:
                if not session.is_new and session.previous_id is None:
                    await store.destroy(session.id)
                if signed is not None:
                    headers.append("set-cookie", _cookie_header(config, "", 0))
                return
            if session.is_new and not session.modified:
                return

            expires_at = store.now() + timedelta(seconds=config.session_max_age)
            if session.modified:
                await store.set(session.id, session.to_dict(), expires_at)
            else:
                await store.touch(session.id, expires_at)
            headers.append(
                "set-cookie",
                _cookie_header(
                    config, sign(session.id, config.session_secret), config.session_max_age
                ),
            )

        context.on_response(commit_session)
        return Continue(context)

    return load_session


# ---------------------------------------------------------------------------
# Static files
# ---------------------------------------------------------------------------


def static_stage(config: PipelineConfig) -> Stage:
    """
    Serve files from the uploads directory.

    Only an existing file stops the pipeline. Anything else continues so
    the 404 comes from route dispatch like any other unknown path.
    """
    prefix = config.uploads_prefix.rstrip("/") + "/"

    async def serve_static(context: RequestContext) -> StageResult:
        if context.method not in ("GET", "HEAD") or not context.path.startswith(prefix):
            return Continue(context)
        path = resolve_upload_path(config.uploads_dir, context.path[len(prefix):])
        if path is None or not await run_in_threadpool(path.is_file):
            return Continue(context)
        return Respond(FileResponse(path))

    return serve_static


# ---------------------------------------------------------------------------
# Prefix-scoped stages
# ---------------------------------------------------------------------------


def scoped_stage(prefix: str, stage: Stage) -> Stage:
    """Run ``stage`` only for paths at or below ``prefix``."""
    prefix = prefix.rstrip("/")

    async def scoped(context: RequestContext) -> StageResult:
        path = context.path
        if path == prefix or path.startswith(prefix + "/"):
            return await stage(context)
        return Continue(context)

    return scoped


def log_route_hit(message: str) -> Stage:
    """Log ``message`` and continue. Has no effect on the request."""

    async def log_hit(context: RequestContext) -> StageResult:
        logger.info("%s: %s %s", message, context.method, context.path)
        return Continue(context)

    return log_hit


def build_stages(config: PipelineConfig, store: SessionStore) -> list[Stage]:
    """
    Assemble the production stage order.

    Args:
        config: Pipeline configuration
        store: Session store shared by all requests

    Returns:
        Stages for ``Pipeline``
    """
    return [
        cors_stage(config),
        body_stage(config),
        cookie_stage(),
        session_stage(config, store),
        static_stage(config),
        scoped_stage("/api/jobs", log_route_hit("Job route hit")),
    ]
