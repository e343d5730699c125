"""End-to-end tests for the request pipeline mounted on the application."""

from __future__ import annotations

import asyncio
import logging
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from jobportal.main import create_app
from jobportal.models.job import Job

ORIGIN = "http://localhost:5173"


def store_size(store) -> int:
    return asyncio.run(store.count())


# ---------------------------------------------------------------------------
# Tests: CORS
# ---------------------------------------------------------------------------


class TestCors:
    """Tests for origin enforcement on real routes."""

    def test_unlisted_origin_rejected_before_routes(self, client, caplog):
        """POST /api/jobs from an unknown origin never reaches the jobs logging stage."""
        with caplog.at_level(logging.INFO):
            response = client.post(
                "/api/jobs", json={"title": "x"}, headers={"Origin": "http://evil.test"}
            )
        assert response.status_code == 403
        assert response.json() == {"message": "Origin not allowed"}
        assert "access-control-allow-origin" not in response.headers
        assert "Job route hit" not in caplog.text

    def test_allowed_origin_gets_credentialed_headers(self, client):
        response = client.get("/api/jobs", headers={"Origin": ORIGIN})
        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == ORIGIN
        assert response.headers["access-control-allow-credentials"] == "true"

    def test_preflight(self, client):
        response = client.options(
            "/api/jobs",
            headers={"Origin": ORIGIN, "Access-Control-Request-Method": "POST"},
        )
        assert response.status_code == 204
        assert response.headers["access-control-allow-origin"] == ORIGIN
        assert "POST" in response.headers["access-control-allow-methods"]

    def test_no_origin_no_cors_headers(self, client):
        response = client.get("/api/jobs")
        assert response.status_code == 200
        assert "access-control-allow-origin" not in response.headers


# ---------------------------------------------------------------------------
# Tests: body parsing
# ---------------------------------------------------------------------------


class TestBodyParsing:
    """Tests for malformed and oversized bodies."""

    def test_malformed_json_is_client_error_without_db(self, client, database, caplog):
        """Malformed JSON to /api/jobs is rejected before any database access."""
        with patch.object(database, "session", wraps=database.session) as spy, \
             caplog.at_level(logging.INFO):
            response = client.post(
                "/api/jobs",
                content=b'{"title": "Backend',
                headers={"Origin": ORIGIN, "Content-Type": "application/json"},
            )
        assert response.status_code == 400
        assert response.json() == {"message": "Malformed request body"}
        spy.assert_not_called()
        assert "Job route hit" not in caplog.text

    def test_oversized_json_rejected(self, client):
        response = client.post(
            "/api/auth/login",
            content=b'{"email": "' + b"a" * 200_000 + b'"}',
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 413

    def test_jobs_logging_fires_for_valid_request(self, client, caplog):
        with caplog.at_level(logging.INFO):
            client.get("/api/jobs")
        assert "Job route hit: GET /api/jobs" in caplog.text


# ---------------------------------------------------------------------------
# Tests: static uploads
# ---------------------------------------------------------------------------


class TestUploads:
    """Tests for /uploads serving."""

    def test_existing_file_served(self, client, uploads_dir):
        (uploads_dir / "resume.pdf").write_bytes(b"%PDF-1.7 jane doe")
        response = client.get("/uploads/resume.pdf")
        assert response.status_code == 200
        assert response.content == b"%PDF-1.7 jane doe"
        assert response.headers["content-type"] == "application/pdf"

    def test_missing_file_404_from_routing(self, client):
        """The 404 body is FastAPI's routing 404, not a static-stage response."""
        response = client.get("/uploads/missing.pdf")
        assert response.status_code == 404
        assert response.json() == {"detail": "Not Found"}

    def test_unknown_api_path_404(self, client):
        assert client.get("/api/unknown").status_code == 404


# ---------------------------------------------------------------------------
# Tests: sessions
# ---------------------------------------------------------------------------


class TestSessions:
    """Tests for lazy persistence, expiry and invalidation."""

    def test_anonymous_request_stores_nothing(self, client, session_store):
        response = client.get("/api/jobs")
        assert response.status_code == 200
        assert "set-cookie" not in response.headers
        assert client.get("/api/auth/session").json() == {"authenticated": False, "user": None}
        assert store_size(session_store) == 0

    def test_login_persists_session(self, client, session_store, register):
        response = client.post(
            "/api/auth/register",
            json={"name": "Ada", "email": "ada@example.com", "password": "s3cret-pass"},
        )
        assert response.status_code == 201
        cookie = response.headers["set-cookie"]
        assert cookie.startswith("connect.sid=s:")
        assert "HttpOnly" in cookie
        assert "Max-Age=86400" in cookie
        assert "SameSite=Lax" in cookie
        assert "Secure" not in cookie
        assert store_size(session_store) == 1

        status = client.get("/api/auth/session").json()
        assert status["authenticated"] is True
        assert status["user"]["email"] == "ada@example.com"

    def test_session_expires_after_24_hours(self, client, clock, register):
        register("ada@example.com")
        assert client.get("/api/users/me").status_code == 200

        clock.advance(hours=24, seconds=1)
        assert client.get("/api/users/me").status_code == 401
        assert client.get("/api/auth/session").json()["authenticated"] is False

    def test_activity_slides_expiry(self, client, clock, register):
        register("ada@example.com")
        for _ in range(3):
            clock.advance(hours=20)
            response = client.get("/api/users/me")
            assert response.status_code == 200
            assert "connect.sid=" in response.headers["set-cookie"]

    def test_tampered_cookie_treated_as_absent(self, client, register):
        register("ada@example.com")
        signed = client.cookies.get("connect.sid")
        client.cookies.clear()
        tampered = signed[:-2] + ("yy" if signed.endswith("xx") else "xx")
        response = client.get("/api/users/me", headers={"Cookie": f"connect.sid={tampered}"})
        assert response.status_code == 401

    def test_logout_destroys_session(self, client, session_store, register):
        register("ada@example.com")
        response = client.post("/api/auth/logout")
        assert response.status_code == 204
        assert "Max-Age=0" in response.headers["set-cookie"]
        assert store_size(session_store) == 0
        assert client.get("/api/users/me").status_code == 401

    def test_login_issues_new_session_id(self, client, session_store, register):
        """An id obtained before login is dropped once the user authenticates."""
        register("ada@example.com", name="Ada")
        client.post("/api/auth/logout")
        register("mallory@example.com")
        planted = client.cookies.get("connect.sid")

        response = client.post(
            "/api/auth/login", json={"email": "ada@example.com", "password": "s3cret-pass"}
        )
        assert response.status_code == 200
        issued = client.cookies.get("connect.sid")
        assert issued != planted
        assert store_size(session_store) == 1

        client.cookies.clear()
        stale = client.get("/api/users/me", headers={"Cookie": f"connect.sid={planted}"})
        assert stale.status_code == 401
        fresh = client.get("/api/users/me", headers={"Cookie": f"connect.sid={issued}"})
        assert fresh.json()["email"] == "ada@example.com"

    def test_logout_without_session(self, client, session_store):
        response = client.post("/api/auth/logout")
        assert response.status_code == 204
        assert "set-cookie" not in response.headers
        assert store_size(session_store) == 0


class TestProductionCookies:
    def test_secure_samesite_none(self, settings, database, session_store):
        prod = settings.model_copy(update={"environment": "production"})
        app = create_app(prod, database=database, session_store=session_store)
        with TestClient(app, base_url="https://testserver") as client:
            response = client.post(
                "/api/auth/register",
                json={"name": "Ada", "email": "ada@example.com", "password": "s3cret-pass"},
            )
        cookie = response.headers["set-cookie"]
        assert "Secure" in cookie
        assert "SameSite=None" in cookie


# ---------------------------------------------------------------------------
# Tests: terminal error handling
# ---------------------------------------------------------------------------


class TestErrorHandling:
    """Tests for the generic 500 contract."""

    def test_route_exception_gives_one_generic_500(self, app, client, caplog):
        def explode():
            raise RuntimeError("mongodb://admin:hunter2@db")

        app.add_api_route("/api/explode", explode)

        with caplog.at_level(logging.ERROR):
            response = client.get("/api/explode", headers={"Origin": ORIGIN})

        assert response.status_code == 500
        assert response.json() == {"message": "Something went wrong!"}
        assert "hunter2" not in response.text
        assert response.headers["access-control-allow-origin"] == ORIGIN
        errors = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert len(errors) == 1
        assert errors[0].exc_info is not None
        assert "hunter2" in caplog.text

        # The process keeps serving
        assert client.get("/api/jobs").status_code == 200

    def test_collaborator_failure_mid_request(self, client, db, register, post_job):
        register("boss@example.com", role="employer")
        post_job()
        with patch("jobportal.routers.jobs._build_salary_range", side_effect=ValueError("bad row")):
            response = client.get("/api/jobs")
        assert response.status_code == 500
        assert response.json() == {"message": "Something went wrong!"}
        assert db.query(Job).count() == 1

    def test_session_store_failure_keeps_cors_headers(self, client, session_store):
        """A failing session write still yields a readable 500 for the frontend."""
        with patch.object(session_store, "set", side_effect=RuntimeError("store down")):
            response = client.post(
                "/api/auth/register",
                json={"name": "Ada", "email": "ada@example.com", "password": "s3cret-pass"},
                headers={"Origin": ORIGIN},
            )
        assert response.status_code == 500
        assert response.json() == {"message": "Something went wrong!"}
        assert response.headers["access-control-allow-origin"] == ORIGIN
        assert response.headers["access-control-allow-credentials"] == "true"
        assert "set-cookie" not in response.headers

    def test_http_errors_pass_through(self, client):
        response = client.get("/api/jobs/999")
        assert response.status_code == 404
        assert response.json() == {"detail": "Job not found"}


class TestLifecycle:
    def test_startup_configures_logging(self, app, settings):
        with patch("jobportal.main.configure_logging") as configure:
            with TestClient(app):
                pass
        configure.assert_called_once_with(settings.log_level)

    def test_shutdown_closes_store_and_pool(self, app, session_store, database):
        with patch.object(database, "dispose", wraps=database.dispose) as dispose:
            with TestClient(app):
                pass
        dispose.assert_called_once()

    def test_missing_context_is_an_error(self):
        """Routes served without the pipeline fail loudly rather than run unauthenticated."""
        from fastapi import FastAPI

        from jobportal.routers import users

        bare = FastAPI()
        bare.include_router(users.router, prefix="/api/users")
        with pytest.raises(RuntimeError, match="request pipeline"):
            TestClient(bare).get("/api/users/me")
