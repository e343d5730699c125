"""API routers, one per URL prefix."""

from jobportal.routers import applications, auth, jobs, users

# Prefix table used for route dispatch
ROUTES = (
    ("/api/auth", auth.router),
    ("/api/jobs", jobs.router),
    ("/api/users", users.router),
    ("/api/applications", applications.router),
)

__all__ = ["ROUTES"]
