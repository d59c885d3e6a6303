"""HTTP middleware: CORS, trace id, request log, timeout, failure boundary.

Applied in accounts.main.create_app; order matters (last added = outermost).
The authentication gate is a router dependency, see accounts.middleware.auth.
"""

from accounts.middleware.auth import AuthenticationGate, require_authentication
from accounts.middleware.cors import CORSMiddleware
from accounts.middleware.failure_boundary import FailureBoundaryMiddleware
from accounts.middleware.request_log import RequestLogMiddleware
from accounts.middleware.timeout import TimeoutMiddleware
from accounts.middleware.trace_id import TraceIdMiddleware

__all__ = [
    "AuthenticationGate",
    "CORSMiddleware",
    "FailureBoundaryMiddleware",
    "RequestLogMiddleware",
    "TimeoutMiddleware",
    "TraceIdMiddleware",
    "require_authentication",
]
