"""HTTP middleware: timeout, request size limit, request/correlation ids, security headers.

Applied in engage.main; order matters (last added = outermost).
"""

from engage.middleware.limits import RequestSizeLimitMiddleware, TimeoutMiddleware
from engage.middleware.request_context import CorrelationIDMiddleware, RequestIDMiddleware
from engage.middleware.security_headers import SecurityHeadersMiddleware

__all__ = [
    "CorrelationIDMiddleware",
    "RequestIDMiddleware",
    "RequestSizeLimitMiddleware",
    "SecurityHeadersMiddleware",
    "TimeoutMiddleware",
]
