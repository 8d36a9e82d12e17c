"""HTTP middleware: request size limit and request ID.

Applied in the main app; the last one added is outermost.
"""

from projecthub.middleware.request_id import RequestIDMiddleware, request_id_var
from projecthub.middleware.request_size_limit import RequestSizeLimitMiddleware

__all__ = ["RequestIDMiddleware", "RequestSizeLimitMiddleware", "request_id_var"]
