"""Last-resort error handling for plume requests.

Route misses never get here (the router answers those with its fixed
404). What arrives is everything the pipeline treats as fatal: missing
templates, storage failures, bugs in controllers.
"""

import logging
import traceback

from plume.http.request import Request
from plume.http.response import Response

logger = logging.getLogger("plume.server")


def handle_internal_error(exc: Exception, request: Request, debug: bool) -> Response:
    """Log an unexpected exception and turn it into a plain-text 500."""
    logger.exception("500 %s %s", request.method, request.path)

    if debug:
        body = "".join(traceback.format_exception(exc))
        return Response(
            body=f"500 Internal Server Error\n\n{body}",
            status=500,
            content_type="text/plain; charset=utf-8",
        )

    return Response(
        body="Internal Server Error",
        status=500,
        content_type="text/plain; charset=utf-8",
    )
