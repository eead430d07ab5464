"""ASGI handler — translates ASGI scope/messages to plume types.

The only component that touches raw HTTP ASGI messages. Converts the
scope to a Request, runs the synchronous request pipeline in a worker
thread, and sends the Response back through ASGI send().
"""

import logging
from collections.abc import Callable

import anyio
import anyio.to_thread

from plume._internal.asgi import Receive, Scope, Send
from plume.http.request import Request
from plume.http.response import Response
from plume.server.errors import handle_internal_error
from plume.server.sender import send_response

logger = logging.getLogger("plume.server")


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    handle: Callable[[Request], Response],
    limiter: anyio.CapacityLimiter,
    debug: bool,
) -> None:
    """Process a single HTTP request through the full pipeline.

    *handle* is blocking (template rendering, sqlite), so it runs on an
    anyio worker thread. *limiter* decides how many requests may be in
    the pipeline at once; the app passes a single-token limiter so each
    request finishes before the next starts.
    """
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope)

    try:
        response = await anyio.to_thread.run_sync(handle, request, limiter=limiter)
    except Exception as exc:
        response = handle_internal_error(exc, request, debug)

    logger.debug("%s %s -> %d", request.method, request.url, response.status)
    await send_response(response, send, head=request.method == "HEAD")
