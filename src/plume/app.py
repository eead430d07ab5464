"""Plume application class.

Mutable during setup (route registration, filters, hooks).
Frozen at runtime when app.run(), app.handle() or __call__() is first invoked.
"""

import inspect
import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import anyio
from kida import Environment

from plume._internal.asgi import Receive, Scope, Send
from plume.config import AppConfig
from plume.controller import ControllerContext
from plume.data.database import Database
from plume.http.request import Request
from plume.http.response import Response
from plume.routing.route import Action, Route
from plume.routing.router import Router
from plume.server.handler import handle_request
from plume.templating.integration import ViewRenderer, create_environment

logger = logging.getLogger("plume.server")


@dataclass(slots=True)
class _PendingRoute:
    """A route waiting to be compiled."""

    method: str
    path: str
    action: Action


class App:
    """The plume application.

    Usage::

        app = App(AppConfig(template_dir="templates"), db="sqlite:///app.db")
        app.get("/", HomeController, HomeController.index)
        app.get("/articles", ArticleController, ArticleController.index)

    Mutable during setup. Frozen the first time it handles a request;
    after that the route table, the template environment and the
    database handle are shared, read-only, by every request.
    """

    __slots__ = (
        "_custom_kida_env",
        "_db",
        "_freeze_lock",
        "_frozen",
        "_kida_env",
        "_limiter",
        "_migrations_dir",
        "_pending_routes",
        "_router",
        "_shutdown_hooks",
        "_startup_hooks",
        "_template_filters",
        "_template_globals",
        "_views",
        "config",
    )

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        db: Database | str | None = None,
        migrations: str | Path | None = None,
        kida_env: Environment | None = None,
    ) -> None:
        self.config: AppConfig = config or AppConfig()
        self._pending_routes: list[_PendingRoute] = []
        self._template_filters: dict[str, Callable[..., Any]] = {}
        self._template_globals: dict[str, Any] = {}
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()
        self._custom_kida_env: Environment | None = kida_env

        # Database instance or connection URL string
        self._db: Database | None = Database(db) if isinstance(db, str) else db

        # Applied at startup when a database is configured
        self._migrations_dir: str | Path | None = migrations

        # Compiled state, set during _freeze()
        self._router: Router | None = None
        self._kida_env: Environment | None = None
        self._views: ViewRenderer | None = None

        # Created on first request; anyio primitives want a running loop.
        self._limiter: anyio.CapacityLimiter | None = None

    # -- Route registration --

    def route(self, method: str, path: str, action: Action) -> Action:
        """Register *action* for an exact (method, path) pair."""
        self._check_not_frozen()
        self._pending_routes.append(_PendingRoute(method, path, action))
        return action

    def get(
        self,
        path: str,
        controller: Callable[..., Any],
        handler: Callable[[Any], Any],
    ) -> Action:
        """Register a GET route::

            app.get("/articles", ArticleController, ArticleController.index)
        """
        return self.route("GET", path, Action(controller, handler))

    def post(
        self,
        path: str,
        controller: Callable[..., Any],
        handler: Callable[[Any], Any],
    ) -> Action:
        """Register a POST route."""
        return self.route("POST", path, Action(controller, handler))

    # -- Templates --

    def template_filter(self, name: str | None = None) -> Callable[..., Any]:
        """Register a kida template filter via decorator."""

        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            self._check_not_frozen()
            self._template_filters[name or func.__name__] = func
            return func

        return decorator

    def template_global(self, name: str | None = None) -> Callable[..., Any]:
        """Register a kida template global via decorator."""

        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            self._check_not_frozen()
            self._template_globals[name or func.__name__] = func
            return func

        return decorator

    # -- Lifecycle hooks --

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync startup hook via decorator.

        Hooks run in registration order during ASGI lifespan startup,
        after the database is connected and migrated.
        """
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync shutdown hook via decorator.

        Hooks run in registration order during ASGI lifespan shutdown,
        before the database is disconnected.
        """
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    # -- Accessors --

    @property
    def db(self) -> Database:
        """The app's database. Raises ``LookupError`` if none is configured."""
        if self._db is None:
            msg = "No database configured. Pass db= to App()."
            raise LookupError(msg)
        return self._db

    @property
    def router(self) -> Router:
        """The compiled router (freezes the app if needed)."""
        self._ensure_frozen()
        assert self._router is not None
        return self._router

    @property
    def routes(self) -> list[Route]:
        return self.router.routes

    # -- Request pipeline --

    def handle(self, request: Request) -> Response:
        """Run one request through router, controller, model and view.

        Synchronous and blocking. Route misses come back as the fixed
        404 response; anything else that goes wrong propagates.
        """
        self._ensure_frozen()
        assert self._router is not None
        assert self._views is not None

        context = ControllerContext(request=request, views=self._views, db=self._db)
        return self._router.dispatch_path(request.path, request.method, context)

    def dispatch(self, target: str, method: str = "GET") -> Response:
        """Handle a raw request target such as ``"/articles?page=2"``."""
        return self.handle(Request.from_target(method, target))

    # -- Server --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Start the development server.

        Requires ``pounce`` (``pip install plume[server]``).
        """
        self._ensure_frozen()

        from plume.server.dev import run_dev_server

        run_dev_server(
            self,
            host or self.config.host,
            port or self.config.port,
            reload=self.config.debug,
        )

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point.

        Handles lifespan scopes directly, then delegates HTTP scopes to
        the request handler.
        """
        if scope["type"] == "lifespan":
            await self._handle_lifespan(scope, receive, send)
            return

        self._ensure_frozen()

        if self._limiter is None:
            self._limiter = anyio.CapacityLimiter(1)

        await handle_request(
            scope,
            receive,
            send,
            handle=self.handle,
            limiter=self._limiter,
            debug=self.config.debug,
        )

    async def startup(self) -> None:
        """Connect and migrate the database, then run startup hooks."""
        self._ensure_frozen()

        if self._db is not None:
            self._db.connect()
            if self._migrations_dir is not None:
                from plume.data.migrate import migrate

                migrate(self._db, self._migrations_dir)

        for hook in self._startup_hooks:
            result = hook()
            if inspect.isawaitable(result):
                await result

    async def shutdown(self) -> None:
        """Run shutdown hooks, then disconnect the database."""
        for hook in self._shutdown_hooks:
            result = hook()
            if inspect.isawaitable(result):
                await result

        if self._db is not None:
            self._db.disconnect()

    async def _handle_lifespan(
        self,
        scope: Scope,
        receive: Receive,
        send: Send,
    ) -> None:
        """Run the ASGI lifespan protocol."""
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    await self.startup()
                except Exception as exc:
                    logger.exception("Startup failed")
                    await send(
                        {
                            "type": "lifespan.startup.failed",
                            "message": str(exc),
                        }
                    )
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                await self.shutdown()
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the app into its frozen runtime state.

        MUST only be called while holding _freeze_lock.
        """
        # 1. Compile route table
        router = Router()
        for pending in self._pending_routes:
            router.register(pending.method, pending.path, pending.action)
        router.compile()
        self._router = router

        # 2. Initialize kida environment
        if self._custom_kida_env is not None:
            env = self._custom_kida_env
            if self._template_filters:
                env.update_filters(self._template_filters)
            for name, value in self._template_globals.items():
                env.add_global(name, value)
        else:
            env = create_environment(
                self.config,
                self._template_filters,
                self._template_globals,
            )
        self._kida_env = env
        self._views = ViewRenderer(
            env,
            layout=self.config.layout,
            suffix=self.config.view_suffix,
        )

        self._frozen = True
        logger.debug("App frozen with %d route(s)", len(router.routes))

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register routes, filters and hooks before the first request."
            )
            raise RuntimeError(msg)
