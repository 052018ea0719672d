from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from solsign.api.container import Container, build_container
from solsign.api.dependencies import api_rate_limit
from solsign.api.errors import register_exception_handlers
from solsign.api.routes import health, liveness, profile, sign, transactions
from solsign.config.settings import Settings
from solsign.database.connection import close_pool, init_pool
from solsign.database.schema import init_schema
from solsign.logging.logger import Log

API_PREFIX = "/api"


def create_app(
    settings: Settings | None = None,
    container: Container | None = None,
) -> FastAPI:
    """Build the HTTP application.

    With an explicit ``container`` its lifecycle and the database are left
    to the caller; otherwise the pool and schema are set up on startup and
    the container is closed on shutdown.
    """
    settings = settings or (container.settings if container else Settings())
    owns_container = container is None

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if owns_container:
            init_pool(settings)
            init_schema()
        Log.info(f"SolSign API started ({settings.app_env})")
        try:
            yield
        finally:
            if owns_container:
                app.state.container.close()
                close_pool()

    app = FastAPI(title="SolSign API", lifespan=lifespan)
    app.state.container = container or build_container(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.client_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app, debug=settings.debug)

    for module in (health, profile, liveness, sign, transactions):
        app.include_router(
            module.router, prefix=API_PREFIX, dependencies=[Depends(api_rate_limit)]
        )
    return app
