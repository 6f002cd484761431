"""FastAPI application factory for OraLicense-Engine."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from oralicense_engine.common.config import get_settings
from oralicense_engine.common.logging import setup_logging
from oralicense_engine.common.schemas import HealthResponse


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        from oralicense_engine.deps import get_db, reset_singletons
        from oralicense_engine.licensing.catalog import get_license_types_catalog
        db = get_db()
        await db.init()
        await db.create_all()
        get_license_types_catalog(settings.license_types_path)
        yield
        # Shutdown
        await db.close()
        reset_singletons()

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health", response_model=HealthResponse)
    async def health():
        from oralicense_engine.deps import get_db
        db_ok = await get_db().ping()
        return HealthResponse(
            status="ok" if db_ok else "degraded",
            version=settings.api_version,
            environment=settings.environment,
            database="ok" if db_ok else "unavailable",
        )

    # Mount routers
    from oralicense_engine.hosts.router import router as hosts_router
    from oralicense_engine.licensing.router import router as licensing_router

    prefix = settings.api_prefix
    app.include_router(hosts_router, prefix=prefix, tags=["hosts"])
    app.include_router(licensing_router, prefix=prefix, tags=["licensing"])

    return app
