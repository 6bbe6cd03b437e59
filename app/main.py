from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware
from timing_asgi import TimingMiddleware, TimingClient  # type: ignore
from timing_asgi.integrations import StarletteScopeToName  # type: ignore

from app.core import config
from app.core.database.engine import init_db
from app.core.errors import register_exception_handlers
from app.core.limiter import limiter
from app.features.permissions.routes import router as permission_router
from app.features.export.routes import router as export_router
from app.utils import get_logger


log = get_logger(__name__)
log.info("Initializing server")
app = FastAPI(
    title="Permission Manager",
    description="Project-scoped permissions, permission groups, and API-key export",
    version="0.1.0",
    docs_url="/docs" if config.ENABLE_DOCS else None,
    redoc_url="/redoc" if config.ENABLE_DOCS else None,
    openapi_url="/openapi.json" if config.ENABLE_DOCS else None
)
app.state.limiter = limiter


class PrintTimings(TimingClient):
    def timing(self, metric_name, timing, tags):
        log.debug(dict(route=metric_name.removeprefix("main.app.features."), timing=timing, tags=tags))


app.add_middleware(TimingMiddleware, client=PrintTimings(), metric_namer=StarletteScopeToName("main", app))

if config.ENABLE_DOCS:
    log.warning("Docs enabled")
if config.ALLOW_ORIGIN:
    log.warning("Setting allow origin to %s", config.ALLOW_ORIGIN)
    origins = [config.ALLOW_ORIGIN]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

register_exception_handlers(app)


@app.on_event("startup")
async def startup():
    """Initialize database on application startup."""
    log.info("Initializing database...")
    await init_db()
    log.info("Database initialized successfully")


@app.get("/")
async def root():
    """Root endpoint - API health check."""
    return {
        "message": "Permission Manager API",
        "version": "0.1.0",
        "status": "online",
        "docs": "/docs" if config.ENABLE_DOCS else None,
        "features": {
            "projects": "Projects with generated API keys",
            "permissions": "Project-scoped permission keys with descriptions",
            "groups": "Named permission groups with per-permission toggles",
            "export": "Enabled permissions per group, addressed by project API key"
        }
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


# Include routers
# Project, permission, and group routes
app.include_router(permission_router)

# Export routes (read-only, API key addressed)
app.include_router(export_router, prefix="/export")
