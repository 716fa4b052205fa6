import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from backoffice.config import settings
from backoffice.core.exceptions import BackofficeError, ValidationError
from backoffice.modules.auth import routes as auth_routes
from backoffice.modules.entities import routes as entities_routes
from backoffice.modules.addresses import routes as addresses_routes
from backoffice.modules.taxonomy import routes as taxonomy_routes
from backoffice.modules.reference import routes as reference_routes
from backoffice.modules.user_roles import routes as user_roles_routes
from backoffice.modules.documents import routes as documents_routes
from backoffice.modules.functions import routes as functions_routes

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])
app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    redirect_slashes=False,
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(BackofficeError)
async def backoffice_exception_handler(request: Request, exc: BackofficeError):
    content = {"detail": exc.message}
    if isinstance(exc, ValidationError):
        content["fields"] = exc.fields
    if exc.status_code >= 500:
        logger.error("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    if settings.is_production:
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})
    return JSONResponse(status_code=500, content={"detail": str(exc)})


class SecurityHeadersMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message):
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                message["headers"].extend([
                    (b"X-Content-Type-Options", b"nosniff"),
                    (b"X-Frame-Options", b"DENY"),
                    (b"X-XSS-Protection", b"1; mode=block"),
                ])
            await send(message)

        await self.app(scope, receive, send_with_headers)


app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include module routes
app.include_router(auth_routes.router, prefix="/api/v1")
for entity_router in entities_routes.entity_routers:
    app.include_router(entity_router, prefix="/api/v1")
app.include_router(entities_routes.dashboard_router, prefix="/api/v1")
app.include_router(addresses_routes.router, prefix="/api/v1")
app.include_router(taxonomy_routes.router, prefix="/api/v1")
app.include_router(reference_routes.router, prefix="/api/v1")
app.include_router(user_roles_routes.router, prefix="/api/v1")
app.include_router(documents_routes.router, prefix="/api/v1")
# Privileged entity procedures, same paths as the hosted edge functions
app.include_router(functions_routes.router)


@app.on_event("startup")
async def startup_event():
    logger.info("Application startup")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Application shutdown")


@app.get("/")
async def root():
    return {"message": f"Welcome to {settings.app_name}", "status": "healthy"}


@app.get("/health")
@limiter.exempt
async def health():
    return {"status": "healthy"}


@app.get("/ready")
@limiter.exempt
async def ready():
    """Readiness probe"""
    return {"status": "ready"}
