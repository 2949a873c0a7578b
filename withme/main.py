import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from withme.config import settings
from withme.core.rate_limit import limiter
from withme.integrations.errors import IntegrationError
from withme.modules.auth import routes as auth_routes
from withme.modules.profiles import routes as profiles_routes
from withme.modules.trips import routes as trips_routes
from withme.modules.trip_members import routes as trip_members_routes
from withme.modules.itinerary import routes as itinerary_routes
from withme.modules.trip_cities import routes as trip_cities_routes
from withme.modules.notes import routes as notes_routes
from withme.modules.comments import routes as comments_routes
from withme.modules.friends import routes as friends_routes
from withme.modules.groups import routes as groups_routes
from withme.modules.forms import routes as forms_routes
from withme.modules.destinations import routes as destinations_routes
from withme.modules.cities import routes as cities_routes
from withme.modules.places import routes as places_routes
from withme.modules.activities import routes as activities_routes
from withme.modules.images import routes as images_routes
from withme.modules.itinerary_templates import routes as itinerary_templates_routes
from withme.modules.admin import routes as admin_routes
from withme.modules.guests import routes as guests_routes

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    redirect_slashes=False,
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details = [
        {"loc": list(err.get("loc", [])), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"error": "Invalid input", "details": details})


@app.exception_handler(IntegrationError)
async def integration_exception_handler(request: Request, exc: IntegrationError):
    logger.warning(f"{exc.service} integration error on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    if settings.is_production:
        return JSONResponse(status_code=500, content={"error": "Internal server error"})
    return JSONResponse(status_code=500, content={"error": str(exc)})


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
app.include_router(profiles_routes.router, prefix="/api/v1")
app.include_router(trips_routes.router, prefix="/api/v1")
app.include_router(trip_members_routes.router, prefix="/api/v1")
app.include_router(itinerary_routes.router, prefix="/api/v1")
app.include_router(trip_cities_routes.router, prefix="/api/v1")
app.include_router(notes_routes.router, prefix="/api/v1")
app.include_router(forms_routes.trip_forms_router, prefix="/api/v1")
app.include_router(forms_routes.router, prefix="/api/v1")
app.include_router(comments_routes.router, prefix="/api/v1")
app.include_router(friends_routes.router, prefix="/api/v1")
app.include_router(groups_routes.router, prefix="/api/v1")
app.include_router(destinations_routes.router, prefix="/api/v1")
app.include_router(cities_routes.router, prefix="/api/v1")
app.include_router(places_routes.router, prefix="/api/v1")
app.include_router(activities_routes.router, prefix="/api/v1")
app.include_router(images_routes.router, prefix="/api/v1")
app.include_router(itinerary_templates_routes.router, prefix="/api/v1")
app.include_router(admin_routes.router, prefix="/api/v1")
app.include_router(guests_routes.router, prefix="/api/v1")


@app.on_event("startup")
async def startup_event():
    logger.info(f"Application startup ({settings.environment})")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Application shutdown")


@app.get("/")
async def root():
    return {"message": "Welcome to the withme.travel API", "status": "healthy"}


@app.get("/health")
@limiter.exempt
async def health():
    return {"status": "healthy"}


@app.get("/ready")
@limiter.exempt
async def ready():
    """Readiness probe: extend here with a Supabase check if needed."""
    return {"status": "ready"}
