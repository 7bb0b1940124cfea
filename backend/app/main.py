import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles

from app.config import Settings, get_settings
from app.routers import risk as risk_router
from app.schemas import ValidationErrorResponse
from app.validation import FormValidationError

settings = get_settings()

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """Attach a stdout handler (unless one exists) and set the app log level."""
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger("app").setLevel(level)


@asynccontextmanager
async def lifespan(app):
    """Configure logging on startup, after any server-level log config."""
    configure_logging(settings)
    logger.info("Starting %s v%s", settings.app_name, settings.app_version)
    yield
    logger.info("Shutting down %s", settings.app_name)


app = FastAPI(
    lifespan=lifespan,
    title=settings.app_name,
    description="Heuristic risk score from date of birth, anaemia status, haemoglobin and parasite count",
    version=settings.app_version,
)

# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Static files — the form page and its assets
# ---------------------------------------------------------------------------
_STATIC_DIR = Path(__file__).resolve().parent.parent / "static"
app.mount("/static", StaticFiles(directory=str(_STATIC_DIR)), name="static")

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
app.include_router(risk_router.router)


# ---------------------------------------------------------------------------
# Exception handlers
# ---------------------------------------------------------------------------
@app.exception_handler(FormValidationError)
async def form_validation_exception_handler(request: Request, exc: FormValidationError):
    """Report every invalid form field at once."""
    return JSONResponse(
        status_code=422,
        content=ValidationErrorResponse(errors=exc.errors).model_dump(),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed JSON or query parameters, in the same shape as form errors."""
    errors = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = error.get("msg", "Invalid request")
        errors.append(f"{location}: {message}" if location else message)
    return JSONResponse(
        status_code=422,
        content=ValidationErrorResponse(errors=errors).model_dump(),
    )


# ---------------------------------------------------------------------------
# Pages
# ---------------------------------------------------------------------------
@app.get("/", include_in_schema=False)
async def index() -> FileResponse:
    return FileResponse(_STATIC_DIR / "index.html")


# ---------------------------------------------------------------------------
# Health check
# ---------------------------------------------------------------------------
@app.get("/health", tags=["Health"])
async def health_check():
    """Returns a simple health status."""
    return {"status": "ok"}
