from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from ironlog.api.analytics import router as analytics_router
from ironlog.api.buddies import router as buddies_router
from ironlog.api.goals import router as goals_router
from ironlog.api.progression import router as progression_router
from ironlog.api.prs import router as prs_router
from ironlog.api.rotation import router as rotation_router
from ironlog.api.timer import router as timer_router
from ironlog.api.weights import router as weights_router
from ironlog.api.workouts import router as workouts_router
from ironlog.core.config import settings
from ironlog.core.errors import NotAllowed, RecordNotFound, ValidationFailed
from ironlog.core.logger import setup_logger
from ironlog.db import Base, engine
from ironlog.models.body_weight import BodyWeight  # noqa: F401  (import ensures table is registered)
from ironlog.models.buddy import BuddyConnection, BuddyInteraction, SharedGoal  # noqa: F401
from ironlog.models.goal import Goal  # noqa: F401
from ironlog.models.personal_record import PersonalRecord  # noqa: F401
from ironlog.models.timer_session import TimerSession  # noqa: F401
from ironlog.models.workout import Workout  # noqa: F401

setup_logger(settings.log_level, settings.log_file)

app = FastAPI(title="IronLog")

# Allow CORS for any frontend
origins = ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error(status_code: int, error: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder({"success": False, "error": error, **extra}),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, exc.detail)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.info(f"Rejected {request.method} {request.url.path}: invalid parameters")
    return _error(400, "Missing or invalid parameters", details=exc.errors())


@app.exception_handler(ValidationFailed)
async def validation_failed_handler(request: Request, exc: ValidationFailed):
    return _error(400, str(exc))


@app.exception_handler(RecordNotFound)
async def not_found_handler(request: Request, exc: RecordNotFound):
    return _error(404, str(exc))


@app.exception_handler(NotAllowed)
async def not_allowed_handler(request: Request, exc: NotAllowed):
    return _error(403, str(exc))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return _error(500, "Internal server error", message=str(exc))


# Create DB tables on startup
Base.metadata.create_all(bind=engine)

app.include_router(workouts_router)
app.include_router(weights_router)
app.include_router(goals_router)
app.include_router(prs_router)
app.include_router(rotation_router)
app.include_router(progression_router)
app.include_router(timer_router)
app.include_router(buddies_router)
app.include_router(analytics_router)


@app.get("/")
def root():
    return {"message": "IronLog backend is running"}
