# eco9/main.py
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import FastAPI, Depends, Request, Query, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import schemas
from .config import Settings, get_settings
from .errors import Eco9Error
from .factors import table_as_dict
from .impact import calculate_impact, validate_value
from .observability import setup_logging
from .service import ActivityService
from .state import AppState

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, repository=None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.log_level, settings.log_format)
        app.state.eco9 = AppState.open(settings, repository)
        logger.info("eco9 API started", extra={"store": settings.activity_store})
        yield
        app.state.eco9.close()
        logger.info("eco9 API shutting down")

    app = FastAPI(title="eco9 Impact API", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)
    register_routes(app)
    return app


def get_service(request: Request) -> ActivityService:
    return request.app.state.eco9.activities


# -----------------
# Error handlers
# -----------------
def register_error_handlers(app: FastAPI):

    @app.exception_handler(Eco9Error)
    async def eco9_error_handler(request: Request, exc: Eco9Error):
        logger.warning(
            f"{exc.code}: {exc.message}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        return JSONResponse(status_code=exc.http_status, content=exc.to_response())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "success": False,
                "message": "Invalid request data",
                "error_code": "VALIDATION_ERROR",
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "details": [
                    {
                        "field": ".".join(str(loc) for loc in e["loc"]),
                        "message": e["msg"],
                        "type": e["type"],
                    }
                    for e in exc.errors()
                ],
            },
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "success": False,
                "message": "Internal server error",
                "error_code": "INTERNAL_SERVER_ERROR",
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )


def register_routes(app: FastAPI):

    @app.get("/api/health")
    def health():
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    # -----------------
    # Impact
    # -----------------
    @app.post("/api/impact/calculate", response_model=schemas.ImpactOut)
    def impact_calculate(payload: schemas.ImpactIn):
        value = validate_value(payload.value)
        return calculate_impact(payload.category, value, payload.unit, payload.subtype).as_dict()

    @app.get("/api/impact/multipliers")
    def impact_multipliers():
        return table_as_dict()

    @app.get("/api/impact", response_model=schemas.ImpactSummary)
    def impact_summary(
        user_id: str,
        range_: str = Query("monthly", alias="range"),
        svc: ActivityService = Depends(get_service),
    ):
        return svc.impact_summary(user_id, range_)

    # -----------------
    # Activities
    # -----------------
    @app.post("/api/activities", response_model=schemas.Activity, status_code=status.HTTP_201_CREATED)
    def create_activity(payload: schemas.ActivityIn, svc: ActivityService = Depends(get_service)):
        return svc.log_activity(**payload.model_dump())

    @app.get("/api/activities", response_model=List[schemas.Activity])
    def list_activities(
        user_id: str,
        category: Optional[str] = None,
        sort_by: str = "timestamp",
        sort_order: str = "desc",
        limit: int = Query(10, ge=0),
        offset: int = Query(0, ge=0),
        svc: ActivityService = Depends(get_service),
    ):
        return svc.list_activities(user_id, category, sort_by, sort_order, limit, offset)

    @app.get("/api/activities/{activity_id}", response_model=schemas.Activity)
    def get_activity(activity_id: str, user_id: str, svc: ActivityService = Depends(get_service)):
        return svc.get_activity(user_id, activity_id)

    @app.put("/api/activities/{activity_id}", response_model=schemas.Activity)
    def update_activity(
        activity_id: str, payload: schemas.ActivityUpdate, user_id: str,
        svc: ActivityService = Depends(get_service),
    ):
        return svc.update_activity(user_id, activity_id, **payload.model_dump(exclude_unset=True))

    @app.delete("/api/activities/{activity_id}", status_code=status.HTTP_204_NO_CONTENT)
    def delete_activity(activity_id: str, user_id: str, svc: ActivityService = Depends(get_service)):
        svc.delete_activity(user_id, activity_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)


app = create_app()
