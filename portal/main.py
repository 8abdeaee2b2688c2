import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from portal.core.config import settings
from portal.core.logging_config import configure_logging
from portal.db.init_db import create_tables

from portal.api.v1.audit.router import router as audit_router
from portal.api.v1.auth.router import router as auth_router
from portal.api.v1.bookings.router import router as bookings_router
from portal.api.v1.course_assignments.router import router as course_assignments_router
from portal.api.v1.courses.router import router as courses_router
from portal.api.v1.notifications.router import router as notifications_router
from portal.api.v1.outlines.router import router as outlines_router
from portal.api.v1.semesters.router import router as semesters_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_tables()
    yield


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    # Log the detail, never return it
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title="Academic Administration Backend", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Routers
    app.include_router(auth_router)
    app.include_router(semesters_router)
    app.include_router(courses_router)
    app.include_router(course_assignments_router)
    app.include_router(outlines_router)
    app.include_router(bookings_router)
    app.include_router(notifications_router)
    app.include_router(audit_router)

    @app.get("/", tags=["health"])
    async def read_root():
        return {"status": "ok"}

    return app


app = create_app()
