#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DearSelf Web - FastAPI Application
Wellness dashboard: tasks, hydration, mood, steps, journal and guided breathing

Run with uvicorn in factory mode:
    uvicorn dearself.web.app:create_app --factory
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from dearself import __version__
from dearself.config import AppConfig
from dearself.core.exceptions import (
    AuthError,
    ConfirmationRequired,
    NotFoundError,
    StoreError,
    ValidationError,
)
from dearself.core.ticker import SchedulerTicker
from dearself.services import BreathingRegistry
from dearself.store import BackendFactory
from dearself.web.api import routers
from dearself.web.config import WebSettings
from dearself.web.pages import router as pages_router
from dearself.web.schemas import HealthCheck

logger = logging.getLogger(__name__)

EVICT_JOB_ID = "evict-idle-breathing-timers"

def create_app(config: Optional[AppConfig] = None,
               settings: Optional[WebSettings] = None,
               factory: Optional[BackendFactory] = None) -> FastAPI:
    """Build the application; every collaborator can be injected for tests"""
    config = config or AppConfig()
    settings = settings or WebSettings()
    factory = factory or BackendFactory(config)
    scheduler = AsyncIOScheduler(timezone=config.timezone)
    breathing = BreathingRegistry(
        lambda timer_key: SchedulerTicker(scheduler, job_id=f"breathing-{timer_key}")
    )

    async def evict_idle_timers():
        breathing.evict_idle(settings.BREATHING_IDLE_TIMEOUT)

    scheduler.add_job(
        evict_idle_timers,
        IntervalTrigger(seconds=settings.BREATHING_EVICT_INTERVAL),
        id=EVICT_JOB_ID,
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        logger.info(f"🚀 Starting {settings.APP_NAME} {settings.VERSION}...")
        logger.info(f"⚙️ Config: {config.get_summary()}")
        scheduler.start()
        app.state.started_at = time.time()
        logger.info("✅ Scheduler started")

        yield

        # Shutdown
        logger.info(f"🛑 Stopping {settings.APP_NAME}...")
        breathing.close_all()
        scheduler.shutdown(wait=False)
        factory.close()
        logger.info("✅ Resources released")

    app = FastAPI(
        title=settings.APP_NAME,
        description="Personal wellness dashboard with guided breathing",
        version=settings.VERSION or __version__,
        docs_url=settings.DOCS_URL if settings.DEBUG else None,
        redoc_url=None,
        openapi_url=settings.OPENAPI_URL if settings.DEBUG else None,
        lifespan=lifespan,
    )

    app.state.config = config
    app.state.settings = settings
    app.state.factory = factory
    app.state.scheduler = scheduler
    app.state.breathing = breathing
    app.state.started_at = time.time()

    # ===== MIDDLEWARE =====

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        start_time = time.time()
        client_ip = request.headers.get("X-Forwarded-For", request.client.host if request.client else "-")

        response = await call_next(request)

        process_time = time.time() - start_time
        logger.info(
            f"{request.method} {request.url.path} "
            f"- {response.status_code} "
            f"- {process_time:.3f}s "
            f"- {client_ip}"
        )
        response.headers["X-Process-Time"] = f"{process_time:.4f}"
        return response

    # ===== EXCEPTION HANDLERS =====

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(
            status_code=422,
            content={"detail": str(exc), "field": exc.field},
        )

    @app.exception_handler(ConfirmationRequired)
    async def confirmation_required_handler(request: Request, exc: ConfirmationRequired):
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})

    @app.exception_handler(AuthError)
    async def auth_error_handler(request: Request, exc: AuthError):
        return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={"detail": str(exc)})

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        logger.error(f"❌ Store unavailable: {exc}")
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                            content={"detail": "Store unavailable"})

    # ===== ROUTES =====

    for router in routers:
        app.include_router(router)
    app.include_router(pages_router)

    @app.get("/health", response_model=HealthCheck, tags=["system"])
    async def health_check():
        return HealthCheck(
            status="healthy",
            service=settings.APP_NAME,
            version=settings.VERSION,
            timestamp=time.time(),
        )

    logger.debug(f"App created: backend={config.backend.value}")
    return app
