from __future__ import annotations

from devkit.observability import configure_logging, configure_otel
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from api.dependencies import settings
from api.errors import ApiError
from api.observability import (
    CompositePlanMetricsCollector,
    InMemoryPlanMetricsCollector,
    PrometheusPlanMetricsCollector,
)
from api.response import error_response, success_response
from api.routers.evacuation import router as evacuation_router


def create_app() -> FastAPI:
    app = FastAPI(title="Evacuation Planning API", version="0.1.0")
    configure_logging(settings.LOG_LEVEL)
    configure_otel(service_name=settings.SERVICE_NAME)
    app.state.api_metrics = InMemoryPlanMetricsCollector()
    app.state.prom_metrics = PrometheusPlanMetricsCollector()
    app.state.plan_metrics = CompositePlanMetricsCollector([app.state.api_metrics, app.state.prom_metrics])
    app.include_router(evacuation_router)

    @app.get("/healthz")
    async def healthz() -> dict:
        return success_response({"status": "ok"}, meta={})

    @app.get("/readyz")
    async def readyz() -> dict:
        return success_response({"status": "ready"}, meta={})

    @app.get("/metrics")
    async def metrics() -> Response:
        payload = app.state.prom_metrics.render()
        return Response(content=payload, media_type="text/plain; version=0.0.4")

    @app.exception_handler(ApiError)
    async def handle_api_error(_: Request, exc: ApiError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=error_response(exc.code, exc.message))

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
        message = "; ".join(err["msg"] for err in exc.errors())
        return JSONResponse(
            status_code=422,
            content=error_response("VALIDATION_ERROR", message),
        )

    return app


app = create_app()
