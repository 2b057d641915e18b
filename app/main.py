"""Application entrypoint for the FastAPI service."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.api.v1._errors import map_pipeline_error
from app.api.v1.router import get_api_router
from app.core.config import get_config
from app.core.exceptions import PipelineError
from app.core.startup import bootstrap
from app.schemas.common import ErrorEnvelope

logger = logging.getLogger(__name__)


async def pipeline_error_handler(request: Request, exc: PipelineError) -> JSONResponse:
    status_code = map_pipeline_error(exc)
    log = logger.error if status_code >= 500 else logger.info
    log(
        "api.request.rejected",
        extra={
            "event": "api.request.rejected",
            "path": request.url.path,
            "error_code": exc.error_code,
            "status_code": status_code,
        },
    )
    body = ErrorEnvelope(error_code=exc.error_code, detail=exc.detail or exc.error_code)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def create_app() -> FastAPI:
    cfg = get_config()
    app = FastAPI(title=cfg.APP_NAME, version=cfg.APP_VERSION)
    app.add_exception_handler(PipelineError, pipeline_error_handler)
    app.include_router(get_api_router())

    @app.get("/")
    def root() -> dict:
        return {"service": cfg.APP_NAME, "version": cfg.APP_VERSION, "api_prefix": cfg.API_PREFIX}

    return app


# Exposed for `uvicorn app.main:app`.
app = create_app()


if __name__ == "__main__":
    import uvicorn

    bootstrap()
    cfg = get_config()
    uvicorn.run(app, host=cfg.API_HOST, port=cfg.API_PORT)
