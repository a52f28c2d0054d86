from __future__ import annotations

import time

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..config import get_settings
from ..errors import OpaLookupError
from ..log import get_logger, log_event
from .routes.complaints import router as complaints_router
from .routes.opa import router as opa_router
from .routes.violations import router as violations_router


logger = get_logger("api")


def create_app() -> FastAPI:
    app = FastAPI(title="OPA property lookup")
    app.include_router(opa_router, prefix="/api")
    app.include_router(violations_router, prefix="/api")
    app.include_router(complaints_router, prefix="/api")

    @app.exception_handler(OpaLookupError)
    async def _lookup_error(request: Request, exc: OpaLookupError):
        log_event(
            logger,
            "request_failed",
            path=request.url.path,
            status=exc.status_code,
            code=exc.code,
        )
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.get("/healthz")
    def healthz():
        settings = get_settings()
        return {
            "ok": True,
            "ts": int(time.time() * 1000),
            "backend": settings.backend,
            "build": settings.build_stamp,
        }

    return app


app = create_app()
