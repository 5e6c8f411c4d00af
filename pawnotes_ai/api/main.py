import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import Response
from mangum import Mangum

from ..config import Settings, settings
from ..http import cors_headers
from ..services import build_services
from .routers import functions

logging.basicConfig(level=settings.LOG_LEVEL)


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    app_settings = app_settings or settings
    app = FastAPI(title=app_settings.APP_NAME, debug=app_settings.DEBUG)
    app.state.services = build_services(app_settings)

    # Starlette's CORSMiddleware answers preflight with a text body and only
    # when Origin is sent; the functions' contract is an empty 200 always.
    @app.middleware("http")
    async def cors(request: Request, call_next):
        headers = cors_headers(app_settings.ALLOWED_HEADERS)
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=headers)
        response = await call_next(request)
        response.headers.update(headers)
        return response

    @app.get("/health")
    def health():
        return {"status": "ok"}

    app.include_router(functions.router)
    return app


app = create_app()

# Adapter for AWS Lambda (API Gateway / Function URL)
handler = Mangum(app)
