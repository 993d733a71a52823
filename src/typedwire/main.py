from typing import Optional

import uvicorn
from fastapi import APIRouter, FastAPI

from typedwire.config import Settings, get_settings
from typedwire.demo import api_schema, calculator_impl, calculator_requests, calculator_results, setup_calculator_peer
from typedwire.fastapi_adapter import create_peer_route, create_routes
from typedwire.utils.logger_util import get_logger

logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title="typedwire-demo", version="0.1.0")

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    api_router = APIRouter(prefix=settings.api_prefix.rstrip("/"))
    create_routes(api_router, api_schema, calculator_impl)
    app.include_router(api_router)

    ws_router = APIRouter()
    create_peer_route(ws_router, settings.ws_path, calculator_requests, calculator_results, setup_calculator_peer)
    app.include_router(ws_router)
    logger.debug("app created: api prefix %s, ws path %s", settings.api_prefix, settings.ws_path)
    return app


app = create_app()


def main() -> None:
    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
