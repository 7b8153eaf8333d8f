"""FastAPI application"""

import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from src.api.models import Envelope
from src.api.router import router
from src.core.config import get_settings
from src.core.exceptions import GameError
from src.core.log_config import configure_logging
from src.services.locks import MatchLocks

logger = logging.getLogger(__name__)


async def game_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything the game layers reject and that was not already wrapped in an envelope by the service."""
    logger.warning("rejected request %s %s: %s", request.method, request.url.path, exc)
    body = Envelope[None].failure(str(exc)).model_dump(by_alias=True)
    return JSONResponse(status_code=400, content=body)


def create_app() -> FastAPI:
    app = FastAPI(title="Chess match backend")
    app.state.match_locks = MatchLocks()
    app.include_router(router)
    app.add_exception_handler(GameError, game_error_handler)
    return app


if __name__ == "__main__":
    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run(create_app(), host="0.0.0.0", port=8000)
