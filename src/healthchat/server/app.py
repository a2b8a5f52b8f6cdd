"""HTTP front for the completion function.

Accepts the client's gateway request, forwards it to a completion
gateway and answers ``{"response": ...}`` or ``{"error": ...}`` with
status 500.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..errors import GatewayError
from ..gateway import CompletionGateway, GatewayRequest, GatewayResponse

logger = logging.getLogger(__name__)


def create_app(gateway: CompletionGateway, path: str = "/health-chat") -> FastAPI:
    """Build the completion function application.

    Args:
        gateway: Gateway that produces completions (usually a ModelGateway)
        path: Route the function is served on

    Returns:
        FastAPI application
    """
    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        yield
        await gateway.close()

    app = FastAPI(title="healthchat completion function", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
    )

    @app.post(path, response_model=GatewayResponse)
    async def health_chat(request: GatewayRequest):
        try:
            text = await gateway.send(request.messages, request.context)
        except (GatewayError, ValueError) as e:
            logger.error("Completion failed: %s", e)
            return JSONResponse(status_code=500, content={"error": str(e)})
        except Exception as e:
            logger.exception("Unexpected completion failure")
            return JSONResponse(status_code=500, content={"error": str(e) or "Unknown error"})
        return GatewayResponse(response=text)

    return app
