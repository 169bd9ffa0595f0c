"""HTTP chat surface for the agent runtime."""
from __future__ import annotations

from typing import List

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware

from ruggy.infrastructure import get_logger, setup_logging
from ruggy.models.chat import ChatResponse, ConversationSummary, InboundMessage
from ruggy.runtime import AgentRuntime

logger = get_logger(__name__)


def get_runtime(request: Request) -> AgentRuntime:
    return request.app.state.runtime


def create_app(runtime: AgentRuntime) -> FastAPI:
    """Build the API around an already constructed runtime."""
    app = FastAPI(title="Ruggy Agent API", version="1.0")
    app.state.runtime = runtime

    # Enable CORS for local/frontend dev
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    @app.post("/{agent_name}/message", response_model=List[ChatResponse])
    async def post_message(
        agent_name: str,
        message: InboundMessage,
        runtime: AgentRuntime = Depends(get_runtime),
    ):
        if agent_name.lower() != runtime.agent_name.lower():
            logger.warning("Message for unknown agent %s", agent_name)
            raise HTTPException(status_code=404, detail=f"Unknown agent '{agent_name}'")
        return await runtime.process_message(message)

    @app.get("/conversations/{user_id}", response_model=List[ConversationSummary])
    async def get_conversations(user_id: str, runtime: AgentRuntime = Depends(get_runtime)):
        return await runtime.conversations(user_id)

    return app


def app_factory() -> FastAPI:
    setup_logging()
    # Missing model credentials fail here, before uvicorn accepts a request.
    runtime = AgentRuntime.from_settings()
    logger.info("Agent runtime ready for %s", runtime.agent_name)
    return create_app(runtime)
