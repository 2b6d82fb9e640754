"""FastAPI application entrypoint exposing the configured agents over REST."""

import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import Session

from .agents import AgentRequest
from .chat_storage import fetch_chat_history, save_exchange
from .config import settings
from .db import get_session, init_db
from .errors import AgentInvocationError, AgentNotFoundError, DecodingError, EncodingError
from .registry import AgentRegistry, load_registry
from .schemas import InvokeRequest

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(level=settings.log_level, format="%(asctime)s [%(name)s] %(levelname)s %(message)s")
    init_db()
    if not hasattr(app.state, "registry"):
        if settings.agents_config_path:
            app.state.registry = load_registry(settings.agents_config_path)
        else:
            logger.warning("AGENTS_CONFIG_PATH not set; starting with no agents")
            app.state.registry = AgentRegistry()
    yield


app = FastAPI(title="AWS Agents", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_registry(request: Request) -> AgentRegistry:
    return request.app.state.registry


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/api/v1/agents")
def list_agents(registry: AgentRegistry = Depends(get_registry)):
    return [agent.describe() for agent in registry.agents()]


@app.post("/api/v1/agents/{agent_id}/invoke")
async def invoke_agent(
    agent_id: str,
    payload: InvokeRequest,
    registry: AgentRegistry = Depends(get_registry),
    session: Session = Depends(get_session),
):
    try:
        agent = registry.get(agent_id)
    except AgentNotFoundError:
        raise HTTPException(status_code=404, detail="Agent not found")

    session_id = payload.session_id or str(uuid.uuid4())
    history = fetch_chat_history(
        session,
        user_id=payload.user_id,
        session_id=session_id,
        agent_id=agent.id,
        limit=settings.chat_history_limit,
    )
    request = AgentRequest(
        text=payload.text,
        user_id=payload.user_id,
        session_id=session_id,
        chat_history=history,
        extra=payload.extra,
    )
    try:
        response = await agent.process_request(request)
    except EncodingError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except (DecodingError, AgentInvocationError) as exc:
        logger.warning("agent %s failed: %s", agent.id, exc)
        raise HTTPException(status_code=502, detail=str(exc))

    if agent.save_chat and not response.text.strip():
        logger.info("agent %s returned an empty answer; exchange not saved", agent.id)
    elif agent.save_chat:
        save_exchange(session, payload.user_id, session_id, agent.id, payload.text, response.text)
    return {
        "agent_id": agent.id,
        "session_id": session_id,
        "text": response.text,
        "metadata": response.metadata,
    }


@app.get("/api/v1/agents/{agent_id}/sessions/{session_id}/messages")
def list_messages(
    agent_id: str,
    session_id: str,
    user_id: str,
    limit: int = 200,
    registry: AgentRegistry = Depends(get_registry),
    session: Session = Depends(get_session),
):
    try:
        agent = registry.get(agent_id)
    except AgentNotFoundError:
        raise HTTPException(status_code=404, detail="Agent not found")
    history = fetch_chat_history(session, user_id=user_id, session_id=session_id, agent_id=agent.id, limit=limit)
    return [{"role": m.role, "content": m.content} for m in history]
