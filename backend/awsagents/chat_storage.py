"""Per user/session/agent conversation history stored through SQLModel."""

from sqlmodel import Session, select

from .agents.contracts import ChatMessage
from .models import ChatMessageRecord


def fetch_chat_history(
    session: Session,
    user_id: str,
    session_id: str,
    agent_id: str,
    limit: int = 20,
) -> list[ChatMessage]:
    """Return the newest ``limit`` messages, oldest first."""

    stmt = (
        select(ChatMessageRecord)
        .where(ChatMessageRecord.user_id == user_id)
        .where(ChatMessageRecord.session_id == session_id)
        .where(ChatMessageRecord.agent_id == agent_id)
        .order_by(ChatMessageRecord.id.desc())
        .limit(limit)
    )
    rows = session.exec(stmt).all()
    rows.reverse()
    return [ChatMessage(role=row.role, content=row.content) for row in rows]


def save_exchange(
    session: Session,
    user_id: str,
    session_id: str,
    agent_id: str,
    user_text: str,
    assistant_text: str,
) -> None:
    for role, content in (("user", user_text), ("assistant", assistant_text)):
        session.add(
            ChatMessageRecord(
                user_id=user_id,
                session_id=session_id,
                agent_id=agent_id,
                role=role,
                content=content,
            )
        )
    session.commit()
