from typing import Optional

from sqlmodel import Field, SQLModel

from .utils import utc_iso_now


class ChatMessageRecord(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True)
    session_id: str = Field(index=True)
    agent_id: str = Field(index=True)
    role: str
    content: str = ""
    created_at: str = Field(default_factory=utc_iso_now)
