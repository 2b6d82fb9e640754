"""Chat history persistence tests."""

from sqlmodel import Session

from awsagents.chat_storage import fetch_chat_history, save_exchange
from awsagents.db import engine


def test_history_is_scoped_and_chronological():
    with Session(engine) as session:
        save_exchange(session, "u1", "s1", "flow", "q1", "a1")
        save_exchange(session, "u1", "s1", "flow", "q2", "a2")
        save_exchange(session, "u1", "s1", "lex", "other agent", "x")
        save_exchange(session, "u2", "s1", "flow", "other user", "y")

        history = fetch_chat_history(session, "u1", "s1", "flow")
        assert [(m.role, m.content) for m in history] == [
            ("user", "q1"),
            ("assistant", "a1"),
            ("user", "q2"),
            ("assistant", "a2"),
        ]


def test_history_limit_keeps_newest_messages():
    with Session(engine) as session:
        for i in range(5):
            save_exchange(session, "u1", "s1", "flow", f"q{i}", f"a{i}")
        history = fetch_chat_history(session, "u1", "s1", "flow", limit=3)
        assert [m.content for m in history] == ["a3", "q4", "a4"]
