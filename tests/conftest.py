import os
from datetime import datetime
from types import SimpleNamespace
from zoneinfo import ZoneInfo

import pytest

# app.deps builds its store from settings at import time; keep it off disk
os.environ["DB_PATH"] = ":memory:"
os.environ["TELEGRAM_BOT_TOKEN"] = ""

from app.db.repository import FinanceRepository
from app.db.store import MEMORY, DocumentStore
from app.llm.analyst import FinancialAnalyst
from app.llm.client import ChatModel
from app.services.context import ContextAssembler
from app.services.handlers import ActionHandlers

TZ = ZoneInfo("Asia/Tehran")


class Clock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class FakeCompletions:
    """Stands in for ``client.chat.completions``; replays canned replies in order."""

    def __init__(self, replies):
        self.replies = list(replies)
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, tuple):
            content, finish_reason, refusal = (reply + (None, None))[:3]
        else:
            content, finish_reason, refusal = reply, "stop", None
        message = SimpleNamespace(content=content, refusal=refusal)
        return SimpleNamespace(
            choices=[SimpleNamespace(finish_reason=finish_reason, message=message)]
        )


@pytest.fixture
def llm():
    """Factory: ``llm("reply", ("text", "length"), SomeError())`` -> ChatModel."""

    def make(*replies) -> ChatModel:
        client = SimpleNamespace(chat=SimpleNamespace(completions=FakeCompletions(replies)))
        return ChatModel(api_key="test", model="test-model", client=client)

    return make


@pytest.fixture
def clock():
    # Sunday 18 October 2026, 14:30 in Tehran
    return Clock(datetime(2026, 10, 18, 14, 30, tzinfo=TZ))


@pytest.fixture
def store():
    return DocumentStore(MEMORY)


@pytest.fixture
def repo(store):
    return FinanceRepository(store, "owner")


@pytest.fixture
def handlers(repo, clock, llm):
    return ActionHandlers(repo, FinancialAnalyst(llm()), TZ, clock=clock)


@pytest.fixture
def assembler(repo, clock, llm):
    return ContextAssembler(repo, FinancialAnalyst(llm()), TZ, window_days=30, clock=clock)
