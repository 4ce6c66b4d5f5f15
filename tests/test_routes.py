from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import pytest
from fastapi.testclient import TestClient
from telegram.error import TelegramError

import main
from app.api import routes
from app.config import Settings
from app.jobs.report import REPORT_CAPTION
from app.models.schemas import Reminder

TZ = ZoneInfo("Asia/Tehran")
OPERATOR = "123456"


class FakeBot:
    defaults = None

    def __init__(self, error=None):
        self.error = error
        self.messages = []
        self.documents = []

    async def send_message(self, chat_id, text):
        if self.error:
            raise self.error
        self.messages.append((chat_id, text))

    async def send_document(self, chat_id, document, filename, caption):
        if self.error:
            raise self.error
        self.documents.append((chat_id, filename, caption))


class FakeBotApp:
    def __init__(self, bot=None, error=None):
        self.bot = bot or FakeBot()
        self.error = error
        self.updates = []

    async def process_update(self, update):
        if self.error:
            raise self.error
        self.updates.append(update)


@pytest.fixture
def client(monkeypatch, repo):
    monkeypatch.setattr(
        routes,
        "settings",
        Settings(_env_file=None, telegram_bot_token="token", telegram_chat_id=OPERATOR),
    )
    monkeypatch.setattr(routes, "repo", repo)
    # Not used as a context manager, so the startup hook never builds a real bot
    return TestClient(main.app)


@pytest.fixture
def bot_app(monkeypatch):
    fake = FakeBotApp()
    monkeypatch.setattr(main.app.state, "bot", fake, raising=False)
    return fake


def test_webhook_hands_update_to_bot(client, bot_app):
    response = client.post("/webhook", json={"update_id": 7})
    assert response.status_code == 200
    assert response.text == "OK"
    [update] = bot_app.updates
    assert update.update_id == 7


def test_webhook_without_bot_is_error(client, monkeypatch):
    monkeypatch.setattr(main.app.state, "bot", None, raising=False)
    response = client.post("/webhook", json={"update_id": 7})
    assert response.status_code == 500
    assert response.text == "Error"


def test_webhook_processing_failure_is_error(client, monkeypatch):
    monkeypatch.setattr(main.app.state, "bot", FakeBotApp(error=RuntimeError("boom")), raising=False)
    response = client.post("/webhook", json={"update_id": 7})
    assert response.status_code == 500
    assert response.text == "Error"


def test_cron_delivers_due_reminder(client, bot_app, repo):
    repo.add_reminder(Reminder(message="قبض آب", run_at=datetime.now(TZ) - timedelta(minutes=5)))

    response = client.get("/cron")

    assert response.status_code == 200
    assert "reminders sent: 1" in response.text
    assert (OPERATOR, "⏰ یادآوری: قبض آب") in bot_app.bot.messages
    assert repo.due_reminders(datetime.now(TZ)) == []


def test_cron_send_failure_is_error(client, monkeypatch, repo):
    fake = FakeBotApp(bot=FakeBot(error=RuntimeError("network down")))
    monkeypatch.setattr(main.app.state, "bot", fake, raising=False)
    repo.add_reminder(Reminder(message="x", run_at=datetime.now(TZ) - timedelta(minutes=5)))

    response = client.post("/cron")

    assert response.status_code == 500
    assert response.text == "Error"


def test_cron_without_operator_chat(client, bot_app, monkeypatch):
    monkeypatch.setattr(routes, "settings", Settings(_env_file=None, telegram_bot_token="token"))
    response = client.get("/cron")
    assert response.status_code == 500


def test_send_report_forwards_document(client, bot_app):
    response = client.post(
        "/send-report", json={"htmlContent": "<h1>مهر</h1>", "fileName": "mehr.html"}
    )
    assert response.status_code == 200
    assert response.json()["ok"] is True
    assert bot_app.bot.documents == [(OPERATOR, "mehr.html", REPORT_CAPTION)]


def test_send_report_missing_fields_is_bad_request(client, bot_app):
    response = client.post("/send-report", json={"htmlContent": "<p/>"})
    assert response.status_code == 400
    assert bot_app.bot.documents == []


def test_send_report_telegram_error(client, monkeypatch):
    fake = FakeBotApp(bot=FakeBot(error=TelegramError("Bad Request: chat not found")))
    monkeypatch.setattr(main.app.state, "bot", fake, raising=False)

    response = client.post("/send-report", json={"htmlContent": "<p/>", "fileName": "r.html"})

    assert response.status_code == 500
    assert "chat not found" in response.json()["detail"]


def test_send_report_without_configuration(client, bot_app, monkeypatch):
    monkeypatch.setattr(routes, "settings", Settings(_env_file=None))
    response = client.post("/send-report", json={"htmlContent": "<p/>", "fileName": "r.html"})
    assert response.status_code == 500


def test_budget_maintenance_round_trip(client):
    created = client.post("/budgets", json={"category": "خوراک", "amount": 100000}).json()
    assert [b["category"] for b in client.get("/budgets").json()] == ["خوراک"]

    assert client.delete(f"/budgets/{created['id']}").status_code == 200
    assert client.delete(f"/budgets/{created['id']}").status_code == 404


def test_transactions_reject_unknown_period(client):
    assert client.get("/transactions", params={"period": "decade"}).status_code == 400
