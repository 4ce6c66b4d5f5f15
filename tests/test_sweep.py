from datetime import datetime
from zoneinfo import ZoneInfo

import jdatetime
import pytest
from telegram.error import TelegramError

from app.jobs.sweep import (
    NUDGE_TEXT,
    budget_alerts,
    build_digest,
    installment_alerts,
    run_sweep,
)
from app.models.schemas import Budget, Installment, Reminder, Transaction

TZ = ZoneInfo("Asia/Tehran")
SUNDAY = datetime(2026, 10, 18, 10, 0, tzinfo=TZ)
THURSDAY = datetime(2026, 10, 22, 21, 0, tzinfo=TZ)


def _expense(amount, category, day="2026-10-10"):
    return Transaction(
        type="expense",
        amount=amount,
        description="x",
        category=category,
        date=day,
        time="12:00",
        created_at=datetime.fromisoformat(f"{day}T12:00:00+03:30"),
    )


def test_installment_due_today_and_soon():
    today = jdatetime.date(1405, 7, 26)
    alerts = installment_alerts(
        [
            Installment(name="وام", amount=3000000, day=26),
            Installment(name="ماشین", amount=500000, day=28),
            Installment(name="گوشی", amount=200000, day=10),
        ],
        today,
    )
    assert len(alerts) == 2
    assert alerts[0].startswith("❗️ امروز")
    assert "«وام»" in alerts[0]
    assert "۳٬۰۰۰٬۰۰۰ تومان" in alerts[0]
    assert alerts[1].startswith("🔔 ۲ روز دیگر")


def test_installment_lookahead_wraps_into_next_month():
    # Mehr has 30 days, so the 1st of Aban is two days after the 29th
    alerts = installment_alerts([Installment(name="اجاره", amount=1, day=1)], jdatetime.date(1405, 7, 29))
    assert len(alerts) == 1
    assert alerts[0].startswith("🔔 ۲ روز دیگر")


def test_budget_warning_from_ninety_percent():
    budgets = [Budget(category="خوراک", amount=100000), Budget(category="تفریح", amount=100000)]
    expenses = [_expense(60000, "خوراک"), _expense(30000, "خوراک"), _expense(89000, "تفریح")]

    alerts = budget_alerts(budgets, expenses)
    assert len(alerts) == 1
    assert "۹۰٪" in alerts[0]
    assert "«خوراک»" in alerts[0]


def test_no_digest_on_quiet_sunday(repo):
    assert build_digest(repo, SUNDAY) is None


def test_nudge_on_quiet_thursday(repo):
    digest = build_digest(repo, THURSDAY)
    assert digest is not None
    assert NUDGE_TEXT in digest


def test_budget_uses_current_month_only(repo):
    repo.add_budget(Budget(category="خوراک", amount=100000))
    repo.add_transaction(_expense(95000, "خوراک", day="2026-09-30"))
    assert build_digest(repo, SUNDAY) is None

    repo.add_transaction(_expense(95000, "خوراک", day="2026-10-01"))
    assert "هشدار بودجه" in build_digest(repo, SUNDAY)


@pytest.mark.asyncio
async def test_run_sweep_sends_due_reminders_and_deletes_them(repo):
    repo.add_reminder(Reminder(message="قبض گاز", run_at=datetime(2026, 10, 18, 9, 0, tzinfo=TZ)))
    repo.add_reminder(Reminder(message="بعداً", run_at=datetime(2026, 10, 18, 22, 0, tzinfo=TZ)))
    sent = []

    async def send(text):
        sent.append(text)

    result = await run_sweep(repo, send, SUNDAY)

    assert sent == ["⏰ یادآوری: قبض گاز"]
    assert result.digest_sent is False
    assert result.reminders_sent == 1
    assert repo.due_reminders(SUNDAY) == []
    # the future reminder is still there
    assert len(repo.due_reminders(datetime(2026, 10, 19, tzinfo=TZ))) == 1


@pytest.mark.asyncio
async def test_failed_reminder_is_kept_for_next_sweep(repo):
    repo.add_reminder(Reminder(message="fail", run_at=datetime(2026, 10, 18, 8, 0, tzinfo=TZ)))
    repo.add_reminder(Reminder(message="ok", run_at=datetime(2026, 10, 18, 9, 0, tzinfo=TZ)))

    async def send(text):
        if "fail" in text:
            raise TelegramError("Timed out")

    result = await run_sweep(repo, send, SUNDAY)

    assert result.reminders_sent == 1
    assert result.reminders_failed == 1
    [left] = repo.due_reminders(SUNDAY)
    assert left.message == "fail"


@pytest.mark.asyncio
async def test_run_sweep_sends_digest(repo):
    repo.add_budget(Budget(category="خوراک", amount=100000))
    repo.add_transaction(_expense(100000, "خوراک"))
    sent = []

    async def send(text):
        sent.append(text)

    result = await run_sweep(repo, send, SUNDAY)
    assert result.digest_sent is True
    assert sent[0].startswith("--- گزارش خودکار حسابدار")
    assert "۱۰۰٪" in sent[0]


@pytest.mark.asyncio
async def test_digest_goes_out_once_per_local_day(repo):
    repo.add_budget(Budget(category="خوراک", amount=100000))
    repo.add_transaction(_expense(100000, "خوراک"))
    sent = []

    async def send(text):
        sent.append(text)

    first = await run_sweep(repo, send, SUNDAY)
    again = await run_sweep(repo, send, SUNDAY.replace(hour=18))
    next_day = await run_sweep(repo, send, datetime(2026, 10, 19, 10, 0, tzinfo=TZ))

    assert (first.digest_sent, again.digest_sent, next_day.digest_sent) == (True, False, True)
    assert len(sent) == 2
    assert repo.last_digest_date() == "2026-10-19"


@pytest.mark.asyncio
async def test_failed_digest_is_retried_on_next_sweep(repo):
    calls = []

    async def send(text):
        calls.append(text)
        if len(calls) == 1:
            raise TelegramError("Timed out")

    with pytest.raises(TelegramError):
        await run_sweep(repo, send, THURSDAY)
    assert repo.last_digest_date() is None

    result = await run_sweep(repo, send, THURSDAY)
    assert result.digest_sent is True
    assert repo.last_digest_date() == "2026-10-22"
