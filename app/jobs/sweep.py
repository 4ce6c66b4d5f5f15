from datetime import datetime, timedelta
from typing import Any, Awaitable, Callable

import jdatetime
from loguru import logger
from pydantic import BaseModel
from telegram.error import TelegramError

from app.db.repository import FinanceRepository
from app.models.schemas import Budget, Installment, Transaction
from app.services.formatting import format_amount, to_persian_digits
from app.services.periods import period_window

Send = Callable[[str], Awaitable[Any]]

INSTALLMENT_LOOKAHEAD_DAYS = 3
BUDGET_WARNING_PERCENT = 90
# Thursday and Friday close the Iranian week
NUDGE_WEEKDAYS = (3, 4)

NUDGE_TEXT = (
    "شب بخیر! یادت نره خرج و دخل امروزت رو در ربات ثبت کنی. "
    "(مثال: «۵۰ هزار تومن قهوه خریدم»)"
)


class SweepResult(BaseModel):
    digest_sent: bool = False
    reminders_sent: int = 0
    reminders_failed: int = 0


def installment_alerts(
    installments: list[Installment], today: jdatetime.date, currency: str = "تومان"
) -> list[str]:
    """Installments due within the lookahead, matched on the Jalali day of month."""
    alerts = []
    for installment in installments:
        for offset in range(INSTALLMENT_LOOKAHEAD_DAYS + 1):
            if (today + timedelta(days=offset)).day != installment.day:
                continue
            amount = f"{format_amount(installment.amount)} {currency}"
            day = to_persian_digits(str(installment.day))
            if offset == 0:
                alerts.append(
                    f"❗️ امروز ({day}م) موعد قسط «{installment.name}» به مبلغ {amount} است."
                )
            else:
                alerts.append(
                    f"🔔 {to_persian_digits(str(offset))} روز دیگر ({day}م) موعد قسط "
                    f"«{installment.name}» به مبلغ {amount} است."
                )
            break
    return alerts


def budget_alerts(budgets: list[Budget], expenses: list[Transaction]) -> list[str]:
    spent: dict[str, int] = {}
    for t in expenses:
        spent[t.category] = spent.get(t.category, 0) + t.amount

    alerts = []
    for budget in budgets:
        percent = spent.get(budget.category, 0) / budget.amount * 100
        if percent >= BUDGET_WARNING_PERCENT:
            alerts.append(
                f"⚠️ هشدار بودجه: شما {to_persian_digits(f'{percent:.0f}')}٪ از بودجه ماهانه "
                f"«{budget.category}» (سقف: {format_amount(budget.amount)}) را مصرف کرده‌اید."
            )
    return alerts


def build_digest(repo: FinanceRepository, now: datetime, currency: str = "تومان") -> str | None:
    """Compose the periodic digest, or None when there is nothing to say."""
    today = jdatetime.date.fromgregorian(date=now.date())
    header = f"--- گزارش خودکار حسابدار (امروز: {to_persian_digits(today.strftime('%Y/%m/%d'))}) ---\n"
    body = ""

    installments = installment_alerts(repo.list_installments(), today, currency)
    if installments:
        body += "\nیادآوری اقساط:\n" + "\n".join(installments) + "\n"

    start, end = period_window("month", now)
    budgets = budget_alerts(
        repo.list_budgets(), repo.list_transactions(kind="expense", start=start, end=end)
    )
    if budgets:
        body += "\nهشدار بودجه:\n" + "\n".join(budgets) + "\n"

    if not body and now.weekday() in NUDGE_WEEKDAYS:
        body = "\n" + NUDGE_TEXT

    if not body:
        return None
    return header + body


async def run_sweep(
    repo: FinanceRepository, send: Send, now: datetime, currency: str = "تومان"
) -> SweepResult:
    result = SweepResult()

    # The cron fires several times a day; the digest goes out once per local day
    today = now.date()
    if repo.last_digest_date() == today.isoformat():
        logger.info("Digest already sent today.")
    else:
        digest = build_digest(repo, now, currency)
        if digest:
            await send(digest)
            repo.mark_digest_sent(today)
            result.digest_sent = True
        else:
            logger.info("No reminders to send today.")

    # A reminder is deleted only after it was delivered; failures wait for the next sweep
    for reminder in repo.due_reminders(now):
        try:
            await send(f"⏰ یادآوری: {reminder.message}")
        except TelegramError as e:
            logger.error("Failed to send reminder #{}: {}", reminder.id, e)
            result.reminders_failed += 1
            continue
        repo.delete_reminder(reminder.id)
        result.reminders_sent += 1

    logger.info(
        "Sweep done: digest={}, reminders sent={}, failed={}",
        result.digest_sent, result.reminders_sent, result.reminders_failed,
    )
    return result
