from datetime import datetime, timedelta
from typing import Callable
from zoneinfo import ZoneInfo

from loguru import logger

from app.db.repository import FinanceRepository
from app.llm.analyst import FinancialAnalyst
from app.llm.intents import (
    AddTransaction,
    GetAnalysis,
    GetBalance,
    GetReport,
    GetTransactionList,
    SetReminder,
    UpdateBalance,
)
from app.models.schemas import Reminder, Transaction, resolve_category
from app.services.formatting import format_amount, to_persian_digits
from app.services.periods import PERIOD_LABELS, period_window

TYPE_LABELS = {"expense": "هزینه", "income": "درآمد"}


def transaction_line(t: Transaction, currency: str) -> str:
    return (
        f"• {t.description} ({t.category}): "
        f"{format_amount(t.signed_amount, signed=True)} {currency}"
    )


class ActionHandlers:
    """One method per intent. Each returns the reply text for the chat."""

    def __init__(
        self,
        repo: FinanceRepository,
        analyst: FinancialAnalyst,
        tz: ZoneInfo,
        currency: str = "تومان",
        clock: Callable[[], datetime] | None = None,
    ):
        self.repo = repo
        self.analyst = analyst
        self.tz = tz
        self.currency = currency
        self.clock = clock or (lambda: datetime.now(tz))

    def _money(self, amount: int, signed: bool = False) -> str:
        return f"{format_amount(amount, signed=signed)} {self.currency}"

    def _filtered(self, kind: str, period: str) -> list[Transaction]:
        start, end = period_window(period, self.clock())
        return self.repo.list_transactions(
            kind=None if kind == "all" else kind, start=start, end=end
        )

    def add_transaction(self, intent: AddTransaction) -> str:
        category = resolve_category(intent.type, intent.category)
        if category != intent.category:
            logger.warning(
                "Category '{}' is not valid for {}, stored as '{}'",
                intent.category, intent.type, category,
            )

        now = self.clock()
        transaction = Transaction(
            type=intent.type,
            amount=intent.amount,
            description=intent.description,
            category=category,
            date=now.date().isoformat(),
            time=now.strftime("%H:%M"),
            created_at=now,
        )
        self.repo.add_transaction(transaction)
        logger.info("Added {} #{} of {}", transaction.type, transaction.id, transaction.amount)

        return (
            "✅ ثبت شد:\n"
            f"{TYPE_LABELS[transaction.type]} به مبلغ {self._money(transaction.amount)}\n"
            f"شرح: {transaction.description}\n"
            f"دسته‌بندی: {transaction.category}\n"
            f"زمان: {to_persian_digits(transaction.date)} ساعت {to_persian_digits(transaction.time)}"
        )

    def update_balance(self, intent: UpdateBalance) -> str:
        account = self.repo.upsert_account(intent.name, intent.balance, self.clock())
        logger.info("Balance of '{}' set to {}", account.name, account.balance)
        return f"✅ موجودی حساب «{account.name}» به {self._money(account.balance)} به‌روز شد."

    def get_balance(self, intent: GetBalance) -> str:
        if intent.name != "all":
            account = self.repo.get_account(intent.name)
            if account is None:
                return f"حسابی با نام «{intent.name}» پیدا نشد."
            return f"💳 موجودی حساب «{account.name}»: {self._money(account.balance)}"

        accounts = self.repo.list_accounts()
        if not accounts:
            return (
                "هنوز هیچ حسابی ثبت نکرده‌ای.\n"
                "برای ثبت موجودی بنویس مثلاً: «موجودی حساب ملت ۱۲ میلیون»"
            )

        lines = ["💳 موجودی حساب‌ها:"]
        for account in accounts:
            lines.append(f"• {account.name}: {self._money(account.balance)}")
        total = sum(account.balance for account in accounts)
        lines.append(f"\n💰 مجموع: {self._money(total)}")
        return "\n".join(lines)

    def get_report(self, intent: GetReport) -> str:
        transactions = self._filtered(intent.type, intent.period)
        label = PERIOD_LABELS[intent.period]

        if intent.type == "all":
            net = sum(t.signed_amount for t in transactions)
            return f"📊 تراز {label} (درآمد منهای هزینه): {self._money(net)}"

        total = sum(t.amount for t in transactions)
        noun = "هزینه‌های" if intent.type == "expense" else "درآمدهای"
        return f"📊 مجموع {noun} {label}: {self._money(total)}"

    def get_transaction_list(self, intent: GetTransactionList) -> str:
        transactions = self._filtered(intent.type, intent.period)
        label = PERIOD_LABELS[intent.period]
        if not transactions:
            return f"هیچ تراکنشی برای {label} پیدا نشد."

        lines = [f"🧾 تراکنش‌های {label}:"]
        lines.extend(transaction_line(t, self.currency) for t in transactions)
        return "\n".join(lines)

    def set_reminder(self, intent: SetReminder) -> str:
        now = self.clock()
        hour, minute = (int(part) for part in intent.time.split(":"))
        run_at = now.replace(hour=hour, minute=minute, second=0, microsecond=0)
        if run_at <= now:
            run_at += timedelta(days=1)

        reminder = self.repo.add_reminder(Reminder(message=intent.message, run_at=run_at))
        logger.info("Reminder #{} scheduled for {}", reminder.id, run_at.isoformat())

        day = "امروز" if run_at.date() == now.date() else "فردا"
        return (
            "⏰ یادآوری ثبت شد:\n"
            f"«{reminder.message}»\n"
            f"زمان: {day} ساعت {to_persian_digits(intent.time)}"
        )

    def get_analysis(self, intent: GetAnalysis) -> str:
        start, end = period_window(intent.period, self.clock())
        transactions = self.repo.list_transactions(start=start, end=end)
        label = PERIOD_LABELS[intent.period]
        if not transactions:
            return f"برای {label} تراکنشی ثبت نشده که تحلیلش کنم."

        income = sum(t.amount for t in transactions if t.type == "income")
        expense = sum(t.amount for t in transactions if t.type == "expense")
        summary = (
            f"مجموع درآمد: {self._money(income)}\n"
            f"مجموع هزینه: {self._money(expense)}\n"
            f"خالص: {self._money(income - expense)}"
        )
        listing = "\n".join(
            f"{t.date} {t.time} | {TYPE_LABELS[t.type]} | {t.category} | {t.description} | {t.amount}"
            for t in transactions
        )
        return self.analyst.advise(label, summary, listing)
