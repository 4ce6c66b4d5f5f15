from datetime import datetime
from typing import Callable
from zoneinfo import ZoneInfo

from app.db.repository import FinanceRepository
from app.llm.analyst import FinancialAnalyst
from app.llm.intents import AskQuestion
from app.services.periods import days_back

NO_DATA = "هنوز هیچ داده‌ای ثبت نشده است."


class ContextAssembler:
    """Answers free-form questions from the operator's own records.

    The context block holds, in order: transactions of the last
    ``window_days`` days, every account, and every installment. The model's
    arithmetic is not checked against the stored totals.
    """

    def __init__(
        self,
        repo: FinanceRepository,
        analyst: FinancialAnalyst,
        tz: ZoneInfo,
        window_days: int = 30,
        clock: Callable[[], datetime] | None = None,
    ):
        self.repo = repo
        self.analyst = analyst
        self.window_days = window_days
        self.clock = clock or (lambda: datetime.now(tz))

    def build_context(self) -> str:
        start, end = days_back(self.window_days, self.clock())
        transactions = self.repo.list_transactions(start=start, end=end)
        accounts = self.repo.list_accounts()
        installments = self.repo.list_installments()

        if not (transactions or accounts or installments):
            return NO_DATA

        sections = []
        if transactions:
            lines = [f"تراکنش‌های {self.window_days} روز اخیر (تاریخ | نوع | دسته | شرح | مبلغ):"]
            for t in transactions:
                kind = "درآمد" if t.type == "income" else "هزینه"
                lines.append(f"- {t.date} {t.time} | {kind} | {t.category} | {t.description} | {t.amount}")
            sections.append("\n".join(lines))
        if accounts:
            lines = ["موجودی حساب‌ها:"]
            lines.extend(f"- {a.name}: {a.balance}" for a in accounts)
            sections.append("\n".join(lines))
        if installments:
            lines = ["اقساط ماهانه (نام | مبلغ | روز ماه):"]
            lines.extend(f"- {i.name} | {i.amount} | {i.day}" for i in installments)
            sections.append("\n".join(lines))
        return "\n\n".join(sections)

    def answer(self, intent: AskQuestion) -> str:
        return self.analyst.answer(intent.question, self.build_context())
