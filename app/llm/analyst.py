from loguru import logger

from app.llm.client import ChatModel
from app.llm.prompts import ADVISOR_PROMPT, ANALYST_PROMPT

NO_ANSWER = "متأسفانه نتونستم جوابی آماده کنم. لطفاً سؤالت رو طور دیگه‌ای بپرس."


class FinancialAnalyst:
    """Free-text model calls. Transport failures propagate as LLMUnavailableError."""

    def __init__(self, model: ChatModel):
        self.model = model

    def _ask(self, system: str, user: str) -> str:
        completion = self.model.complete(system, user, temperature=0.4)
        if completion.blocked or not completion.text:
            logger.warning("Analyst reply unusable (finish_reason={})", completion.finish_reason)
            return NO_ANSWER
        return completion.text

    def answer(self, question: str, context: str) -> str:
        user = f"سؤال: {question}\n\nاطلاعات مالی کاربر:\n{context}"
        return self._ask(ANALYST_PROMPT, user)

    def advise(self, period_label: str, summary: str, transactions: str) -> str:
        user = (
            f"دوره: {period_label}\n\n"
            f"خلاصه:\n{summary}\n\n"
            f"تراکنش‌ها:\n{transactions}"
        )
        return self._ask(ADVISOR_PROMPT, user)
