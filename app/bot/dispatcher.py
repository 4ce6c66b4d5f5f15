from enum import Enum

from loguru import logger
from pydantic import BaseModel

from app.bot.guard import UNAUTHORIZED_REPLY, AccessGuard
from app.llm.intents import (
    AddTransaction,
    AskQuestion,
    GetAnalysis,
    GetBalance,
    GetReport,
    GetTransactionList,
    IntentResult,
    SetReminder,
    TransportFailure,
    Unrecognized,
    UpdateBalance,
)
from app.llm.parser import IntentParser
from app.services.context import ContextAssembler
from app.services.handlers import ActionHandlers

UNRECOGNIZED_REPLY = (
    "متوجه منظورت نشدم 🤔\n"
    "می‌تونی مثلاً این‌طوری بنویسی:\n"
    "• «۵۰ هزار تومن قهوه خریدم»\n"
    "• «موجودی حساب ملت ۱۲ میلیون»\n"
    "• «هزینه‌های این ماه چقدر شده؟»\n"
    "• «ساعت ۲۱:۳۰ یادم بنداز قبض گاز رو بدم»"
)

FAILURE_REPLY = "⚠️ خطایی در سیستم رخ داد. لطفاً چند لحظه بعد دوباره تلاش کن."


class ReplyKind(str, Enum):
    HANDLED = "handled"
    UNRECOGNIZED = "unrecognized"
    FAILURE = "failure"
    UNAUTHORIZED = "unauthorized"


class Reply(BaseModel):
    kind: ReplyKind
    text: str


class Dispatcher:
    """Routes a resolved intent to its handler and classifies the outcome."""

    def __init__(self, handlers: ActionHandlers, assembler: ContextAssembler):
        self.routes = {
            AddTransaction: handlers.add_transaction,
            UpdateBalance: handlers.update_balance,
            GetBalance: handlers.get_balance,
            GetReport: handlers.get_report,
            GetTransactionList: handlers.get_transaction_list,
            GetAnalysis: handlers.get_analysis,
            SetReminder: handlers.set_reminder,
            AskQuestion: assembler.answer,
        }

    def dispatch(self, intent: IntentResult) -> Reply:
        if isinstance(intent, TransportFailure):
            logger.error("Intent parsing failed at transport level: {}", intent.error)
            return Reply(kind=ReplyKind.FAILURE, text=FAILURE_REPLY)
        if isinstance(intent, Unrecognized):
            return Reply(kind=ReplyKind.UNRECOGNIZED, text=UNRECOGNIZED_REPLY)

        handler = self.routes.get(type(intent))
        if handler is None:
            logger.error("No handler for intent {}", intent.intent)
            return Reply(kind=ReplyKind.FAILURE, text=FAILURE_REPLY)

        try:
            return Reply(kind=ReplyKind.HANDLED, text=handler(intent))
        except Exception:
            logger.exception("Error executing {}", intent.intent)
            return Reply(kind=ReplyKind.FAILURE, text=FAILURE_REPLY)


class MessageProcessor:
    """One inbound message: guard, parse, dispatch. Steps run strictly in order."""

    def __init__(self, guard: AccessGuard, parser: IntentParser, dispatcher: Dispatcher):
        self.guard = guard
        self.parser = parser
        self.dispatcher = dispatcher

    def process(self, sender_id: int | str | None, text: str) -> Reply:
        if not self.guard.allows(sender_id):
            return Reply(kind=ReplyKind.UNAUTHORIZED, text=UNAUTHORIZED_REPLY)

        intent = self.parser.resolve(text)
        logger.info("Resolved intent: {}", intent.intent)
        return self.dispatcher.dispatch(intent)

    def execute(self, sender_id: int | str | None, intent: IntentResult) -> Reply:
        """Run a known intent (bot commands) without asking the model."""
        if not self.guard.allows(sender_id):
            return Reply(kind=ReplyKind.UNAUTHORIZED, text=UNAUTHORIZED_REPLY)
        return self.dispatcher.dispatch(intent)
