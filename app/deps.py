from zoneinfo import ZoneInfo

from app.bot.dispatcher import Dispatcher, MessageProcessor
from app.bot.guard import AccessGuard
from app.config import get_settings
from app.db.repository import FinanceRepository
from app.db.store import DocumentStore
from app.llm.analyst import FinancialAnalyst
from app.llm.client import ChatModel
from app.llm.parser import IntentParser
from app.services.context import ContextAssembler
from app.services.handlers import ActionHandlers

settings = get_settings()
tz = ZoneInfo(settings.timezone)

store = DocumentStore(settings.db_path)
repo = FinanceRepository(store, settings.store_user_id)

chat_model = ChatModel(api_key=settings.openrouter_api_key, model=settings.llm_model)
parser = IntentParser(chat_model)
analyst = FinancialAnalyst(chat_model)

handlers = ActionHandlers(repo, analyst, tz, currency=settings.currency_label)
assembler = ContextAssembler(repo, analyst, tz, window_days=settings.qa_window_days)
dispatcher = Dispatcher(handlers, assembler)
processor = MessageProcessor(AccessGuard(settings.telegram_chat_id), parser, dispatcher)
