from loguru import logger
from telegram import Update
from telegram.constants import ChatAction, MessageLimit
from telegram.ext import (
    Application,
    CommandHandler,
    ContextTypes,
    MessageHandler,
    filters,
)

from app.bot.dispatcher import Reply
from app.bot.guard import UNAUTHORIZED_REPLY
from app.config import get_settings
from app.deps import processor
from app.llm.intents import GetBalance, GetTransactionList

settings = get_settings()


def split_message(text: str, limit: int = MessageLimit.MAX_TEXT_LENGTH) -> list[str]:
    """Split a reply into Telegram-sized chunks, on line boundaries where possible."""
    chunks: list[str] = []
    current = ""
    for line in text.split("\n"):
        while len(line) > limit:
            if current:
                chunks.append(current)
                current = ""
            chunks.append(line[:limit])
            line = line[limit:]
        candidate = f"{current}\n{line}" if current else line
        if len(candidate) > limit:
            chunks.append(current)
            current = line
        else:
            current = candidate
    if current or not chunks:
        chunks.append(current)
    return chunks


def _sender_id(update: Update) -> int | None:
    user = update.effective_user
    return user.id if user else None


async def _send(update: Update, reply: Reply) -> None:
    logger.info("Reply ({}) to {}", reply.kind.value, _sender_id(update))
    for chunk in split_message(reply.text):
        await update.effective_message.reply_text(chunk)


async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /start command."""
    if not processor.guard.allows(_sender_id(update)):
        await update.effective_message.reply_text(UNAUTHORIZED_REPLY)
        return

    await update.effective_message.reply_text(
        "سلام! من حسابدار شخصی تو هستم 👋\n\n"
        "هر تراکنش یا سؤالی داری به زبان خودت بنویس.\n\n"
        "مثال‌ها:\n"
        "• «۵۰ هزار تومن قهوه خریدم»\n"
        "• «حقوق این ماه ۲۵ میلیون واریز شد»\n"
        "• «موجودی حساب ملت ۱۲ میلیون»\n"
        "• «امروز چقدر خرج کردم؟»\n"
        "• «خرج‌های این هفته‌ام رو تحلیل کن»\n"
        "• «ساعت ۲۱:۳۰ یادم بنداز قبض گاز رو بدم»\n\n"
        "دستورها:\n"
        "/balance — موجودی همه حساب‌ها\n"
        "/today — تراکنش‌های امروز\n"
        "/help — نمایش همین پیام"
    )


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /help command."""
    await start_command(update, context)


async def balance_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /balance command."""
    reply = processor.execute(_sender_id(update), GetBalance(name="all"))
    await _send(update, reply)


async def today_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /today command."""
    reply = processor.execute(
        _sender_id(update), GetTransactionList(type="all", period="today")
    )
    await _send(update, reply)


async def handle_message(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle incoming text messages — the main conversation entry point."""
    message = update.effective_message
    if message is None or not message.text:
        return

    sender = _sender_id(update)
    if not processor.guard.allows(sender):
        await message.reply_text(UNAUTHORIZED_REPLY)
        return

    user_text = message.text.strip()
    logger.info("Telegram message: {}", user_text)

    await message.chat.send_action(ChatAction.TYPING)
    reply = processor.process(sender, user_text)
    await _send(update, reply)


def build_bot_app() -> Application:
    """Build and return the Telegram bot application."""
    app = Application.builder().token(settings.telegram_bot_token).build()

    app.add_handler(CommandHandler("start", start_command))
    app.add_handler(CommandHandler("help", help_command))
    app.add_handler(CommandHandler("balance", balance_command))
    app.add_handler(CommandHandler("today", today_command))

    # An edit would record the same transaction a second time
    app.add_handler(
        MessageHandler(
            filters.TEXT & ~filters.COMMAND & ~filters.UpdateType.EDITED, handle_message
        )
    )

    return app
