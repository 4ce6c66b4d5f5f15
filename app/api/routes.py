from datetime import datetime

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import PlainTextResponse
from loguru import logger
from telegram import Update
from telegram.error import TelegramError

from app.deps import repo, settings, tz
from app.jobs.report import forward_report
from app.jobs.sweep import run_sweep
from app.models.schemas import (
    Account,
    Budget,
    CreateBudgetRequest,
    CreateInstallmentRequest,
    Installment,
    SendReportRequest,
    Transaction,
)
from app.services.periods import period_window

router = APIRouter()


def _bot_app(request: Request):
    bot_app = getattr(request.app.state, "bot", None)
    if bot_app is None:
        raise HTTPException(status_code=500, detail="Telegram bot is not configured")
    return bot_app


@router.post("/webhook", response_class=PlainTextResponse)
async def telegram_webhook(request: Request):
    try:
        bot_app = _bot_app(request)
        payload = await request.json()
        update = Update.de_json(payload, bot_app.bot)
        await bot_app.process_update(update)
    except Exception as e:
        logger.error("Error handling update: {}", e)
        return PlainTextResponse("Error", status_code=500)
    return "OK"


@router.api_route("/cron", methods=["GET", "POST"], response_class=PlainTextResponse)
async def cron(request: Request):
    bot_app = _bot_app(request)
    if not settings.telegram_chat_id:
        raise HTTPException(status_code=500, detail="TELEGRAM_CHAT_ID is not set")

    async def send(text: str):
        return await bot_app.bot.send_message(chat_id=settings.telegram_chat_id, text=text)

    try:
        result = await run_sweep(repo, send, datetime.now(tz), settings.currency_label)
    except Exception as e:
        logger.error("Error executing cron job: {}", e)
        return PlainTextResponse("Error", status_code=500)

    if result.digest_sent or result.reminders_sent:
        return (
            "Cron job executed successfully, "
            f"digest sent: {result.digest_sent}, reminders sent: {result.reminders_sent}."
        )
    return "Cron job executed, no reminders needed today."


@router.post("/send-report")
async def send_report(request: Request, body: SendReportRequest):
    if not settings.telegram_bot_token or not settings.telegram_chat_id:
        logger.error("Server Error: Telegram token or chat ID is not configured.")
        raise HTTPException(status_code=500, detail="Server configuration error.")
    if not body.html_content or not body.file_name:
        logger.error("Error: Report information is incomplete.")
        raise HTTPException(status_code=400, detail="Bad Request: Missing report data.")

    bot_app = _bot_app(request)
    try:
        await forward_report(bot_app.bot, settings.telegram_chat_id, body.html_content, body.file_name)
    except TelegramError as e:
        logger.error("Telegram API Error: {}", e)
        raise HTTPException(status_code=500, detail=f"Telegram API Error: {e.message}")
    return {"ok": True, "message": "Report sent to Telegram!"}


@router.get("/transactions", response_model=list[Transaction])
def list_transactions(type: str | None = None, period: str = "all_time"):
    try:
        start, end = period_window(period, datetime.now(tz))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return repo.list_transactions(kind=type, start=start, end=end)


@router.get("/accounts", response_model=list[Account])
def list_accounts():
    return repo.list_accounts()


@router.get("/installments", response_model=list[Installment])
def list_installments():
    return repo.list_installments()


@router.post("/installments", response_model=Installment)
def create_installment(request: CreateInstallmentRequest):
    created = repo.add_installment(Installment(**request.model_dump()))
    logger.info("Created installment #{} ({})", created.id, created.name)
    return created


@router.delete("/installments/{installment_id}")
def delete_installment(installment_id: int):
    if not repo.delete_installment(installment_id):
        raise HTTPException(status_code=404, detail="Installment not found")
    logger.info("Deleted installment #{}", installment_id)
    return {"detail": "Installment deleted"}


@router.get("/budgets", response_model=list[Budget])
def list_budgets():
    return repo.list_budgets()


@router.post("/budgets", response_model=Budget)
def create_budget(request: CreateBudgetRequest):
    created = repo.add_budget(Budget(**request.model_dump()))
    logger.info("Created budget #{} for {}", created.id, created.category)
    return created


@router.delete("/budgets/{budget_id}")
def delete_budget(budget_id: int):
    if not repo.delete_budget(budget_id):
        raise HTTPException(status_code=404, detail="Budget not found")
    logger.info("Deleted budget #{}", budget_id)
    return {"detail": "Budget deleted"}
