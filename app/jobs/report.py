import tempfile
from pathlib import Path

from loguru import logger
from telegram import Bot

REPORT_CAPTION = "Your Financial Report"
FALLBACK_FILE_NAME = "report.html"


def safe_file_name(file_name: str) -> str:
    """Basename of the client-supplied name, or a fixed name when nothing usable is left."""
    name = Path(file_name.replace("\\", "/")).name
    if name in ("", ".", ".."):
        return FALLBACK_FILE_NAME
    return name


async def forward_report(bot: Bot, chat_id: str, html_content: str, file_name: str) -> None:
    """Relay a rendered report to the operator's chat as a document.

    The file lives in a private temporary directory that is removed whether or
    not the upload succeeds, so concurrent reports never share a path.
    """
    name = safe_file_name(file_name)
    with tempfile.TemporaryDirectory(prefix="hesabdar-report-") as tmp:
        temp_path = Path(tmp) / name
        temp_path.write_text(html_content, encoding="utf-8")
        logger.info("Sending file {} to Telegram...", name)
        with temp_path.open("rb") as document:
            await bot.send_document(
                chat_id=chat_id,
                document=document,
                filename=name,
                caption=REPORT_CAPTION,
            )
        logger.info("File sent successfully!")
    logger.debug("Temporary directory {} deleted", tmp)
