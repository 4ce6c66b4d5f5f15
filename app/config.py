from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    openrouter_api_key: str = ""
    telegram_bot_token: str = ""
    # Telegram user id of the only person allowed to talk to the bot
    telegram_chat_id: str = ""
    store_user_id: str = "owner"
    db_path: str = "hesabdar.json"
    llm_model: str = "google/gemini-2.0-flash-exp"
    timezone: str = "Asia/Tehran"
    currency_label: str = "تومان"
    qa_window_days: int = 30
    use_polling: bool = False


@lru_cache
def get_settings() -> Settings:
    return Settings()
