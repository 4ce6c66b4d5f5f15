from loguru import logger
from openai import OpenAI, OpenAIError
from pydantic import BaseModel


class LLMUnavailableError(Exception):
    """The model call itself failed (network, auth, quota)."""


class Completion(BaseModel):
    text: str
    finish_reason: str | None = None
    refusal: str | None = None

    @property
    def blocked(self) -> bool:
        # Some OpenRouter providers omit finish_reason; only an explicit non-stop counts
        if self.refusal:
            return True
        return self.finish_reason not in (None, "stop")


class ChatModel:
    def __init__(self, api_key: str, model: str, client: OpenAI | None = None):
        self.client = client or OpenAI(
            base_url="https://openrouter.ai/api/v1",
            api_key=api_key,
        )
        self.model = model

    def complete(self, system: str, user: str, temperature: float = 0.1) -> Completion:
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
                temperature=temperature,
            )
        except OpenAIError as e:
            logger.error("LLM request failed: {}", e)
            raise LLMUnavailableError(str(e)) from e

        if not response.choices:
            return Completion(text="", finish_reason="empty")

        choice = response.choices[0]
        message = choice.message
        text = (message.content or "").strip()
        logger.debug("LLM raw response ({}): {}", choice.finish_reason, text)
        return Completion(
            text=text,
            finish_reason=choice.finish_reason,
            refusal=getattr(message, "refusal", None),
        )
