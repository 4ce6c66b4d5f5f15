import json

from loguru import logger
from pydantic import ValidationError

from app.llm.client import ChatModel, LLMUnavailableError
from app.llm.intents import IntentResult, TransportFailure, Unrecognized, intent_adapter
from app.llm.prompts import INTENT_PROMPT


def strip_code_fences(raw: str) -> str:
    if raw.startswith("```"):
        lines = raw.split("\n")
        lines = [l for l in lines if not l.startswith("```")]
        raw = "\n".join(lines)
    return raw.strip()


class IntentParser:
    def __init__(self, model: ChatModel):
        self.model = model

    def resolve(self, message: str) -> IntentResult:
        """Classify one user message.

        Never raises: an unusable reply becomes ``Unrecognized`` and a failed
        call becomes ``TransportFailure``.
        """
        try:
            completion = self.model.complete(INTENT_PROMPT, message, temperature=0.1)
        except LLMUnavailableError as e:
            return TransportFailure(error=str(e))

        if completion.blocked:
            logger.warning(
                "LLM reply blocked (finish_reason={}, refusal={})",
                completion.finish_reason,
                completion.refusal,
            )
            return Unrecognized()

        raw = strip_code_fences(completion.text)
        if not raw:
            logger.warning("LLM returned an empty reply")
            return Unrecognized()

        try:
            parsed_json = json.loads(raw)
            return intent_adapter.validate_python(parsed_json)
        except json.JSONDecodeError as e:
            logger.error("Failed to parse LLM response as JSON: {}", e)
            return Unrecognized()
        except ValidationError as e:
            logger.error("LLM response does not match any intent: {}", e)
            return Unrecognized()
