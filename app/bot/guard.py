from loguru import logger

UNAUTHORIZED_REPLY = "شما مجاز به استفاده از این ربات نیستید."


class AccessGuard:
    def __init__(self, operator_id: str):
        self.operator_id = operator_id.strip()

    def allows(self, sender_id: int | str | None) -> bool:
        # An unset operator id locks everyone out
        if not self.operator_id or sender_id is None:
            allowed = False
        else:
            allowed = str(sender_id) == self.operator_id
        if not allowed:
            logger.warning("Unauthorized access attempt by user ID: {}", sender_id)
        return allowed
