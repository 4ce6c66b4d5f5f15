from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationInfo, field_validator

from app.models.schemas import DEFAULT_CATEGORY, DEFAULT_DESCRIPTION

Period = Literal["today", "month", "all_time"]
AnalysisPeriod = Literal["today", "week", "month"]
ReportType = Literal["expense", "income", "all"]


class _Intent(BaseModel):
    @field_validator("*", mode="before")
    @classmethod
    def null_means_default(cls, value, info: ValidationInfo):
        # Models often send null or "" for a field they mean to leave out
        if value is None or (isinstance(value, str) and not value.strip()):
            field = cls.model_fields[info.field_name]
            if not field.is_required():
                return field.default
        return value


class AddTransaction(_Intent):
    intent: Literal["add_transaction"] = "add_transaction"
    type: Literal["expense", "income"]
    amount: int = Field(gt=0)
    description: str = DEFAULT_DESCRIPTION
    category: str = DEFAULT_CATEGORY


class UpdateBalance(_Intent):
    intent: Literal["update_balance"] = "update_balance"
    name: str = Field(min_length=1)
    balance: int


class GetBalance(_Intent):
    intent: Literal["get_balance"] = "get_balance"
    name: str = "all"


class GetReport(_Intent):
    intent: Literal["get_report"] = "get_report"
    type: ReportType = "all"
    period: Period = "month"


class GetTransactionList(_Intent):
    intent: Literal["get_transaction_list"] = "get_transaction_list"
    type: ReportType = "all"
    period: Period = "month"


class GetAnalysis(_Intent):
    intent: Literal["get_analysis"] = "get_analysis"
    period: AnalysisPeriod = "month"


class SetReminder(_Intent):
    intent: Literal["set_reminder"] = "set_reminder"
    time: str
    message: str = Field(min_length=1)

    @field_validator("time")
    @classmethod
    def absolute_clock_time(cls, value: str) -> str:
        # Raises ValueError for anything that is not an absolute 24h HH:MM
        parsed = datetime.strptime(value.strip(), "%H:%M")
        return parsed.strftime("%H:%M")


class AskQuestion(_Intent):
    intent: Literal["ask_question"] = "ask_question"
    question: str = Field(min_length=1)


class Unrecognized(_Intent):
    intent: Literal["unrecognized"] = "unrecognized"


class TransportFailure(BaseModel):
    """The model could not be reached; never produced by the model itself."""

    intent: Literal["transport_failure"] = "transport_failure"
    error: str = ""


ParsedIntent = Annotated[
    Union[
        AddTransaction,
        UpdateBalance,
        GetBalance,
        GetReport,
        GetTransactionList,
        GetAnalysis,
        SetReminder,
        AskQuestion,
        Unrecognized,
    ],
    Field(discriminator="intent"),
]

IntentResult = Union[
    AddTransaction,
    UpdateBalance,
    GetBalance,
    GetReport,
    GetTransactionList,
    GetAnalysis,
    SetReminder,
    AskQuestion,
    Unrecognized,
    TransportFailure,
]

intent_adapter = TypeAdapter(ParsedIntent)
