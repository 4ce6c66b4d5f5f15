from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

DEFAULT_CATEGORY = "سایر"
DEFAULT_DESCRIPTION = "ثبت شده توسط ربات"

EXPENSE_CATEGORIES = (
    "خوراک",
    "حمل و نقل",
    "قبوض",
    "خرید",
    "تفریح",
    "سلامت",
    "آموزش",
    "مسکن",
    "اقساط",
    DEFAULT_CATEGORY,
)

INCOME_CATEGORIES = (
    "حقوق",
    "پروژه",
    "سرمایه‌گذاری",
    "هدیه",
    "فروش",
    DEFAULT_CATEGORY,
)

CATEGORIES = {"expense": EXPENSE_CATEGORIES, "income": INCOME_CATEGORIES}

TransactionType = Literal["expense", "income"]


def resolve_category(kind: str, category: str | None) -> str:
    """Return the category if it belongs to the kind's enumeration, else the default."""
    if category and category in CATEGORIES.get(kind, ()):
        return category
    return DEFAULT_CATEGORY


class Transaction(BaseModel):
    id: int | None = None
    type: TransactionType
    amount: int = Field(gt=0)
    description: str = DEFAULT_DESCRIPTION
    category: str = DEFAULT_CATEGORY
    date: str
    time: str
    created_at: datetime

    @property
    def signed_amount(self) -> int:
        return self.amount if self.type == "income" else -self.amount


class Account(BaseModel):
    name: str
    balance: int
    updated_at: datetime | None = None


class Installment(BaseModel):
    id: int | None = None
    name: str
    amount: int
    day: int = Field(ge=1, le=31)


class Budget(BaseModel):
    id: int | None = None
    category: str
    amount: int = Field(gt=0)


class Reminder(BaseModel):
    id: int | None = None
    message: str
    run_at: datetime
    sent: bool = False


class CreateInstallmentRequest(BaseModel):
    name: str
    amount: int = Field(gt=0)
    day: int = Field(ge=1, le=31)


class CreateBudgetRequest(BaseModel):
    category: str
    amount: int = Field(gt=0)


class SendReportRequest(BaseModel):
    html_content: str = Field(default="", alias="htmlContent")
    file_name: str = Field(default="", alias="fileName")
