from datetime import date, datetime

from app.db.store import DocumentStore
from app.models.schemas import Account, Budget, Installment, Reminder, Transaction


def _in_window(day: str, start: datetime | None, end: datetime | None) -> bool:
    d = date.fromisoformat(day)
    if start is not None and d < start.date():
        return False
    if end is not None and d >= end.date():
        return False
    return True


class FinanceRepository:
    """All collections of the single operator, rooted at ``users/{user_id}``."""

    def __init__(self, store: DocumentStore, user_id: str):
        self.store = store
        self.root = f"users/{user_id}"

    def _path(self, name: str) -> str:
        return f"{self.root}/{name}"

    # Transactions

    def add_transaction(self, transaction: Transaction) -> Transaction:
        data = transaction.model_dump(mode="json")
        data.pop("id", None)
        transaction.id = self.store.add(self._path("transactions"), data)
        return transaction

    def list_transactions(
        self,
        kind: str | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[Transaction]:
        """Transactions in the half-open ``[start, end)`` window, newest first."""

        def matches(doc: dict) -> bool:
            if kind and doc.get("type") != kind:
                return False
            return _in_window(doc["date"], start, end)

        docs = self.store.where(self._path("transactions"), matches)
        transactions = [Transaction(**{**doc, "id": doc.doc_id}) for doc in docs]
        transactions.sort(key=lambda t: t.created_at, reverse=True)
        return transactions

    # Accounts

    def upsert_account(self, name: str, balance: int, updated_at: datetime) -> Account:
        self.store.set(
            self._path("accounts"),
            name,
            {"name": name, "balance": balance, "updated_at": updated_at.isoformat()},
        )
        return Account(name=name, balance=balance, updated_at=updated_at)

    def get_account(self, name: str) -> Account | None:
        doc = self.store.get(self._path("accounts"), name)
        if doc is None:
            return None
        return Account(**doc)

    def list_accounts(self) -> list[Account]:
        return [Account(**doc) for doc in self.store.all(self._path("accounts"))]

    # Installments and budgets are maintained out-of-band through the API

    def add_installment(self, installment: Installment) -> Installment:
        data = installment.model_dump(exclude={"id"})
        installment.id = self.store.add(self._path("installments"), data)
        return installment

    def list_installments(self) -> list[Installment]:
        docs = self.store.all(self._path("installments"))
        return [Installment(**{**doc, "id": doc.doc_id}) for doc in docs]

    def delete_installment(self, id: int) -> bool:
        return self.store.delete(self._path("installments"), id)

    def add_budget(self, budget: Budget) -> Budget:
        data = budget.model_dump(exclude={"id"})
        budget.id = self.store.add(self._path("budgets"), data)
        return budget

    def list_budgets(self) -> list[Budget]:
        docs = self.store.all(self._path("budgets"))
        return [Budget(**{**doc, "id": doc.doc_id}) for doc in docs]

    def delete_budget(self, id: int) -> bool:
        return self.store.delete(self._path("budgets"), id)

    # Reminders

    def add_reminder(self, reminder: Reminder) -> Reminder:
        data = reminder.model_dump(mode="json")
        data.pop("id", None)
        reminder.id = self.store.add(self._path("reminders"), data)
        return reminder

    def due_reminders(self, now: datetime) -> list[Reminder]:
        def is_due(doc: dict) -> bool:
            return not doc.get("sent") and datetime.fromisoformat(doc["run_at"]) <= now

        docs = self.store.where(self._path("reminders"), is_due)
        reminders = [Reminder(**{**doc, "id": doc.doc_id}) for doc in docs]
        reminders.sort(key=lambda r: r.run_at)
        return reminders

    def delete_reminder(self, id: int) -> bool:
        return self.store.delete(self._path("reminders"), id)

    # Sweep bookkeeping

    def last_digest_date(self) -> str | None:
        doc = self.store.get(self._path("sweep"), "digest")
        return doc["date"] if doc else None

    def mark_digest_sent(self, day: date) -> None:
        self.store.set(self._path("sweep"), "digest", {"date": day.isoformat()})
