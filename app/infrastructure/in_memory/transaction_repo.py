from collections import defaultdict
from copy import deepcopy
from typing import Sequence

from app.application.interfaces.transaction_repo import TransactionRepo
from app.domain.entities.transaction import Transaction, TransactionStatus


class InMemoryTransactionRepo(TransactionRepo):
    def __init__(self) -> None:
        self._by_id: dict[str, Transaction] = {}
        self._by_payment: dict[tuple[str, TransactionStatus], str] = {}
        self._by_vendor: dict[str, list[str]] = defaultdict(list)

    async def add_once(self, transaction: Transaction) -> tuple[Transaction, bool]:
        key = (transaction.external_payment_id, transaction.status)
        existing_id = self._by_payment.get(key)
        if existing_id is not None:
            return deepcopy(self._by_id[existing_id]), False
        self._by_id[transaction.id] = deepcopy(transaction)
        self._by_payment[key] = transaction.id
        self._by_vendor[transaction.vendor_id].append(transaction.id)
        return deepcopy(transaction), True

    async def find_by_external_payment(
        self,
        external_payment_id: str,
        status: TransactionStatus,
    ) -> Transaction | None:
        tx_id = self._by_payment.get((external_payment_id, status))
        return deepcopy(self._by_id[tx_id]) if tx_id else None

    async def list_by_vendor(self, vendor_id: str) -> Sequence[Transaction]:
        rows = [self._by_id[tx_id] for tx_id in self._by_vendor.get(vendor_id, [])]
        # Más recientes primero; a igual timestamp, el último insertado primero
        ordered = sorted(
            enumerate(rows), key=lambda pair: (pair[1].created_at, pair[0]), reverse=True
        )
        return [deepcopy(row) for _, row in ordered]

    async def list_by_booking(self, booking_id: str) -> Sequence[Transaction]:
        return [deepcopy(t) for t in self._by_id.values() if t.booking_id == booking_id]
