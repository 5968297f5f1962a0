from typing import Sequence

from app.application.interfaces.transaction_repo import TransactionRepo
from app.domain.entities.transaction import Transaction


class ListTransactionsUseCase:
    def __init__(self, transaction_repo: TransactionRepo) -> None:
        self._transaction_repo = transaction_repo

    async def execute(self, vendor_id: str) -> Sequence[Transaction]:
        return await self._transaction_repo.list_by_vendor(vendor_id)
