from typing import Sequence

from sqlalchemy import insert, select
from sqlalchemy.dialects.mysql import insert as mysql_insert
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.transaction_repo import TransactionRepo
from app.domain.entities.transaction import Transaction, TransactionStatus
from app.infrastructure.db.tables import transactions

UNIQUE_KEY = ("external_payment_id", "status")


class TransactionRepoSQL(TransactionRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add_once(self, transaction: Transaction) -> tuple[Transaction, bool]:
        values = {
            "id": transaction.id,
            "booking_id": transaction.booking_id,
            "vendor_id": transaction.vendor_id,
            "amount": transaction.amount,
            "fee": transaction.fee,
            "net": transaction.net,
            "external_payment_id": transaction.external_payment_id,
            "status": transaction.status.value,
            "refund_id": transaction.refund_id,
            "created_at": transaction.created_at,
        }
        result = await self._session.execute(self._insert_ignoring_duplicates(values))
        if result.rowcount == 1:
            return transaction, True

        existing = await self.find_by_external_payment(
            transaction.external_payment_id, transaction.status
        )
        if existing is None:
            raise RuntimeError("Ledger insert ignored but no existing row found")
        return existing, False

    async def find_by_external_payment(
        self,
        external_payment_id: str,
        status: TransactionStatus,
    ) -> Transaction | None:
        stmt = select(transactions).where(
            transactions.c.external_payment_id == external_payment_id,
            transactions.c.status == status.value,
        )
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        return self._map_transaction(row) if row else None

    async def list_by_vendor(self, vendor_id: str) -> Sequence[Transaction]:
        stmt = (
            select(transactions)
            .where(transactions.c.vendor_id == vendor_id)
            .order_by(transactions.c.created_at.desc(), transactions.c.id.desc())
        )
        result = await self._session.execute(stmt)
        return [self._map_transaction(row) for row in result.mappings().all()]

    async def list_by_booking(self, booking_id: str) -> Sequence[Transaction]:
        stmt = (
            select(transactions)
            .where(transactions.c.booking_id == booking_id)
            .order_by(transactions.c.created_at)
        )
        result = await self._session.execute(stmt)
        return [self._map_transaction(row) for row in result.mappings().all()]

    def _insert_ignoring_duplicates(self, values: dict):
        # Rows that collide on the unique key are skipped
        dialect = self._session.bind.dialect.name
        if dialect == "sqlite":
            return sqlite_insert(transactions).values(**values).on_conflict_do_nothing(
                index_elements=list(UNIQUE_KEY)
            )
        if dialect == "postgresql":
            return postgresql_insert(transactions).values(**values).on_conflict_do_nothing(
                index_elements=list(UNIQUE_KEY)
            )
        if dialect in ("mysql", "mariadb"):
            return mysql_insert(transactions).values(**values).prefix_with("IGNORE")
        return insert(transactions).values(**values)

    def _map_transaction(self, row) -> Transaction:
        return Transaction(
            id=row["id"],
            booking_id=row["booking_id"],
            vendor_id=row["vendor_id"],
            amount=row["amount"],
            fee=row["fee"],
            net=row["net"],
            external_payment_id=row["external_payment_id"],
            status=TransactionStatus(row["status"]),
            refund_id=row.get("refund_id"),
            created_at=row.get("created_at"),
        )
