from typing import Sequence

from app.domain.entities.transaction import Transaction, TransactionStatus


class TransactionRepo:
    async def add_once(self, transaction: Transaction) -> tuple[Transaction, bool]:
        """
        Inserta el asiento si no existe otro con el mismo
        (external_payment_id, status).

        Returns:
            (asiento persistido, True si se creó en esta llamada)
        """
        raise NotImplementedError

    async def find_by_external_payment(
        self,
        external_payment_id: str,
        status: TransactionStatus,
    ) -> Transaction | None:
        raise NotImplementedError

    async def list_by_vendor(self, vendor_id: str) -> Sequence[Transaction]:
        """Asientos del proveedor, más recientes primero."""
        raise NotImplementedError

    async def list_by_booking(self, booking_id: str) -> Sequence[Transaction]:
        raise NotImplementedError
