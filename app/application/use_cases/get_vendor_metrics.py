from decimal import Decimal

from app.application.dtos.metrics_dto import VendorMetricsDTO
from app.application.interfaces.booking_repo import BookingRepo
from app.application.interfaces.clock import Clock
from app.application.interfaces.transaction_repo import TransactionRepo
from app.domain.entities.booking import BookingStatus
from app.domain.entities.transaction import TransactionStatus


class GetVendorMetricsUseCase:
    """Derives booking counts and ledger totals for a vendor at read time."""

    def __init__(
        self,
        booking_repo: BookingRepo,
        transaction_repo: TransactionRepo,
        clock: Clock,
    ) -> None:
        self._booking_repo = booking_repo
        self._transaction_repo = transaction_repo
        self._clock = clock

    async def execute(self, vendor_id: str) -> VendorMetricsDTO:
        bookings = await self._booking_repo.list_by_vendor(vendor_id)
        transactions = await self._transaction_repo.list_by_vendor(vendor_id)
        now = self._clock.now()

        metrics = VendorMetricsDTO(vendor_id=vendor_id, total_bookings=len(bookings))
        for booking in bookings:
            if booking.status == BookingStatus.PENDING:
                metrics.pending += 1
            elif booking.status == BookingStatus.CONFIRMED:
                metrics.confirmed += 1
            elif booking.status == BookingStatus.CANCELLED:
                metrics.cancelled += 1
            elif booking.status == BookingStatus.COMPLETED:
                metrics.completed += 1

            if booking.start_time > now:
                metrics.upcoming += 1
            else:
                metrics.past += 1

        revenue = fees = net = refunded = Decimal("0.00")
        for row in transactions:
            if row.status == TransactionStatus.COMPLETED:
                revenue += row.amount
                fees += row.fee
                net += row.net
            elif row.status == TransactionStatus.REFUNDED:
                refunded += -row.amount

        metrics.total_revenue = revenue
        metrics.total_fees = fees
        metrics.total_net = net
        metrics.total_refunded = refunded
        metrics.net_revenue = revenue - refunded
        metrics.transaction_count = len(transactions)
        return metrics
