import logging
from decimal import Decimal

from app.application.dtos.payment_dto import RefundDTO
from app.application.interfaces.booking_repo import BookingRepo
from app.application.interfaces.clock import Clock
from app.application.interfaces.id_generator import IdGenerator
from app.application.interfaces.stripe_gateway import StripeGateway
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.interfaces.transaction_repo import TransactionRepo
from app.application.retry import retry_on_conflict
from app.domain.entities.booking import Booking, BookingPaymentStatus
from app.domain.entities.transaction import Transaction, TransactionStatus
from app.domain.errors import (
    AuthorizationError,
    NoPaymentError,
    NotFoundError,
    NotPaidError,
    ValidationError,
)
from app.domain.value_objects.money import Money, round_to_cents

DEFAULT_REFUND_REASON = "requested_by_customer"


def refund_idempotency_key(booking_id: str) -> str:
    """One refund per booking: every attempt for a booking reuses this key."""
    return f"refund-{booking_id}"


class RefundBookingUseCase:
    def __init__(
        self,
        booking_repo: BookingRepo,
        transaction_repo: TransactionRepo,
        stripe_gateway: StripeGateway,
        transaction_manager: TransactionManager,
        id_generator: IdGenerator,
        clock: Clock,
        currency: str,
        platform_fee_rate: Decimal,
    ) -> None:
        self._booking_repo = booking_repo
        self._transaction_repo = transaction_repo
        self._stripe_gateway = stripe_gateway
        self._transaction_manager = transaction_manager
        self._id_generator = id_generator
        self._clock = clock
        self._currency = currency
        self._platform_fee_rate = platform_fee_rate
        self._logger = logging.getLogger(__name__)

    async def execute(
        self,
        booking_id: str,
        requester_id: str,
        amount: Decimal | None = None,
        reason: str | None = None,
    ) -> RefundDTO:
        booking = await self._booking_repo.get(booking_id)
        if booking is None:
            raise NotFoundError("Booking", booking_id)
        if not booking.is_vendor(requester_id):
            raise AuthorizationError(requester_id, "refund booking")
        if not booking.stripe_payment_id:
            raise NoPaymentError(booking_id)
        if booking.payment_status != BookingPaymentStatus.PAID:
            raise NotPaidError(booking_id, booking.payment_status.value)

        paid_amount = await self._paid_amount(booking)
        refund_amount = paid_amount
        if amount is not None:
            refund_amount = round_to_cents(amount)
            if refund_amount <= 0:
                raise ValidationError("amount", "must be greater than 0")
            if refund_amount > paid_amount:
                raise ValidationError("amount", f"exceeds the paid amount {paid_amount}")

        partial = refund_amount < paid_amount
        refund_money = Money(amount=refund_amount, currency_code=self._currency)

        refund = await self._stripe_gateway.create_refund(
            payment_intent_id=booking.stripe_payment_id,
            amount_cents=refund_money.to_cents() if amount is not None else None,
            reason=reason or DEFAULT_REFUND_REASON,
            idempotency_key=refund_idempotency_key(booking.id),
        )

        target = (
            BookingPaymentStatus.PARTIALLY_REFUNDED if partial else BookingPaymentStatus.REFUNDED
        )
        ledger_row = Transaction.refund(
            transaction_id=self._id_generator.new_id("txn"),
            booking_id=booking.id,
            vendor_id=booking.vendor_id,
            breakdown=refund_money.split_fee(self._platform_fee_rate),
            external_payment_id=booking.stripe_payment_id,
            refund_id=refund.refund_id,
            created_at=self._clock.now(),
        )

        async def record_refund() -> None:
            current = await self._booking_repo.get(booking_id)
            if current is None:
                raise NotFoundError("Booking", booking_id)
            if current.refund_id == refund.refund_id:
                # A concurrent request with the same idempotency key already recorded it
                return
            expected_version = current.lock_version
            current.transition_payment_to(target)
            current.refund_id = refund.refund_id
            current.updated_at = self._clock.now()
            async with self._transaction_manager.start():
                await self._booking_repo.save(current, expected_lock_version=expected_version)
                await self._transaction_repo.add_once(ledger_row)

        await retry_on_conflict(record_refund)

        self._logger.info(
            "Booking refunded",
            extra={
                "booking_id": booking_id,
                "refund_id": refund.refund_id,
                "amount": str(refund_amount),
                "payment_status": target.value,
            },
        )
        return RefundDTO(
            booking_id=booking_id,
            refund_id=refund.refund_id,
            amount=refund_amount,
            status=refund.status,
            payment_status=target,
        )

    async def _paid_amount(self, booking: Booking) -> Decimal:
        paid = await self._transaction_repo.find_by_external_payment(
            booking.stripe_payment_id, TransactionStatus.COMPLETED
        )
        return paid.amount if paid else round_to_cents(booking.total_amount)
