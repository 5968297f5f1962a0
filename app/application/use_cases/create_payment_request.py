import logging
from decimal import Decimal

from app.application.dtos.payment_dto import PaymentRequestDTO
from app.application.interfaces.booking_repo import BookingRepo
from app.application.interfaces.clock import Clock
from app.application.interfaces.stripe_gateway import StripeGateway
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.retry import retry_on_conflict
from app.domain.entities.booking import BookingPaymentStatus
from app.domain.errors import (
    AuthorizationError,
    InvalidStatusTransitionError,
    NotFoundError,
    ValidationError,
)
from app.domain.value_objects.money import Money


class CreatePaymentRequestUseCase:
    """
    Opens a Stripe PaymentIntent for a booking.

    Guarding against several open intents for one booking is the caller's job.
    """

    def __init__(
        self,
        booking_repo: BookingRepo,
        stripe_gateway: StripeGateway,
        transaction_manager: TransactionManager,
        clock: Clock,
        currency: str,
        platform_fee_rate: Decimal,
    ) -> None:
        self._booking_repo = booking_repo
        self._stripe_gateway = stripe_gateway
        self._transaction_manager = transaction_manager
        self._clock = clock
        self._currency = currency
        self._platform_fee_rate = platform_fee_rate
        self._logger = logging.getLogger(__name__)

    async def execute(
        self,
        booking_id: str,
        amount: Decimal,
        requester_id: str,
        customer_ref: str | None = None,
    ) -> PaymentRequestDTO:
        booking = await self._booking_repo.get(booking_id)
        if booking is None:
            raise NotFoundError("Booking", booking_id)
        if not booking.is_party(requester_id):
            raise AuthorizationError(requester_id, "pay booking")
        if not booking.can_transition_payment_to(BookingPaymentStatus.PENDING):
            raise InvalidStatusTransitionError(
                "payment", booking.payment_status.value, BookingPaymentStatus.PENDING.value
            )

        try:
            charge = Money(amount=amount, currency_code=self._currency)
        except ValueError as exc:
            raise ValidationError("amount", str(exc)) from exc
        if charge.is_zero():
            raise ValidationError("amount", "must be greater than 0")

        breakdown = charge.split_fee(self._platform_fee_rate)
        fee = Money(amount=breakdown.fee, currency_code=self._currency)

        metadata = {"booking_id": booking.id, "vendor_id": booking.vendor_id}
        if customer_ref:
            metadata["customer_ref"] = customer_ref

        intent = await self._stripe_gateway.create_payment_intent(
            amount_cents=charge.to_cents(),
            application_fee_cents=fee.to_cents(),
            currency=self._currency.lower(),
            metadata=metadata,
            customer=customer_ref,
        )

        async def store_intent() -> None:
            current = await self._booking_repo.get(booking_id)
            if current is None:
                raise NotFoundError("Booking", booking_id)
            expected_version = current.lock_version
            current.transition_payment_to(BookingPaymentStatus.PENDING)
            current.stripe_payment_intent_id = intent.payment_intent_id
            current.updated_at = self._clock.now()
            async with self._transaction_manager.start():
                await self._booking_repo.save(current, expected_lock_version=expected_version)

        await retry_on_conflict(store_intent)

        self._logger.info(
            "Payment intent created",
            extra={
                "booking_id": booking.id,
                "payment_intent_id": intent.payment_intent_id,
                "amount_cents": charge.to_cents(),
                "fee_cents": fee.to_cents(),
            },
        )
        return PaymentRequestDTO(
            booking_id=booking.id,
            payment_intent_id=intent.payment_intent_id,
            client_secret=intent.client_secret,
            amount=charge.amount,
            fee=fee.amount,
            currency=self._currency.lower(),
            status=intent.status,
        )
