import logging
from decimal import Decimal

from app.api.schemas.payments import PaymentIntentObject, StripeWebhookEnvelope
from app.application.dtos.payment_dto import WebhookAction, WebhookOutcome
from app.application.interfaces.booking_repo import BookingRepo
from app.application.interfaces.clock import Clock
from app.application.interfaces.id_generator import IdGenerator
from app.application.interfaces.stripe_gateway import StripeGateway
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.interfaces.transaction_repo import TransactionRepo
from app.application.retry import retry_on_conflict
from app.domain.entities.booking import BookingPaymentStatus
from app.domain.entities.transaction import Transaction
from app.domain.errors import DomainError, InvalidSignatureError
from app.domain.value_objects.money import Money

PAYMENT_SUCCEEDED = "payment_intent.succeeded"
PAYMENT_FAILED = "payment_intent.payment_failed"


class HandleStripeWebhookUseCase:
    """
    Reconciles Stripe events with booking payment state.

    Events may arrive duplicated or out of order. Ledger rows are unique per
    external payment id and status changes go through the payment state
    machine, so a late failure never overrides a recorded success.
    """

    def __init__(
        self,
        booking_repo: BookingRepo,
        transaction_repo: TransactionRepo,
        stripe_gateway: StripeGateway,
        transaction_manager: TransactionManager,
        id_generator: IdGenerator,
        clock: Clock,
        stripe_webhook_secret: str | None,
        platform_fee_rate: Decimal,
        currency: str,
    ) -> None:
        self._booking_repo = booking_repo
        self._transaction_repo = transaction_repo
        self._stripe_gateway = stripe_gateway
        self._transaction_manager = transaction_manager
        self._id_generator = id_generator
        self._clock = clock
        self._stripe_webhook_secret = stripe_webhook_secret
        self._platform_fee_rate = platform_fee_rate
        self._currency = currency
        self._logger = logging.getLogger(__name__)

    async def execute(self, raw_body: bytes, signature: str | None) -> WebhookOutcome:
        if not raw_body:
            raise InvalidSignatureError("Empty webhook body")

        event_dict = await self._stripe_gateway.parse_webhook_event(
            payload=raw_body,
            signature_header=signature,
            webhook_secret=self._stripe_webhook_secret,
        )
        try:
            event = StripeWebhookEnvelope.model_validate(event_dict)
        except ValueError as exc:
            raise InvalidSignatureError("Invalid event payload") from exc

        if event.type == PAYMENT_SUCCEEDED:
            handler = self._handle_succeeded
        elif event.type == PAYMENT_FAILED:
            handler = self._handle_failed
        else:
            self._logger.info(
                "Stripe webhook ignored: unhandled event type",
                extra={"stripe_event_id": event.id, "event_type": event.type},
            )
            return WebhookOutcome(event.id, event.type, WebhookAction.IGNORED)

        try:
            intent = PaymentIntentObject.model_validate(event.data_object())
        except ValueError:
            self._logger.warning(
                "Stripe webhook without a usable payment intent",
                extra={"stripe_event_id": event.id, "event_type": event.type},
            )
            return WebhookOutcome(event.id, event.type, WebhookAction.IGNORED)

        booking_id = intent.metadata.get("booking_id")
        try:
            return await handler(event, intent, booking_id)
        except DomainError as exc:
            self._logger.error(
                "Stripe webhook could not be applied",
                exc_info=exc,
                extra={
                    "stripe_event_id": event.id,
                    "payment_intent_id": intent.id,
                    "booking_id": booking_id,
                    "error_code": exc.code,
                },
            )
            return WebhookOutcome(event.id, event.type, WebhookAction.FAILED, booking_id)

    async def _handle_succeeded(
        self,
        event: StripeWebhookEnvelope,
        intent: PaymentIntentObject,
        booking_id: str | None,
    ) -> WebhookOutcome:
        booking = await self._booking_repo.get(booking_id) if booking_id else None
        if booking is None:
            self._logger.warning(
                "Stripe webhook for unknown booking",
                extra={"stripe_event_id": event.id, "payment_intent_id": intent.id, "booking_id": booking_id},
            )
            return WebhookOutcome(event.id, event.type, WebhookAction.BOOKING_MISSING, booking_id)

        charged = Money.from_cents(intent.charged_cents, self._currency)
        ledger_row = Transaction.completed(
            transaction_id=self._id_generator.new_id("txn"),
            booking_id=booking.id,
            vendor_id=booking.vendor_id,
            breakdown=charged.split_fee(self._platform_fee_rate),
            external_payment_id=intent.id,
            created_at=self._clock.now(),
        )
        async with self._transaction_manager.start():
            _, created = await self._transaction_repo.add_once(ledger_row)

        action = await self._apply_payment_status(
            booking.id, BookingPaymentStatus.PAID, payment_id=intent.id
        )
        if created and action == WebhookAction.DUPLICATE:
            # Another intent for an already paid booking still adds to the ledger
            action = WebhookAction.APPLIED

        log = self._logger.warning if action == WebhookAction.STALE else self._logger.info
        log(
            "Stripe webhook processed: payment succeeded",
            extra={
                "stripe_event_id": event.id,
                "payment_intent_id": intent.id,
                "booking_id": booking.id,
                "ledger_row_created": created,
                "action": action.value,
            },
        )
        return WebhookOutcome(event.id, event.type, action, booking.id)

    async def _handle_failed(
        self,
        event: StripeWebhookEnvelope,
        intent: PaymentIntentObject,
        booking_id: str | None,
    ) -> WebhookOutcome:
        if not booking_id:
            self._logger.warning(
                "Stripe webhook for unknown booking",
                extra={"stripe_event_id": event.id, "payment_intent_id": intent.id},
            )
            return WebhookOutcome(event.id, event.type, WebhookAction.BOOKING_MISSING)

        action = await self._apply_payment_status(booking_id, BookingPaymentStatus.FAILED)
        self._logger.warning(
            "Stripe webhook processed: payment failed",
            extra={
                "stripe_event_id": event.id,
                "payment_intent_id": intent.id,
                "booking_id": booking_id,
                "action": action.value,
            },
        )
        return WebhookOutcome(event.id, event.type, action, booking_id)

    async def _apply_payment_status(
        self,
        booking_id: str,
        target: BookingPaymentStatus,
        payment_id: str | None = None,
    ) -> WebhookAction:
        async def attempt() -> WebhookAction:
            booking = await self._booking_repo.get(booking_id)
            if booking is None:
                return WebhookAction.BOOKING_MISSING
            if booking.payment_status == target:
                return WebhookAction.DUPLICATE
            if not booking.can_transition_payment_to(target):
                return WebhookAction.STALE

            expected_version = booking.lock_version
            booking.transition_payment_to(target)
            if payment_id:
                booking.stripe_payment_id = payment_id
            booking.updated_at = self._clock.now()
            async with self._transaction_manager.start():
                await self._booking_repo.save(booking, expected_lock_version=expected_version)
            return WebhookAction.APPLIED

        return await retry_on_conflict(attempt)
