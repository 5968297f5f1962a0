from uuid import uuid4

from app.application.interfaces.stripe_gateway import (
    PaymentIntentResult,
    RefundResult,
    StripeGateway,
)
from app.domain.errors import ExternalProcessorError, InvalidSignatureError
from app.infrastructure.gateways.stripe_gateway_real import construct_webhook_event


class StubStripeGateway(StripeGateway):
    """
    In-memory stand-in for Stripe.

    Records every intent and refund it creates. Refunds honour idempotency
    keys like Stripe does. Webhooks go through the same stripe SDK signature
    check as the real gateway, so an unsigned event is always rejected.
    """

    def __init__(self) -> None:
        self.intents: dict[str, dict] = {}
        self.refunds: dict[str, dict] = {}
        self.refunds_by_key: dict[str, RefundResult] = {}
        self.fail_with: str | None = None

    async def create_payment_intent(
        self,
        amount_cents: int,
        application_fee_cents: int,
        currency: str,
        metadata: dict[str, str],
        customer: str | None = None,
    ) -> PaymentIntentResult:
        self._raise_if_failing("create_payment_intent")
        intent_id = f"pi_{uuid4().hex[:14]}"
        self.intents[intent_id] = {
            "amount": amount_cents,
            "application_fee_amount": application_fee_cents,
            "currency": currency,
            "metadata": dict(metadata),
            "customer": customer,
        }
        return PaymentIntentResult(
            payment_intent_id=intent_id,
            client_secret=f"{intent_id}_secret_{uuid4().hex[:8]}",
            status="requires_payment_method",
        )

    async def create_refund(
        self,
        payment_intent_id: str,
        amount_cents: int | None,
        reason: str,
        idempotency_key: str | None = None,
    ) -> RefundResult:
        self._raise_if_failing("create_refund")
        if idempotency_key and idempotency_key in self.refunds_by_key:
            return self.refunds_by_key[idempotency_key]

        refund_id = f"re_{uuid4().hex[:14]}"
        if amount_cents is None:
            amount_cents = self.intents.get(payment_intent_id, {}).get("amount", 0)
        self.refunds[refund_id] = {
            "payment_intent": payment_intent_id,
            "amount": amount_cents,
            "reason": reason,
            "idempotency_key": idempotency_key,
        }
        result = RefundResult(refund_id=refund_id, amount_cents=amount_cents, status="succeeded")
        if idempotency_key:
            self.refunds_by_key[idempotency_key] = result
        return result

    async def parse_webhook_event(
        self,
        payload: bytes,
        signature_header: str | None,
        webhook_secret: str | None,
    ) -> dict:
        if not payload:
            raise InvalidSignatureError("Empty webhook payload")
        return construct_webhook_event(payload, signature_header, webhook_secret)

    def _raise_if_failing(self, operation: str) -> None:
        if self.fail_with:
            raise ExternalProcessorError(operation, self.fail_with)
