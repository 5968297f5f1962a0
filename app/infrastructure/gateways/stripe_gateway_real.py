import asyncio
import json
import logging

import stripe

from app.application.interfaces.stripe_gateway import (
    PaymentIntentResult,
    RefundResult,
    StripeGateway,
)
from app.domain.errors import ExternalProcessorError, InvalidSignatureError
from app.infrastructure.circuit_breaker import CircuitBreakerError, stripe_breaker

logger = logging.getLogger(__name__)


def construct_webhook_event(
    payload: bytes,
    signature_header: str | None,
    webhook_secret: str | None,
) -> dict:
    """
    Verify a Stripe-Signature header with the stripe SDK and decode the event.

    Fails closed: a missing secret or header is an invalid signature.

    Raises:
        InvalidSignatureError: secret, header, signature or payload invalid
    """
    if not webhook_secret:
        raise InvalidSignatureError("Stripe webhook secret is not configured")
    if not signature_header:
        raise InvalidSignatureError("Missing Stripe-Signature header")
    try:
        body = payload.decode()
        stripe.Webhook.construct_event(
            payload=body,
            sig_header=signature_header,
            secret=webhook_secret,
        )
    except stripe.SignatureVerificationError as exc:
        raise InvalidSignatureError("Invalid Stripe signature") from exc
    except ValueError as exc:
        raise InvalidSignatureError("Invalid Stripe webhook payload") from exc

    event = json.loads(body)
    if not isinstance(event, dict):
        raise InvalidSignatureError("Invalid Stripe webhook payload")
    return event


class StripeGatewayReal(StripeGateway):
    def __init__(self, api_key: str | None, max_network_retries: int = 2) -> None:
        self._api_key = api_key
        # The SDK retries transient network failures itself; the core does not retry on top
        stripe.max_network_retries = max_network_retries

    async def create_payment_intent(
        self,
        amount_cents: int,
        application_fee_cents: int,
        currency: str,
        metadata: dict[str, str],
        customer: str | None = None,
    ) -> PaymentIntentResult:
        """
        Create a PaymentIntent, protected by the Stripe circuit breaker.

        Raises:
            ExternalProcessorError: circuit open or Stripe rejected the call
        """
        params = {
            "amount": amount_cents,
            "currency": currency.lower(),
            "application_fee_amount": application_fee_cents,
            "metadata": metadata,
            "automatic_payment_methods": {"enabled": True},
        }
        if customer:
            params["customer"] = customer

        intent = await self._call("create_payment_intent", stripe.PaymentIntent.create, **params)
        return PaymentIntentResult(
            payment_intent_id=intent.id,
            client_secret=intent.client_secret,
            status=intent.status,
        )

    async def create_refund(
        self,
        payment_intent_id: str,
        amount_cents: int | None,
        reason: str,
        idempotency_key: str | None = None,
    ) -> RefundResult:
        params = {"payment_intent": payment_intent_id, "reason": reason}
        if amount_cents is not None:
            params["amount"] = amount_cents
        if idempotency_key:
            params["idempotency_key"] = idempotency_key

        refund = await self._call("create_refund", stripe.Refund.create, **params)
        return RefundResult(refund_id=refund.id, amount_cents=refund.amount, status=refund.status)

    async def parse_webhook_event(
        self,
        payload: bytes,
        signature_header: str | None,
        webhook_secret: str | None,
    ) -> dict:
        return construct_webhook_event(payload, signature_header, webhook_secret)

    async def _call(self, operation: str, func, **params):
        try:
            # stripe has no async client; keep the blocking call off the event loop
            return await asyncio.to_thread(
                stripe_breaker.call, func, api_key=self._api_key, **params
            )
        except CircuitBreakerError as e:
            logger.error(
                "Stripe circuit breaker is open - service unavailable",
                extra={"operation": operation, "circuit_state": str(e)},
            )
            raise ExternalProcessorError(operation, "circuit breaker open") from e
        except stripe.StripeError as e:
            logger.error(
                "Stripe API error",
                exc_info=e,
                extra={"operation": operation, "stripe_code": getattr(e, "code", None)},
            )
            raise ExternalProcessorError(operation, getattr(e, "user_message", None) or str(e)) from e
