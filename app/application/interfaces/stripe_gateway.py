from dataclasses import dataclass
from typing import Any


@dataclass
class PaymentIntentResult:
    payment_intent_id: str
    client_secret: str | None
    status: str


@dataclass
class RefundResult:
    refund_id: str
    amount_cents: int
    status: str


class StripeGateway:
    async def create_payment_intent(
        self,
        amount_cents: int,
        application_fee_cents: int,
        currency: str,
        metadata: dict[str, str],
        customer: str | None = None,
    ) -> PaymentIntentResult:
        raise NotImplementedError

    async def create_refund(
        self,
        payment_intent_id: str,
        amount_cents: int | None,
        reason: str,
        idempotency_key: str | None = None,
    ) -> RefundResult:
        """
        amount_cents=None reembolsa el total.

        Dos llamadas con la misma idempotency_key producen un único reembolso.
        """
        raise NotImplementedError

    async def parse_webhook_event(
        self,
        payload: bytes,
        signature_header: str | None,
        webhook_secret: str | None,
    ) -> dict[str, Any]:
        """Verifica la firma y decodifica el evento; lanza InvalidSignatureError."""
        raise NotImplementedError
