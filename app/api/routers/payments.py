import logging

from fastapi import APIRouter, Depends, Request, status

from app.api.auth import get_current_user
from app.api.dependencies import get_use_cases
from app.api.schemas.payments import (
    CreatePaymentIntentRequest,
    PaymentIntentResponse,
    RefundRequest,
    RefundResponse,
    TransactionResponse,
    WebhookAck,
)
from app.application.interfaces.identity import Identity

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/payments/intents",
    response_model=PaymentIntentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_payment_intent(
    payload: CreatePaymentIntentRequest,
    user: Identity = Depends(get_current_user),
    use_cases=Depends(get_use_cases),
) -> PaymentIntentResponse:
    result = await use_cases["create_payment_request"].execute(
        booking_id=payload.booking_id,
        amount=payload.amount,
        requester_id=user.uid,
        customer_ref=payload.customer_id,
    )
    return PaymentIntentResponse(
        booking_id=result.booking_id,
        payment_intent_id=result.payment_intent_id,
        client_secret=result.client_secret,
        amount=result.amount,
        fee=result.fee,
        currency=result.currency,
        status=result.status,
    )


@router.post("/payments/refunds", response_model=RefundResponse, status_code=status.HTTP_200_OK)
async def refund_booking(
    payload: RefundRequest,
    user: Identity = Depends(get_current_user),
    use_cases=Depends(get_use_cases),
) -> RefundResponse:
    result = await use_cases["refund_booking"].execute(
        booking_id=payload.booking_id,
        requester_id=user.uid,
        amount=payload.amount,
        reason=payload.reason,
    )
    return RefundResponse(
        booking_id=result.booking_id,
        refund_id=result.refund_id,
        amount=result.amount,
        status=result.status,
        payment_status=result.payment_status,
    )


@router.get("/payments/transactions", response_model=list[TransactionResponse])
async def list_transactions(
    user: Identity = Depends(get_current_user),
    use_cases=Depends(get_use_cases),
):
    return await use_cases["list_transactions"].execute(vendor_id=user.uid)


@router.post("/webhooks/stripe", response_model=WebhookAck, status_code=status.HTTP_200_OK)
async def stripe_webhook(
    request: Request,
    use_cases=Depends(get_use_cases),
) -> WebhookAck:
    raw_body = await request.body()
    signature = request.headers.get("Stripe-Signature")
    outcome = await use_cases["handle_webhook"].execute(raw_body=raw_body, signature=signature)
    logger.info(
        "Stripe webhook acknowledged",
        extra={
            "event_id": outcome.event_id,
            "event_type": outcome.event_type,
            "action": outcome.action.value,
            "booking_id": outcome.booking_id,
        },
    )
    return WebhookAck(received=True, action=outcome.action.value)
