from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.db.engine import AsyncSessionLocal
from app.application.interfaces.booking_repo import BookingRepo
from app.application.interfaces.clock import Clock, SystemClock
from app.application.interfaces.id_generator import IdGenerator, RealIdGenerator
from app.application.interfaces.listing_repo import ListingRepo
from app.application.interfaces.stripe_gateway import StripeGateway
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.interfaces.transaction_repo import TransactionRepo
from app.application.use_cases.cancel_booking import CancelBookingUseCase
from app.application.use_cases.check_availability import CheckAvailabilityUseCase
from app.application.use_cases.check_listing_deletable import ListingDeletionGuard
from app.application.use_cases.create_booking import CreateBookingUseCase
from app.application.use_cases.create_payment_request import CreatePaymentRequestUseCase
from app.application.use_cases.get_booking import GetBookingUseCase
from app.application.use_cases.get_vendor_metrics import GetVendorMetricsUseCase
from app.application.use_cases.handle_stripe_webhook import HandleStripeWebhookUseCase
from app.application.use_cases.list_bookings import (
    ListBookingsInRangeUseCase,
    ListCustomerBookingsUseCase,
    ListUpcomingBookingsUseCase,
    ListVendorBookingsUseCase,
)
from app.application.use_cases.list_transactions import ListTransactionsUseCase
from app.application.use_cases.manage_listings import (
    CreateListingUseCase,
    DeleteListingUseCase,
    GetListingUseCase,
    ListVendorListingsUseCase,
    UpdateListingUseCase,
)
from app.application.use_cases.refund_booking import RefundBookingUseCase
from app.application.use_cases.update_booking import UpdateBookingUseCase
from app.config import Settings, get_settings
from app.infrastructure.db.repositories.booking_repo_sql import BookingRepoSQL
from app.infrastructure.db.repositories.listing_repo_sql import ListingRepoSQL
from app.infrastructure.db.repositories.transaction_repo_sql import TransactionRepoSQL
from app.infrastructure.db.transaction_manager import SQLAlchemyTransactionManager
from app.infrastructure.gateways.stripe_gateway_real import StripeGatewayReal
from app.infrastructure.in_memory.booking_repo import InMemoryBookingRepo
from app.infrastructure.in_memory.listing_repo import InMemoryListingRepo
from app.infrastructure.in_memory.stripe_gateway import StubStripeGateway
from app.infrastructure.in_memory.transaction_manager import NoopTransactionManager
from app.infrastructure.in_memory.transaction_repo import InMemoryTransactionRepo


async def get_session(settings: Settings = Depends(get_settings)) -> AsyncSession | None:
    if settings.use_in_memory:
        yield None
        return
    async with AsyncSessionLocal() as session:
        yield session


@lru_cache(maxsize=1)
def _in_memory_bundle():
    return {
        "listing_repo": InMemoryListingRepo(),
        "booking_repo": InMemoryBookingRepo(),
        "transaction_repo": InMemoryTransactionRepo(),
        "stripe_gateway": StubStripeGateway(),
        "tx_manager": NoopTransactionManager(),
        "clock": SystemClock(),
        "id_generator": RealIdGenerator(),
    }


def build_use_cases(
    settings: Settings,
    listing_repo: ListingRepo,
    booking_repo: BookingRepo,
    transaction_repo: TransactionRepo,
    stripe_gateway: StripeGateway,
    tx_manager: TransactionManager,
    clock: Clock,
    id_generator: IdGenerator,
) -> dict:
    availability = CheckAvailabilityUseCase(booking_repo=booking_repo)
    deletion_guard = ListingDeletionGuard(booking_repo=booking_repo)
    return {
        # Listings
        "create_listing": CreateListingUseCase(
            listing_repo=listing_repo,
            transaction_manager=tx_manager,
            id_generator=id_generator,
            clock=clock,
        ),
        "update_listing": UpdateListingUseCase(
            listing_repo=listing_repo, transaction_manager=tx_manager, clock=clock
        ),
        "delete_listing": DeleteListingUseCase(
            listing_repo=listing_repo,
            deletion_guard=deletion_guard,
            transaction_manager=tx_manager,
        ),
        "get_listing": GetListingUseCase(listing_repo=listing_repo),
        "list_vendor_listings": ListVendorListingsUseCase(listing_repo=listing_repo),
        # Bookings
        "check_availability": availability,
        "create_booking": CreateBookingUseCase(
            listing_repo=listing_repo,
            booking_repo=booking_repo,
            availability=availability,
            transaction_manager=tx_manager,
            id_generator=id_generator,
            clock=clock,
        ),
        "update_booking": UpdateBookingUseCase(
            booking_repo=booking_repo,
            listing_repo=listing_repo,
            availability=availability,
            transaction_manager=tx_manager,
            clock=clock,
        ),
        "cancel_booking": CancelBookingUseCase(
            booking_repo=booking_repo, transaction_manager=tx_manager, clock=clock
        ),
        "get_booking": GetBookingUseCase(booking_repo=booking_repo),
        "list_vendor_bookings": ListVendorBookingsUseCase(booking_repo=booking_repo),
        "list_customer_bookings": ListCustomerBookingsUseCase(booking_repo=booking_repo),
        "list_upcoming_bookings": ListUpcomingBookingsUseCase(booking_repo=booking_repo, clock=clock),
        "list_bookings_in_range": ListBookingsInRangeUseCase(booking_repo=booking_repo),
        # Payments
        "create_payment_request": CreatePaymentRequestUseCase(
            booking_repo=booking_repo,
            stripe_gateway=stripe_gateway,
            transaction_manager=tx_manager,
            clock=clock,
            currency=settings.currency,
            platform_fee_rate=settings.platform_fee_rate,
        ),
        "handle_webhook": HandleStripeWebhookUseCase(
            booking_repo=booking_repo,
            transaction_repo=transaction_repo,
            stripe_gateway=stripe_gateway,
            transaction_manager=tx_manager,
            id_generator=id_generator,
            clock=clock,
            stripe_webhook_secret=settings.stripe_webhook_secret,
            platform_fee_rate=settings.platform_fee_rate,
            currency=settings.currency,
        ),
        "refund_booking": RefundBookingUseCase(
            booking_repo=booking_repo,
            transaction_repo=transaction_repo,
            stripe_gateway=stripe_gateway,
            transaction_manager=tx_manager,
            id_generator=id_generator,
            clock=clock,
            currency=settings.currency,
            platform_fee_rate=settings.platform_fee_rate,
        ),
        "list_transactions": ListTransactionsUseCase(transaction_repo=transaction_repo),
        # Metrics
        "vendor_metrics": GetVendorMetricsUseCase(
            booking_repo=booking_repo, transaction_repo=transaction_repo, clock=clock
        ),
    }


def get_use_cases(
    settings: Settings = Depends(get_settings),
    session: AsyncSession | None = Depends(get_session),
):
    if settings.use_in_memory:
        return build_use_cases(settings=settings, **_in_memory_bundle())

    if not session:
        raise RuntimeError("DB session not available")

    return build_use_cases(
        settings=settings,
        listing_repo=ListingRepoSQL(session),
        booking_repo=BookingRepoSQL(session),
        transaction_repo=TransactionRepoSQL(session),
        stripe_gateway=StripeGatewayReal(api_key=settings.stripe_api_key),
        tx_manager=SQLAlchemyTransactionManager(session),
        clock=SystemClock(),
        id_generator=RealIdGenerator(),
    )
