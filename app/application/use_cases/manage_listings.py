import logging
from decimal import Decimal
from typing import Sequence

from app.application.dtos.listing_dto import ListingInput, ListingPatch
from app.application.interfaces.clock import Clock
from app.application.interfaces.id_generator import IdGenerator
from app.application.interfaces.listing_repo import ListingRepo
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.use_cases.check_listing_deletable import ListingDeletionGuard
from app.domain.entities.listing import Listing, ListingStatus
from app.domain.errors import AuthorizationError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def _validate_price(price: Decimal) -> None:
    if price < 0:
        raise ValidationError("price", "must be >= 0")


async def _get_owned_listing(repo: ListingRepo, listing_id: str, requester_id: str, operation: str) -> Listing:
    listing = await repo.get(listing_id)
    if listing is None:
        raise NotFoundError("Listing", listing_id)
    if not listing.is_owned_by(requester_id):
        raise AuthorizationError(requester_id, operation)
    return listing


class CreateListingUseCase:
    def __init__(
        self,
        listing_repo: ListingRepo,
        transaction_manager: TransactionManager,
        id_generator: IdGenerator,
        clock: Clock,
    ) -> None:
        self._listing_repo = listing_repo
        self._transaction_manager = transaction_manager
        self._id_generator = id_generator
        self._clock = clock

    async def execute(self, data: ListingInput, vendor_id: str) -> Listing:
        _validate_price(data.price)
        now = self._clock.now()
        listing = Listing(
            id=self._id_generator.new_id("lst"),
            vendor_id=vendor_id,
            title=data.title,
            description=data.description,
            price=data.price,
            category=data.category,
            status=ListingStatus.PENDING,
            images=list(data.images),
            documents=list(data.documents),
            created_at=now,
            updated_at=now,
        )
        async with self._transaction_manager.start():
            created = await self._listing_repo.create(listing)
        logger.info("Listing created", extra={"listing_id": created.id, "vendor_id": vendor_id})
        return created


class UpdateListingUseCase:
    def __init__(
        self,
        listing_repo: ListingRepo,
        transaction_manager: TransactionManager,
        clock: Clock,
    ) -> None:
        self._listing_repo = listing_repo
        self._transaction_manager = transaction_manager
        self._clock = clock

    async def execute(self, listing_id: str, patch: ListingPatch, requester_id: str) -> Listing:
        listing = await _get_owned_listing(self._listing_repo, listing_id, requester_id, "update listing")
        changes = patch.provided()
        if "price" in changes:
            _validate_price(changes["price"])
        for name, value in changes.items():
            setattr(listing, name, list(value) if isinstance(value, list) else value)
        listing.updated_at = self._clock.now()
        async with self._transaction_manager.start():
            saved = await self._listing_repo.save(listing)
        logger.info(
            "Listing updated",
            extra={"listing_id": listing_id, "fields": sorted(changes)},
        )
        return saved


class DeleteListingUseCase:
    def __init__(
        self,
        listing_repo: ListingRepo,
        deletion_guard: ListingDeletionGuard,
        transaction_manager: TransactionManager,
    ) -> None:
        self._listing_repo = listing_repo
        self._deletion_guard = deletion_guard
        self._transaction_manager = transaction_manager

    async def execute(self, listing_id: str, requester_id: str) -> None:
        await _get_owned_listing(self._listing_repo, listing_id, requester_id, "delete listing")
        await self._deletion_guard.execute(listing_id)
        async with self._transaction_manager.start():
            await self._listing_repo.delete(listing_id)
        logger.info("Listing deleted", extra={"listing_id": listing_id, "vendor_id": requester_id})


class GetListingUseCase:
    def __init__(self, listing_repo: ListingRepo) -> None:
        self._listing_repo = listing_repo

    async def execute(self, listing_id: str) -> Listing:
        listing = await self._listing_repo.get(listing_id)
        if listing is None:
            raise NotFoundError("Listing", listing_id)
        return listing


class ListVendorListingsUseCase:
    def __init__(self, listing_repo: ListingRepo) -> None:
        self._listing_repo = listing_repo

    async def execute(self, vendor_id: str) -> Sequence[Listing]:
        return await self._listing_repo.list_by_vendor(vendor_id)
