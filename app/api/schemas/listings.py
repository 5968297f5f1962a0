from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, condecimal, constr

from app.application.dtos.listing_dto import ListingInput, ListingPatch
from app.domain.entities.listing import ListingStatus

Money = condecimal(max_digits=12, decimal_places=2, ge=0)


class CreateListingRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: constr(strip_whitespace=True, min_length=1, max_length=200)
    price: Money
    description: str = ""
    category: str | None = None
    images: list[str] = Field(default_factory=list)
    documents: list[str] = Field(default_factory=list)

    def to_input(self) -> ListingInput:
        return ListingInput(
            title=self.title,
            price=self.price,
            description=self.description,
            category=self.category,
            images=list(self.images),
            documents=list(self.documents),
        )


class UpdateListingRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: constr(strip_whitespace=True, min_length=1, max_length=200) | None = None
    description: str | None = None
    price: Money | None = None
    category: str | None = None
    status: ListingStatus | None = None
    images: list[str] | None = None
    documents: list[str] | None = None

    def to_patch(self) -> ListingPatch:
        return ListingPatch(**self.model_dump(exclude_none=True))


class ListingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    vendor_id: str
    title: str
    price: Decimal
    description: str
    category: str | None = None
    status: ListingStatus
    images: list[str]
    documents: list[str]
    created_at: datetime | None = None
    updated_at: datetime | None = None
