from fastapi import APIRouter, Depends, Response, status

from app.api.auth import get_current_user
from app.api.dependencies import get_use_cases
from app.api.schemas.listings import (
    CreateListingRequest,
    ListingResponse,
    UpdateListingRequest,
)
from app.application.interfaces.identity import Identity

router = APIRouter()


@router.post(
    "/listings",
    response_model=ListingResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_listing(
    payload: CreateListingRequest,
    user: Identity = Depends(get_current_user),
    use_cases=Depends(get_use_cases),
):
    return await use_cases["create_listing"].execute(data=payload.to_input(), vendor_id=user.uid)


@router.get("/listings", response_model=list[ListingResponse])
async def list_my_listings(
    user: Identity = Depends(get_current_user),
    use_cases=Depends(get_use_cases),
):
    return await use_cases["list_vendor_listings"].execute(vendor_id=user.uid)


@router.get("/listings/{listing_id}", response_model=ListingResponse)
async def get_listing(listing_id: str, use_cases=Depends(get_use_cases)):
    return await use_cases["get_listing"].execute(listing_id=listing_id)


@router.patch("/listings/{listing_id}", response_model=ListingResponse)
async def update_listing(
    listing_id: str,
    payload: UpdateListingRequest,
    user: Identity = Depends(get_current_user),
    use_cases=Depends(get_use_cases),
):
    return await use_cases["update_listing"].execute(
        listing_id=listing_id,
        patch=payload.to_patch(),
        requester_id=user.uid,
    )


@router.delete("/listings/{listing_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_listing(
    listing_id: str,
    user: Identity = Depends(get_current_user),
    use_cases=Depends(get_use_cases),
) -> Response:
    await use_cases["delete_listing"].execute(listing_id=listing_id, requester_id=user.uid)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
