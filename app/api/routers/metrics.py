from fastapi import APIRouter, Depends

from app.api.auth import get_current_user
from app.api.dependencies import get_use_cases
from app.api.schemas.metrics import VendorMetricsResponse
from app.application.interfaces.identity import Identity

router = APIRouter()


@router.get("/metrics/vendor", response_model=VendorMetricsResponse)
async def vendor_metrics(
    user: Identity = Depends(get_current_user),
    use_cases=Depends(get_use_cases),
):
    return await use_cases["vendor_metrics"].execute(vendor_id=user.uid)
