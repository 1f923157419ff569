from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from shared.security import require_admin

from .schemas import PaymentResponse
from .service import PaymentService

# Back-office only: payments are created by the booking and order flows
router = APIRouter(dependencies=[Depends(require_admin)])
public_router = APIRouter()

@public_router.get("/health", include_in_schema=False)
async def health_check():
    return {"service": "payment", "status": "running"}


@router.get("/{gateway_order_id}", response_model=PaymentResponse)
async def get_payment(gateway_order_id: str, db: AsyncSession = Depends(get_db)):
    return await PaymentService.get_by_gateway_order(db, gateway_order_id)
