"""
Payment endpoints. Everything except /health requires X-Internal-API-Key;
creation additionally requires the gateway-resolved X-Merchant-ID.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from shared.security.dependencies import get_merchant_id, verify_internal_api_key

from .models import PaymentMethod, PaymentStatus
from .repository import PaymentRepository
from .schemas import PaymentCreate, PaymentFilter, PaymentList, PaymentRead
from .service import PaymentService

router = APIRouter(dependencies=[Depends(verify_internal_api_key)])
public_router = APIRouter()  # For any public endpoints (e.g. health check)


def get_payment_service(db: AsyncSession = Depends(get_db)) -> PaymentService:
    return PaymentService(PaymentRepository(db))


@public_router.get("/health", include_in_schema=False)
async def health_check():
    return {"service": "payment", "status": "running"}


@router.post("/", response_model=PaymentRead, status_code=201)
async def create_payment(
    payment: PaymentCreate,
    merchant_id: str = Depends(get_merchant_id),
    service: PaymentService = Depends(get_payment_service),
):
    return await service.create_payment(merchant_id, payment)


@router.get("/lookup", response_model=PaymentRead)
async def get_payment(
    id: str = Query(default=""),
    order_id: str = Query(default=""),
    service: PaymentService = Depends(get_payment_service),
):
    return await service.get_payment(payment_id=id, order_id=order_id)


@router.get("/", response_model=PaymentList)
async def list_payments(
    order_id: str = Query(default=""),
    payment_method: PaymentMethod = Query(default=PaymentMethod.UNSPECIFIED),
    status: PaymentStatus = Query(default=PaymentStatus.UNSPECIFIED),
    page: int = Query(default=1),
    page_size: int = Query(default=10),
    service: PaymentService = Depends(get_payment_service),
):
    filters = PaymentFilter(order_id=order_id, payment_method=payment_method, status=status)
    return await service.list_payments(filters, page, page_size)
