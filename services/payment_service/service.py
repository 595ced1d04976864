"""
Payment business rules: creation validation, one-payment-per-order, lookups.

No external processing happens here. A payment is recorded as already
captured (cash, or settled elsewhere), so every new payment is SUCCESS.
"""
import math
import uuid

import structlog
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from shared.observability.metrics import (
    payments_amount,
    payments_created_total,
    payments_rejected_total,
)

from .exceptions import InvalidArgumentError, PaymentAlreadyExistsError, PaymentNotFoundError
from .models import ORDER_ID_CONSTRAINT, Payment, PaymentStatus
from .repository import PaymentRepository
from .schemas import PaymentCreate, PaymentFilter, PaymentList, PaymentRead

logger = structlog.get_logger(__name__)

MAX_PAGE_SIZE = 100

# OFFSET is a signed 64-bit integer in PostgreSQL and SQLite
MAX_OFFSET = 2**63 - 1


def _is_order_id_conflict(error: IntegrityError) -> bool:
    # PostgreSQL names the constraint; SQLite names the column
    message = str(error.orig)
    return ORDER_ID_CONSTRAINT in message or "payments.order_id" in message


class PaymentService:

    def __init__(self, repository: PaymentRepository):
        self.repository = repository

    @staticmethod
    def _validate_create(merchant_id: str, data: PaymentCreate) -> None:
        if not merchant_id:
            raise InvalidArgumentError("merchant_id is required")
        if not data.order_id:
            raise InvalidArgumentError("order_id is required")
        if not math.isfinite(data.amount) or data.amount <= 0:
            raise InvalidArgumentError("amount must be greater than 0")

    async def create_payment(self, merchant_id: str, data: PaymentCreate) -> PaymentRead:
        try:
            self._validate_create(merchant_id, data)
        except InvalidArgumentError:
            payments_rejected_total.labels(reason=InvalidArgumentError.code).inc()
            raise

        existing = await self.repository.get_by_order_id(data.order_id)
        if existing is not None:
            logger.warning("duplicate_payment_attempt", order_id=data.order_id, merchant_id=merchant_id)
            payments_rejected_total.labels(reason=PaymentAlreadyExistsError.code).inc()
            raise PaymentAlreadyExistsError(data.order_id)

        payment = Payment(
            id=str(uuid.uuid4()),
            merchant_id=merchant_id,
            order_id=data.order_id,
            amount=data.amount,
            payment_method=data.payment_method,
            status=PaymentStatus.SUCCESS,
            reference_number=data.reference_number or None,
            provider=data.provider or None,
        )

        try:
            created = await self.repository.create(payment)
        except IntegrityError as e:
            if not _is_order_id_conflict(e):
                logger.error("payment_create_failed", order_id=data.order_id, error=str(e.orig))
                raise
            # Lost the race against a concurrent create for the same order
            logger.warning("duplicate_payment_insert", order_id=data.order_id, merchant_id=merchant_id)
            payments_rejected_total.labels(reason=PaymentAlreadyExistsError.code).inc()
            raise PaymentAlreadyExistsError(data.order_id)
        except SQLAlchemyError as e:
            logger.error("payment_create_failed", order_id=data.order_id, error=str(e))
            raise

        payments_created_total.labels(payment_method=created.payment_method.value).inc()
        payments_amount.observe(created.amount)
        logger.info(
            "payment_created",
            payment_id=created.id,
            order_id=created.order_id,
            merchant_id=merchant_id,
            amount=created.amount,
        )
        return created

    async def get_payment(self, payment_id: str = "", order_id: str = "") -> PaymentRead:
        if payment_id:
            payment = await self.repository.get_by_id(payment_id)
            if payment is None:
                raise PaymentNotFoundError(f"payment not found: {payment_id}")
            return payment

        if order_id:
            payment = await self.repository.get_by_order_id(order_id)
            if payment is None:
                raise PaymentNotFoundError(f"payment not found for order_id: {order_id}")
            return payment

        raise InvalidArgumentError("must provide id or order_id")

    async def list_payments(self, filters: PaymentFilter, page: int, page_size: int) -> PaymentList:
        if page < 1:
            raise InvalidArgumentError("page must be greater than 0")
        if page_size < 1:
            raise InvalidArgumentError("page_size must be greater than 0")
        page_size = min(page_size, MAX_PAGE_SIZE)
        if (page - 1) * page_size > MAX_OFFSET:
            raise InvalidArgumentError("page is too large")

        payments, total = await self.repository.list(
            order_id=filters.order_id,
            payment_method=filters.payment_method,
            status=filters.status,
            page=page,
            page_size=page_size,
        )
        return PaymentList(payments=payments, total=total, page=page, page_size=page_size)
