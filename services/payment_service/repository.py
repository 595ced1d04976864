from datetime import datetime, timezone
from typing import List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Payment, PaymentMethod, PaymentStatus
from .schemas import PaymentRead


class PaymentRepository:
    """Persistence for payments. No business rules; errors propagate as raised."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, payment: Payment) -> PaymentRead:
        now = datetime.now(timezone.utc)
        payment.created_at = now
        payment.updated_at = now

        self.db.add(payment)
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        await self.db.refresh(payment)
        return PaymentRead.model_validate(payment)

    async def get_by_id(self, payment_id: str) -> Optional[PaymentRead]:
        result = await self.db.execute(select(Payment).where(Payment.id == payment_id))
        row = result.scalars().first()
        return PaymentRead.model_validate(row) if row else None

    async def get_by_order_id(self, order_id: str) -> Optional[PaymentRead]:
        result = await self.db.execute(select(Payment).where(Payment.order_id == order_id))
        row = result.scalars().first()
        return PaymentRead.model_validate(row) if row else None

    async def list(
        self,
        order_id: str = "",
        payment_method: PaymentMethod = PaymentMethod.UNSPECIFIED,
        status: PaymentStatus = PaymentStatus.UNSPECIFIED,
        page: int = 1,
        page_size: int = 10,
    ) -> Tuple[List[PaymentRead], int]:
        conditions = []
        if order_id:
            conditions.append(Payment.order_id == order_id)
        if payment_method != PaymentMethod.UNSPECIFIED:
            conditions.append(Payment.payment_method == payment_method)
        if status != PaymentStatus.UNSPECIFIED:
            conditions.append(Payment.status == status)

        # Count and page are separate reads; they may disagree under concurrent writes
        total = await self.db.scalar(
            select(func.count()).select_from(Payment).where(*conditions)
        )

        stmt = (
            select(Payment)
            .where(*conditions)
            .order_by(Payment.created_at.desc(), Payment.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        result = await self.db.execute(stmt)
        payments = [PaymentRead.model_validate(row) for row in result.scalars().all()]
        return payments, total or 0
