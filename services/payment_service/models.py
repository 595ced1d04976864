import enum

from sqlalchemy import Column, DateTime, Enum, Float, String, UniqueConstraint

from shared.config.database import Base


class PaymentMethod(str, enum.Enum):
    UNSPECIFIED = "UNSPECIFIED"
    CASH = "CASH"
    CARD = "CARD"
    E_WALLET = "E_WALLET"
    BANK_TRANSFER = "BANK_TRANSFER"
    QRIS = "QRIS"


class PaymentStatus(str, enum.Enum):
    UNSPECIFIED = "UNSPECIFIED"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
    PENDING = "PENDING"


ORDER_ID_CONSTRAINT = "uq_payments_order_id"


class Payment(Base):
    __tablename__ = "payments"
    # One payment per order; the service's pre-check only gives a nicer error
    __table_args__ = (
        UniqueConstraint("order_id", name=ORDER_ID_CONSTRAINT),
        {"schema": "payment_schema"},
    )

    id = Column(String(36), primary_key=True)
    merchant_id = Column(String, nullable=False, index=True)
    order_id = Column(String, nullable=False)
    amount = Column(Float, nullable=False)
    payment_method = Column(Enum(PaymentMethod, name="payment_method", native_enum=False), nullable=False)
    status = Column(Enum(PaymentStatus, name="payment_status", native_enum=False), nullable=False)
    reference_number = Column(String, nullable=True)
    provider = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)
