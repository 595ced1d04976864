"""Repository tests against an in-memory SQLite database."""
import uuid
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import IntegrityError

from services.payment_service.models import Payment, PaymentMethod, PaymentStatus
from services.payment_service.repository import PaymentRepository


def _payment(order_id: str, **overrides) -> Payment:
    fields = {
        "id": str(uuid.uuid4()),
        "merchant_id": "merchant-1",
        "order_id": order_id,
        "amount": 10.0,
        "payment_method": PaymentMethod.CASH,
        "status": PaymentStatus.SUCCESS,
    }
    fields.update(overrides)
    return Payment(**fields)


async def _seed(db_session, rows):
    """Insert rows with explicit timestamps so ordering is deterministic."""
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    for i, row in enumerate(rows):
        row.created_at = row.updated_at = base + timedelta(minutes=i)
        db_session.add(row)
    await db_session.commit()


@pytest.mark.asyncio
async def test_create_sets_timestamps_and_maps_nulls(db_session):
    repo = PaymentRepository(db_session)

    created = await repo.create(_payment("ORD-1", reference_number=None, provider=None))

    assert created.created_at is not None
    assert created.created_at == created.updated_at
    assert created.reference_number == ""
    assert created.provider == ""


@pytest.mark.asyncio
async def test_create_keeps_optional_values(db_session):
    repo = PaymentRepository(db_session)

    created = await repo.create(_payment("ORD-1", reference_number="REF-1", provider="midtrans"))
    fetched = await repo.get_by_id(created.id)

    assert fetched == created
    assert fetched.reference_number == "REF-1"
    assert fetched.provider == "midtrans"


@pytest.mark.asyncio
async def test_unique_order_id_is_enforced(db_session):
    repo = PaymentRepository(db_session)
    await repo.create(_payment("ORD-1"))

    with pytest.raises(IntegrityError):
        await repo.create(_payment("ORD-1"))

    # Session is usable again after the failed insert
    assert await repo.get_by_order_id("ORD-1") is not None


@pytest.mark.asyncio
async def test_lookups_return_none_when_absent(db_session):
    repo = PaymentRepository(db_session)

    assert await repo.get_by_id("missing") is None
    assert await repo.get_by_order_id("missing") is None


@pytest.mark.asyncio
async def test_get_by_order_id(db_session):
    repo = PaymentRepository(db_session)
    created = await repo.create(_payment("ORD-9", amount=99.5))

    fetched = await repo.get_by_order_id("ORD-9")

    assert fetched.id == created.id
    assert fetched.amount == 99.5


@pytest.mark.asyncio
async def test_list_without_filters_counts_everything(db_session):
    await _seed(db_session, [_payment(f"ORD-{i}") for i in range(5)])
    repo = PaymentRepository(db_session)

    payments, total = await repo.list(page=1, page_size=2)

    assert total == 5
    assert len(payments) == 2


@pytest.mark.asyncio
async def test_list_orders_newest_first_and_paginates(db_session):
    await _seed(db_session, [_payment(f"ORD-{i}") for i in range(5)])
    repo = PaymentRepository(db_session)

    first, _ = await repo.list(page=1, page_size=2)
    second, _ = await repo.list(page=2, page_size=2)
    third, _ = await repo.list(page=3, page_size=2)
    beyond, total = await repo.list(page=4, page_size=2)

    assert [p.order_id for p in first] == ["ORD-4", "ORD-3"]
    assert [p.order_id for p in second] == ["ORD-2", "ORD-1"]
    assert [p.order_id for p in third] == ["ORD-0"]
    assert beyond == []
    assert total == 5


@pytest.mark.asyncio
async def test_list_filters_are_conjunctive(db_session):
    await _seed(
        db_session,
        [
            _payment("ORD-1", payment_method=PaymentMethod.CASH, status=PaymentStatus.SUCCESS),
            _payment("ORD-2", payment_method=PaymentMethod.CARD, status=PaymentStatus.SUCCESS),
            _payment("ORD-3", payment_method=PaymentMethod.CARD, status=PaymentStatus.FAILED),
            _payment("ORD-4", payment_method=PaymentMethod.QRIS, status=PaymentStatus.PENDING),
        ],
    )
    repo = PaymentRepository(db_session)

    by_method, method_total = await repo.list(payment_method=PaymentMethod.CARD)
    assert method_total == 2
    assert {p.order_id for p in by_method} == {"ORD-2", "ORD-3"}

    both, both_total = await repo.list(payment_method=PaymentMethod.CARD, status=PaymentStatus.FAILED)
    assert both_total == 1
    assert both[0].order_id == "ORD-3"

    by_order, order_total = await repo.list(order_id="ORD-4", status=PaymentStatus.PENDING)
    assert order_total == 1
    assert by_order[0].payment_method == PaymentMethod.QRIS

    none, none_total = await repo.list(order_id="ORD-4", status=PaymentStatus.SUCCESS)
    assert none == []
    assert none_total == 0


@pytest.mark.asyncio
async def test_unspecified_sentinels_do_not_filter(db_session):
    await _seed(
        db_session,
        [
            _payment("ORD-1", payment_method=PaymentMethod.CASH),
            _payment("ORD-2", payment_method=PaymentMethod.CARD, status=PaymentStatus.FAILED),
            _payment("ORD-3", payment_method=PaymentMethod.E_WALLET, status=PaymentStatus.PENDING),
        ],
    )
    repo = PaymentRepository(db_session)

    payments, total = await repo.list(
        payment_method=PaymentMethod.UNSPECIFIED,
        status=PaymentStatus.UNSPECIFIED,
        page=1,
        page_size=10,
    )

    assert total == 3
    assert len(payments) == 3
