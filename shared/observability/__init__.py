from .setup import setup_observability
from .metrics import (
    payments_created_total,
    payments_rejected_total,
    payments_amount
)
