from prometheus_client import Counter, Histogram

# Business Metrics
payments_created_total = Counter(
    "payments_created_total",
    "Total payments recorded",
    ["payment_method"]  # Labels: 'CASH', 'CARD', ...
)

payments_rejected_total = Counter(
    "payments_rejected_total",
    "Total payment creation attempts rejected",
    ["reason"]  # Labels: 'invalid_argument', 'already_exists'
)

payments_amount = Histogram(
    "payments_amount",
    "Amount of recorded payments",
    buckets=(1, 5, 10, 25, 50, 100, 250, 500, 1000, 5000, 10000),
)
