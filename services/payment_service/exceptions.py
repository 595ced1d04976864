class PaymentError(Exception):
    """Base class for payment errors. `code` is stable and maps to a transport status."""

    code = "internal"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidArgumentError(PaymentError):
    code = "invalid_argument"


class PaymentAlreadyExistsError(PaymentError):
    code = "already_exists"

    def __init__(self, order_id: str):
        super().__init__(f"payment already exists for order_id: {order_id}")
        self.order_id = order_id


class PaymentNotFoundError(PaymentError):
    code = "not_found"
