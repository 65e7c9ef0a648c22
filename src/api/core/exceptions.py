class AppError(Exception):
    """
    Business rule rejection. Rendered by the exception handlers as
    {success: false, detail, code} with the given status.
    """

    status_code = 400
    code = "APP_ERROR"

    def __init__(self, detail: str, status_code: int | None = None, code: str | None = None):
        super().__init__(detail)
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code


class CheckoutError(AppError):
    code = "CHECKOUT_ERROR"


class InsufficientStock(CheckoutError):
    code = "INSUFFICIENT_STOCK"


class PaymentGatewayError(AppError):
    status_code = 500
    code = "PAYMENT_GATEWAY_ERROR"
