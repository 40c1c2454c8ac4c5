from decimal import Decimal, ROUND_HALF_UP
import stripe
from fastapi import Request


class PaymentError(Exception):
    pass


def to_minor_units(price: float | Decimal) -> int:
    """Dollars to cents, rounding half up: 25 -> 2500, 19.999 -> 2000."""
    cents = (Decimal(str(price)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(cents)


class PaymentGateway:
    currency = "usd"
    payment_method_types = ["card"]

    def __init__(self, secret_key: str):
        self.secret_key = secret_key

    def create_intent(self, price: float) -> str:
        """Create a card-only USD payment intent and return its client secret."""
        try:
            intent = stripe.PaymentIntent.create(
                api_key=self.secret_key,
                amount=to_minor_units(price),
                currency=self.currency,
                payment_method_types=self.payment_method_types,
            )
        except stripe.StripeError as e:
            raise PaymentError(str(e)) from e
        return intent.client_secret


def get_payment_gateway(request: Request) -> PaymentGateway:
    return request.app.state.payments
