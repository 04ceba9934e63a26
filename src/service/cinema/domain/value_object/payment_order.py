from decimal import Decimal

import attrs


@attrs.define(frozen=True)
class PaymentOrder:
    """Order created at the payment gateway; `amount` is in major units (e.g. 14.50)."""

    order_id: str
    amount: Decimal
    currency: str
    receipt: str
