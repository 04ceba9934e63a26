import attrs


@attrs.define(frozen=True)
class PaymentProof:
    """What the checkout widget hands back after a successful payment."""

    order_id: str
    payment_id: str
    signature: str = attrs.field(repr=False)
