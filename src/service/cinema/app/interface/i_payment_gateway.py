from abc import ABC, abstractmethod
from decimal import Decimal

from src.service.cinema.domain.value_object.payment_order import PaymentOrder


class IPaymentGateway(ABC):
    @property
    @abstractmethod
    def key_id(self) -> str:
        """Public key id the checkout widget needs to open the order"""
        pass

    @abstractmethod
    async def create_order(self, *, amount: Decimal, currency: str, reference: str) -> PaymentOrder:
        """
        Raises:
            GatewayUnavailableError: network, auth or HTTP failure at the gateway
        """
        pass

    @abstractmethod
    def verify_signature(self, *, order_id: str, payment_id: str, signature: str) -> bool:
        """HMAC check only, no network call. Fails closed when no secret is configured."""
        pass
