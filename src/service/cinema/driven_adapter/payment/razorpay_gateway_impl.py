"""
Razorpay payment gateway adapter

Orders are created over the REST API with HTTP basic auth; amounts go on the
wire in paise. Checkout signatures are HMAC-SHA256 of `order_id|payment_id`
keyed with the account secret and are checked locally.
"""

import hashlib
import hmac
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

import httpx
from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.interface.i_payment_gateway import IPaymentGateway
from src.service.cinema.domain.reservation_error import GatewayUnavailableError
from src.service.cinema.domain.value_object.payment_order import PaymentOrder


class RazorpayGatewayImpl(IPaymentGateway):
    def __init__(
        self,
        *,
        key_id: str,
        key_secret: str,
        base_url: str = 'https://api.razorpay.com/v1',
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._key_id = key_id
        self._key_secret = key_secret
        self._base_url = base_url.rstrip('/')
        self._timeout = timeout
        self._transport = transport
        self.tracer = trace.get_tracer(__name__)

        if not key_id or not key_secret:
            Logger.base.warning(
                '⚠️ [PAYMENT] Razorpay credentials not configured, payment orders will fail'
            )

    @property
    def key_id(self) -> str:
        return self._key_id

    @staticmethod
    def to_minor_units(amount: Decimal) -> int:
        return int((amount * 100).quantize(Decimal('1'), rounding=ROUND_HALF_UP))

    @staticmethod
    def compute_signature(*, order_id: str, payment_id: str, secret: str) -> str:
        body = f'{order_id}|{payment_id}'.encode()
        return hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()

    @Logger.io
    async def create_order(self, *, amount: Decimal, currency: str, reference: str) -> PaymentOrder:
        if not self._key_id or not self._key_secret:
            raise GatewayUnavailableError('Payment gateway is not configured')

        payload = {
            'amount': self.to_minor_units(amount),
            'currency': currency,
            'receipt': reference,
            'payment_capture': 1,
        }

        with self.tracer.start_as_current_span(
            'payment_gateway.create_order',
            attributes={'payment.currency': currency, 'payment.receipt': reference},
        ):
            try:
                async with httpx.AsyncClient(
                    base_url=self._base_url,
                    auth=(self._key_id, self._key_secret),
                    timeout=self._timeout,
                    transport=self._transport,
                ) as client:
                    response = await client.post('/orders', json=payload)
            except httpx.HTTPError as e:
                raise GatewayUnavailableError(f'Payment gateway unreachable: {e}') from e

            if response.is_error:
                raise GatewayUnavailableError(
                    f'Payment gateway rejected order: {self._error_description(response)}'
                )

            body = response.json()
            return PaymentOrder(
                order_id=body['id'],
                amount=Decimal(body.get('amount', payload['amount'])) / 100,
                currency=body.get('currency', currency),
                receipt=body.get('receipt', reference),
            )

    def verify_signature(self, *, order_id: str, payment_id: str, signature: str) -> bool:
        if not self._key_secret or not signature:
            return False
        expected = self.compute_signature(
            order_id=order_id, payment_id=payment_id, secret=self._key_secret
        )
        return hmac.compare_digest(expected, signature)

    @staticmethod
    def _error_description(response: httpx.Response) -> str:
        try:
            return response.json()['error']['description']
        except (ValueError, KeyError, TypeError):
            return response.reason_phrase or str(response.status_code)
