from src.service.cinema.domain.value_object.booking_reference import generate_booking_reference
from src.service.cinema.domain.value_object.payment_order import PaymentOrder
from src.service.cinema.domain.value_object.payment_proof import PaymentProof

__all__ = ['PaymentOrder', 'PaymentProof', 'generate_booking_reference']
