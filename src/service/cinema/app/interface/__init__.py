"""Application layer interfaces (Ports)"""

from src.service.cinema.app.interface.i_booking_ledger_command_repo import (
    IBookingLedgerCommandRepo,
)
from src.service.cinema.app.interface.i_booking_query_repo import IBookingQueryRepo
from src.service.cinema.app.interface.i_hold_ledger_command_repo import IHoldLedgerCommandRepo
from src.service.cinema.app.interface.i_payment_gateway import IPaymentGateway
from src.service.cinema.app.interface.i_seat_inventory_query_repo import ISeatInventoryQueryRepo

__all__ = [
    'IBookingLedgerCommandRepo',
    'IBookingQueryRepo',
    'IHoldLedgerCommandRepo',
    'IPaymentGateway',
    'ISeatInventoryQueryRepo',
]
