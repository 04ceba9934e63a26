"""
Reservation errors

Conflict-class errors (SeatUnavailable, HoldExpired, SeatAlreadyBooked) are
expected, user-recoverable outcomes: the client re-fetches the seat map and
picks again. They carry the conflicting seat ids in the response body.
"""

from typing import Iterable

from src.platform.exception.exceptions import ConflictError, DomainError, UpstreamError


def _seat_list(seat_ids: Iterable[int]) -> list[int]:
    return sorted(set(seat_ids))


class InvalidSeatError(DomainError):
    kind = 'InvalidSeat'

    def __init__(self, message: str, *, seat_ids: Iterable[int]) -> None:
        super().__init__(message, 400, seatIds=_seat_list(seat_ids))


class LimitExceededError(DomainError):
    kind = 'LimitExceeded'

    def __init__(self, message: str) -> None:
        super().__init__(message, 400)


class HoldMismatchError(DomainError):
    kind = 'HoldMismatch'

    def __init__(self, message: str, *, seat_ids: Iterable[int] = ()) -> None:
        super().__init__(message, 400, seatIds=_seat_list(seat_ids))


class AmountMismatchError(DomainError):
    kind = 'AmountMismatch'

    def __init__(self, message: str) -> None:
        super().__init__(message, 400)


class PaymentVerificationFailedError(DomainError):
    kind = 'PaymentVerificationFailed'

    def __init__(self, message: str) -> None:
        super().__init__(message, 400)


class SeatUnavailableError(ConflictError):
    kind = 'SeatUnavailable'

    def __init__(self, message: str, *, seat_ids: Iterable[int]) -> None:
        super().__init__(message, seatIds=_seat_list(seat_ids))


class HoldExpiredError(ConflictError):
    kind = 'HoldExpired'

    def __init__(self, message: str, *, seat_ids: Iterable[int]) -> None:
        super().__init__(message, seatIds=_seat_list(seat_ids))


class SeatAlreadyBookedError(ConflictError):
    kind = 'SeatAlreadyBooked'

    def __init__(self, message: str, *, seat_ids: Iterable[int]) -> None:
        super().__init__(message, seatIds=_seat_list(seat_ids))


class BookingNotPayableError(ConflictError):
    kind = 'BookingNotPayable'
    is_expected = False


class PaymentInitFailedError(UpstreamError):
    kind = 'PaymentInitFailed'

    def __init__(self, message: str) -> None:
        super().__init__(message, 502)


class GatewayUnavailableError(UpstreamError):
    kind = 'GatewayUnavailable'

    def __init__(self, message: str) -> None:
        super().__init__(message, 503)
