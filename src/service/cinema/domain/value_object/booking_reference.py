"""
Booking Reference - human-readable, unique booking code

Format: <prefix><epoch milliseconds><6 random characters>, e.g. SN1718000000000K3QZ8A
The random suffix keeps two bookings created in the same millisecond apart;
the unique constraint on booking.booking_reference is the final guard.
"""

from datetime import datetime
import secrets
import string


REFERENCE_ALPHABET = string.ascii_uppercase + string.digits
REFERENCE_SUFFIX_LENGTH = 6


def generate_booking_reference(*, now: datetime, prefix: str = 'SN') -> str:
    epoch_ms = int(now.timestamp() * 1000)
    suffix = ''.join(secrets.choice(REFERENCE_ALPHABET) for _ in range(REFERENCE_SUFFIX_LENGTH))
    return f'{prefix}{epoch_ms}{suffix}'
