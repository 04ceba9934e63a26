import attrs


@attrs.define(frozen=True)
class SweepResult:
    deleted_holds: int
    failed_bookings: int = 0
