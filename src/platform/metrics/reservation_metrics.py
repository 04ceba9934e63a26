from prometheus_client import Counter, Histogram


class ReservationMetrics:
    """
    Cinema Booking Core Metrics Collector

    Tracks the hold -> booking -> payment confirmation funnel and the expiry
    sweeper. `result` labels carry the error kind on failure (e.g.
    SeatUnavailable) so lost races are visible separately from faults.
    """

    def __init__(self):
        # ========== Seat Hold Metrics ==========
        self.hold_requests = Counter(
            'seat_hold_requests_total',
            'Total seat hold requests',
            ['result'],
        )

        self.hold_request_duration = Histogram(
            'seat_hold_request_duration_seconds',
            'Seat hold request processing time',
            buckets=[0.005, 0.01, 0.05, 0.1, 0.2, 0.5, 1.0, 2.0, 5.0],
        )

        self.seats_per_hold = Histogram(
            'seat_hold_seats_per_request',
            'Number of seats requested per hold',
            buckets=[1, 2, 3, 4, 5, 6, 7, 8],
        )

        # ========== Booking / Payment Metrics ==========
        self.payment_orders = Counter(
            'booking_payment_orders_total',
            'Payment orders requested from the gateway',
            ['result'],
        )

        self.booking_confirmations = Counter(
            'booking_confirmations_total',
            'Payment confirmations (seat promotions)',
            ['result'],
        )

        # ========== Sweeper Metrics ==========
        self.holds_swept = Counter(
            'seat_holds_swept_total',
            'Expired seat holds deleted',
            ['trigger'],  # trigger: periodic/read/hold/manual
        )

        self.stale_bookings_failed = Counter(
            'stale_pending_bookings_failed_total',
            'Pending bookings marked failed after their holds lapsed',
        )

    # ========== Helper Methods ==========

    def record_hold_request(self, *, result: str, seat_count: int, duration: float) -> None:
        self.hold_requests.labels(result=result).inc()
        self.hold_request_duration.observe(duration)
        self.seats_per_hold.observe(seat_count)

    def record_payment_order(self, *, result: str) -> None:
        self.payment_orders.labels(result=result).inc()

    def record_booking_confirmation(self, *, result: str) -> None:
        self.booking_confirmations.labels(result=result).inc()

    def record_holds_swept(self, *, trigger: str, count: int) -> None:
        if count:
            self.holds_swept.labels(trigger=trigger).inc(count)

    def record_stale_bookings_failed(self, *, count: int) -> None:
        if count:
            self.stale_bookings_failed.inc(count)


# Global metrics instance
metrics = ReservationMetrics()
