#!/usr/bin/env python3
"""
Database Seed Script
Populate a screen's seats and a few showtimes for local runs

Features:
1. Create Seats - rows A-E standard, F-H premium, 10 seats per row on screen 1
2. Create Showtimes - three screenings of movie 1 on screen 1, starting tomorrow
3. Print a demo JWT so the API can be called right away

Notes:
- Run `alembic upgrade head` (or `python script/reset_database.py`) first
- SEED_SCREEN_ID overrides the screen to seed
"""

import asyncio
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
import os

from sqlalchemy import func, select

from src.platform.database.orm_db_setting import dispose_engines, get_session_maker
from src.service.cinema.domain.entity.seat_entity import SeatClass
from src.service.cinema.driven_adapter.model.seat_model import SeatModel
from src.service.cinema.driven_adapter.model.showtime_model import ShowtimeModel
from src.service.cinema.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


SEATS_PER_ROW = 10
STANDARD_ROWS = 'ABCDE'
PREMIUM_ROWS = 'FGH'
PRICES = {SeatClass.STANDARD: Decimal('12.00'), SeatClass.PREMIUM: Decimal('18.00')}
SHOW_TIMES = [time(13, 0), time(16, 30), time(19, 30)]
DEMO_USER_ID = 'demo-user'


def _build_seats(screen_id: int) -> list[SeatModel]:
    seats = []
    for row_label in STANDARD_ROWS + PREMIUM_ROWS:
        seat_class = SeatClass.PREMIUM if row_label in PREMIUM_ROWS else SeatClass.STANDARD
        for column_index in range(1, SEATS_PER_ROW + 1):
            seats.append(
                SeatModel(
                    screen_id=screen_id,
                    row_label=row_label,
                    column_index=column_index,
                    seat_number=f'{row_label}{column_index}',
                    seat_class=seat_class.value,
                    price=PRICES[seat_class],
                    is_active=True,
                )
            )
    return seats


def _build_showtimes(screen_id: int, show_date: date) -> list[ShowtimeModel]:
    return [
        ShowtimeModel(
            movie_id=1,
            screen_id=screen_id,
            show_date=show_date,
            show_time=show_time,
            price=PRICES[SeatClass.STANDARD],
        )
        for show_time in SHOW_TIMES
    ]


async def seed(screen_id: int) -> None:
    session_maker = get_session_maker()
    async with session_maker() as session:
        existing = await session.scalar(
            select(func.count()).select_from(SeatModel).where(SeatModel.screen_id == screen_id)
        )
        if existing:
            print(f'⏭️  Screen {screen_id} already has {existing} seats, skipping seats')
        else:
            seats = _build_seats(screen_id)
            session.add_all(seats)
            print(f'   ✅ {len(seats)} seats created on screen {screen_id}')

        tomorrow = datetime.now(timezone.utc).date() + timedelta(days=1)
        showtimes = _build_showtimes(screen_id, tomorrow)
        session.add_all(showtimes)
        await session.commit()

        for showtime in showtimes:
            print(f'   ✅ Showtime {showtime.id}: {showtime.show_date} {showtime.show_time}')


async def main() -> None:
    screen_id = int(os.getenv('SEED_SCREEN_ID', '1'))
    print('🌱 Seeding cinema data...')
    print('=' * 50)

    try:
        await seed(screen_id)
    finally:
        await dispose_engines()

    print('=' * 50)
    print('✅ Seed completed!')
    print(f'🔑 Demo token for user "{DEMO_USER_ID}":')
    print(f'   {JwtAuth().create_jwt_token(DEMO_USER_ID)}')


if __name__ == '__main__':
    asyncio.run(main())
