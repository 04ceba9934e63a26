#!/usr/bin/env python3
"""
Database Reset Script
Reset the PostgreSQL database structure

Features:
1. Drop & Recreate Database - completely wipe the database
2. Run Alembic Migrations - create the latest schema

Notes:
- This script only resets database structure, does not seed data
- To seed data, run `python script/seed_data.py`
"""

import asyncio
from pathlib import Path
import subprocess
import sys

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncConnection, create_async_engine

from src.platform.config.core_setting import settings


PROJECT_ROOT = Path(__file__).resolve().parent.parent
DB_WAIT_SECONDS = 1


def _parse_db_connection(database_url: str) -> tuple[str, str]:
    """Return (server_url, db_name)"""
    server_url, db_name = database_url.rsplit('/', 1)
    return server_url, db_name


async def _terminate_connections(conn: AsyncConnection, db_name: str) -> None:
    await conn.execute(
        text(
            'SELECT pg_terminate_backend(pid) FROM pg_stat_activity '
            'WHERE datname = :db_name AND pid <> pg_backend_pid()'
        ),
        {'db_name': db_name},
    )


async def _drop_and_create_db(server_url: str, db_name: str) -> None:
    admin_engine = create_async_engine(f'{server_url}/postgres', isolation_level='AUTOCOMMIT')

    try:
        async with admin_engine.connect() as conn:
            await _terminate_connections(conn, db_name)

            await conn.execute(text(f'DROP DATABASE IF EXISTS "{db_name}"'))
            print(f"   ✅ Database '{db_name}' dropped")
            await asyncio.sleep(DB_WAIT_SECONDS)

            await conn.execute(text(f'CREATE DATABASE "{db_name}"'))
            print(f"   ✅ Database '{db_name}' created")
            await asyncio.sleep(DB_WAIT_SECONDS)
    finally:
        await admin_engine.dispose()


def _run_alembic_migrations() -> None:
    print("   🔄 Running 'alembic upgrade head'...")

    result = subprocess.run(
        ['alembic', 'upgrade', 'head'], cwd=PROJECT_ROOT, capture_output=True, text=True
    )

    if result.returncode != 0:
        print(f'   ❌ Migration failed (return code: {result.returncode})')
        if result.stdout:
            print(f'   📋 STDOUT: {result.stdout}')
        if result.stderr:
            print(f'   📋 STDERR: {result.stderr}')
        raise RuntimeError(f'Alembic migration failed with return code {result.returncode}')

    print('   ✅ Database migrations completed')


async def main() -> None:
    print('🔄 Starting database reset...')
    print('=' * 50)

    server_url, db_name = _parse_db_connection(settings.DATABASE_URL_ASYNC)
    try:
        print('🗑️ Dropping database...')
        await _drop_and_create_db(server_url, db_name)

        print('🏗️ Running database migrations...')
        _run_alembic_migrations()
    except Exception as e:
        print(f'❌ Reset failed: {e}')
        sys.exit(1)

    print('=' * 50)
    print('✅ Database reset completed!')
    print('💡 To seed data, run: python script/seed_data.py')


if __name__ == '__main__':
    asyncio.run(main())
