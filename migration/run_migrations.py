"""
Replay every migration in this package, in filename order.

Each migration module (``_NNN_*.py``) exposes one ``create_*_sql()`` function
returning raw SQL. Statements are idempotent (``IF NOT EXISTS``), so running
the whole set again is safe. The first failure stops the run.

    python -m migration.run_migrations
"""
import asyncio
import importlib
import logging
import pkgutil
from typing import Callable

from listing_intake.database.connection import get_db_connection

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

PACKAGE = "migration"


def discover_migrations() -> list[tuple[str, Callable[[], str]]]:
    """(module name, sql function) pairs sorted by module name"""
    import migration

    migrations = []
    for module_info in sorted(pkgutil.iter_modules(migration.__path__), key=lambda m: m.name):
        if not module_info.name.startswith("_") or not module_info.name[1:4].isdigit():
            continue

        module = importlib.import_module(f"{PACKAGE}.{module_info.name}")
        sql_functions = [
            getattr(module, attr)
            for attr in dir(module)
            if attr.startswith("create_") and attr.endswith("_sql")
        ]
        if len(sql_functions) != 1:
            raise ValueError(f"Migration {module_info.name} must define exactly one create_*_sql function")
        migrations.append((module_info.name, sql_functions[0]))
    return migrations


async def run_migrations(conn) -> list[str]:
    """Execute every migration on ``conn``. Returns the names that ran."""
    applied = []
    for name, sql_function in discover_migrations():
        logger.info(f"Running migration: {name}")
        try:
            await conn.execute(sql_function())
        except Exception as e:
            logger.error(f"Migration failed: {name}: {e}")
            raise
        logger.info(f"Migration successful: {name}")
        applied.append(name)
    return applied


def main():
    async def run():
        conn = await get_db_connection()
        try:
            await run_migrations(conn)
        finally:
            await conn.close()

    asyncio.run(run())


if __name__ == "__main__":
    main()
