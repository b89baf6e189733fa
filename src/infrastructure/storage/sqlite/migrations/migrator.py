"""
Database schema migrator with versioned migrations.

Supports:
- Versioned SQL migrations (v001_, v002_, etc.)
- Migration tracking in schema_migrations table
- Checksum verification of already-applied migrations
- Post-migration foreign key validation
"""

import asyncio
import hashlib
import re
import time
from dataclasses import dataclass
from pathlib import Path

import aiosqlite

from src.config import get_logger, get_settings

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent

REQUIRED_TABLES = (
    "categories",
    "suppliers",
    "services",
    "vehicles",
    "items",
    "stock_transactions",
    "reparations",
    "reparation_items",
    "reparation_services",
    "schema_migrations",
)

LEDGER_TRIGGERS = (
    "stock_transactions_no_update",
    "stock_transactions_no_delete",
)

_MIGRATIONS_TABLE = """
CREATE TABLE IF NOT EXISTS schema_migrations (
    version TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    checksum TEXT NOT NULL,
    execution_time_ms INTEGER,
    applied_at TEXT NOT NULL DEFAULT (datetime('now'))
)
"""


@dataclass
class MigrationInfo:
    """Information about a migration file."""

    version: str
    name: str
    path: Path
    checksum: str

    @classmethod
    def from_file(cls, path: Path) -> "MigrationInfo":
        """Parse migration info from a ``v001_name.sql`` filename."""
        match = re.match(r"v(\d+)_(.+)\.sql", path.name)
        if not match:
            raise ValueError(f"Invalid migration filename: {path.name}")

        content = path.read_text(encoding="utf-8")
        checksum = hashlib.sha256(content.encode()).hexdigest()[:16]
        return cls(
            version=match.group(1),
            name=match.group(2),
            path=path,
            checksum=checksum,
        )


@dataclass
class MigrationResult:
    """Result of a migration operation."""

    version: str
    name: str
    success: bool
    execution_time_ms: int
    error: str | None = None


async def get_applied_migrations(conn: aiosqlite.Connection) -> dict[str, str]:
    """Map applied migration versions to their checksums."""
    try:
        cursor = await conn.execute(
            "SELECT version, checksum FROM schema_migrations ORDER BY version"
        )
        rows = await cursor.fetchall()
        return {row[0]: row[1] for row in rows}
    except aiosqlite.OperationalError:
        return {}


def discover_migrations() -> list[MigrationInfo]:
    """Discover all migration files in version order."""
    migrations = []
    for path in sorted(MIGRATIONS_DIR.glob("v*.sql")):
        try:
            migrations.append(MigrationInfo.from_file(path))
        except ValueError as e:
            logger.warning("skipping_invalid_migration", path=str(path), error=str(e))
    return migrations


async def apply_migration(
    conn: aiosqlite.Connection,
    migration: MigrationInfo,
) -> MigrationResult:
    """Apply a single migration and record it."""
    logger.info("applying_migration", version=migration.version, name=migration.name)
    start_time = time.time()

    try:
        sql = migration.path.read_text(encoding="utf-8")
        await conn.executescript(sql)
        await conn.execute(
            """
            INSERT OR REPLACE INTO schema_migrations (version, name, checksum, execution_time_ms)
            VALUES (?, ?, ?, ?)
            """,
            (
                migration.version,
                migration.name,
                migration.checksum,
                int((time.time() - start_time) * 1000),
            ),
        )
        await conn.commit()
    except aiosqlite.Error as e:
        await conn.rollback()
        execution_time = int((time.time() - start_time) * 1000)
        logger.error(
            "migration_failed",
            version=migration.version,
            name=migration.name,
            error=str(e),
        )
        return MigrationResult(
            version=migration.version,
            name=migration.name,
            success=False,
            execution_time_ms=execution_time,
            error=str(e),
        )

    execution_time = int((time.time() - start_time) * 1000)
    logger.info(
        "migration_applied",
        version=migration.version,
        name=migration.name,
        execution_time_ms=execution_time,
    )
    return MigrationResult(
        version=migration.version,
        name=migration.name,
        success=True,
        execution_time_ms=execution_time,
    )


async def initialize_database(db_path: Path | None = None) -> list[MigrationResult]:
    """
    Apply all pending migrations.

    Stops at the first failing migration. A migration whose file changed
    since it was applied is reported and skipped.

    Returns:
        Results for the migrations attempted in this run
    """
    settings = get_settings()
    db_path = db_path or settings.storage.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)

    logger.info("initializing_database", db_path=str(db_path))
    results: list[MigrationResult] = []

    async with aiosqlite.connect(db_path) as conn:
        await conn.execute("PRAGMA journal_mode=WAL")
        await conn.execute("PRAGMA foreign_keys=ON")
        await conn.execute(_MIGRATIONS_TABLE)
        await conn.commit()

        migrations = discover_migrations()
        if not migrations:
            logger.warning("no_migrations_found")
            return results

        applied = await get_applied_migrations(conn)

        for migration in migrations:
            if migration.version in applied:
                if applied[migration.version] != migration.checksum:
                    logger.warning(
                        "migration_checksum_changed",
                        version=migration.version,
                    )
                continue

            result = await apply_migration(conn, migration)
            results.append(result)
            if not result.success:
                logger.error("migration_failed_stopping", version=migration.version)
                break

            cursor = await conn.execute("PRAGMA foreign_key_check")
            violations = await cursor.fetchall()
            if violations:
                logger.error(
                    "post_migration_validation_failed",
                    version=migration.version,
                    foreign_key_violations=len(violations),
                )
                break

    return results


# Alias used by the application lifespan
run_migrations = initialize_database


async def get_migration_status(db_path: Path | None = None) -> dict:
    """Current, applied and pending migration versions."""
    settings = get_settings()
    db_path = db_path or settings.storage.db_path

    if not db_path.exists():
        return {
            "exists": False,
            "current_version": None,
            "applied_migrations": [],
            "pending_migrations": [m.version for m in discover_migrations()],
        }

    async with aiosqlite.connect(db_path) as conn:
        applied = await get_applied_migrations(conn)
        discovered = discover_migrations()
        return {
            "exists": True,
            "current_version": max(applied) if applied else None,
            "applied_migrations": sorted(applied),
            "pending_migrations": [m.version for m in discovered if m.version not in applied],
            "total_migrations": len(discovered),
        }


async def verify_schema_integrity(db_path: Path | None = None) -> list[dict]:
    """Foreign key, integrity, required-table and ledger-trigger checks."""
    settings = get_settings()
    db_path = db_path or settings.storage.db_path
    checks = []

    async with aiosqlite.connect(db_path) as conn:
        cursor = await conn.execute("PRAGMA foreign_key_check")
        fk_violations = await cursor.fetchall()
        checks.append({
            "check": "foreign_keys",
            "status": "PASS" if not fk_violations else "FAIL",
            "violations": len(fk_violations),
        })

        cursor = await conn.execute("PRAGMA integrity_check")
        integrity = await cursor.fetchone()
        checks.append({
            "check": "integrity",
            "status": "PASS" if integrity[0] == "ok" else "FAIL",
            "result": integrity[0],
        })

        cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
        existing_tables = {row[0] for row in await cursor.fetchall()}
        missing = [t for t in REQUIRED_TABLES if t not in existing_tables]
        checks.append({
            "check": "required_tables",
            "status": "PASS" if not missing else "FAIL",
            "missing": missing,
        })

        cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type='trigger'")
        triggers = {row[0] for row in await cursor.fetchall()}
        unguarded = [t for t in LEDGER_TRIGGERS if t not in triggers]
        checks.append({
            "check": "ledger_append_only",
            "status": "PASS" if not unguarded else "FAIL",
            "missing": unguarded,
        })

    return checks


def main() -> None:
    """CLI entry point for database migration."""
    import argparse

    parser = argparse.ArgumentParser(description="Garage Stock Database Migrator")
    parser.add_argument("--db-path", type=Path, help="Database path (default from settings)")
    parser.add_argument("--status", action="store_true", help="Show migration status")
    parser.add_argument("--verify", action="store_true", help="Verify schema integrity")
    args = parser.parse_args()

    async def run():
        if args.status:
            status = await get_migration_status(args.db_path)
            print(f"Database exists: {status['exists']}")
            print(f"Current version: {status.get('current_version') or 'N/A'}")
            print(f"Applied migrations: {status.get('applied_migrations', [])}")
            print(f"Pending migrations: {status.get('pending_migrations', [])}")

        elif args.verify:
            for check in await verify_schema_integrity(args.db_path):
                print(f"[{check['status']}] {check['check']}")
                if check["status"] != "PASS":
                    for key, value in check.items():
                        if key not in ("check", "status"):
                            print(f"       {key}: {value}")

        else:
            for result in await initialize_database(args.db_path):
                status = "SUCCESS" if result.success else "FAILED"
                print(f"[{status}] v{result.version}: {result.name} ({result.execution_time_ms}ms)")
                if result.error:
                    print(f"         Error: {result.error}")

    asyncio.run(run())


if __name__ == "__main__":
    main()
