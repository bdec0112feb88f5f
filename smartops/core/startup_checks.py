from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path

from alembic.config import Config
from alembic.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy import inspect
from sqlalchemy.engine import Engine

from smartops.core import config

logger = logging.getLogger(__name__)
MIGRATIONS_PREFIX = "[MIGRATIONS]"
SECURITY_PREFIX = "[SECURITY]"


def _current_env() -> str:
    return os.getenv("ENVIRONMENT", os.getenv("ENV", "dev")).strip().lower()


def validate_security_settings() -> None:
    if not config.JWT_SECRET_KEY:
        logger.critical("%s JWT_SECRET_KEY is not configured", SECURITY_PREFIX)
        raise RuntimeError("JWT_SECRET_KEY must be set before the API can start")


def validate_database_environment() -> None:
    if _current_env() in {"prod", "production"} and config.DATABASE_URL.startswith("sqlite"):
        logger.critical("%s SQLite is forbidden in production", MIGRATIONS_PREFIX)
        raise RuntimeError("SQLite is forbidden in production environment")


def apply_migrations(*, alembic_config_path: Path) -> None:
    """Apply pending Alembic migrations when AUTO_APPLY_MIGRATIONS asks for it."""
    auto_apply_raw = os.getenv("AUTO_APPLY_MIGRATIONS", "").strip().lower()
    if auto_apply_raw not in {"1", "true", "yes", "on"}:
        logger.info("%s auto migration skipped env=%s", MIGRATIONS_PREFIX, _current_env())
        return

    if not alembic_config_path.exists():
        logger.critical("%s alembic config not found path=%s", MIGRATIONS_PREFIX, alembic_config_path)
        raise RuntimeError("alembic config not found")

    logger.info("%s applying migrations to head", MIGRATIONS_PREFIX)
    try:
        subprocess.run(
            ["python", "-m", "alembic", "-c", str(alembic_config_path), "upgrade", "head"],
            check=True,
            capture_output=True,
            text=True,
        )
    except subprocess.CalledProcessError as exc:
        logger.critical(
            "%s migration apply failed returncode=%s stderr=%s",
            MIGRATIONS_PREFIX,
            exc.returncode,
            (exc.stderr or "").strip(),
        )
        raise RuntimeError("Automatic migration failed") from exc

    logger.info("%s migrations applied", MIGRATIONS_PREFIX)


def stamp_unversioned_schema(*, engine: Engine, alembic_config_path: Path) -> None:
    """Record the head revision on a database whose tables came from ``create_all``.

    Only touches databases with no ``alembic_version`` rows; a database that
    already carries migration state is left for ``ensure_migrations_applied``.
    """
    if not alembic_config_path.exists():
        logger.critical("%s alembic config not found path=%s", MIGRATIONS_PREFIX, alembic_config_path)
        raise RuntimeError("alembic config not found")

    script_directory = ScriptDirectory.from_config(Config(str(alembic_config_path)))
    with engine.begin() as connection:
        context = MigrationContext.configure(connection)
        if context.get_current_heads():
            return
        context.stamp(script_directory, "head")

    logger.info("%s schema created from models; stamped heads=%s", MIGRATIONS_PREFIX, script_directory.get_heads())


def ensure_migrations_applied(*, engine: Engine, alembic_config_path: Path) -> None:
    if _current_env() == "test":
        logger.info("%s skipped migration check in test environment", MIGRATIONS_PREFIX)
        return

    if not alembic_config_path.exists():
        logger.critical("%s alembic config not found path=%s", MIGRATIONS_PREFIX, alembic_config_path)
        raise RuntimeError("alembic config not found")

    alembic_cfg = Config(str(alembic_config_path))
    script_directory = ScriptDirectory.from_config(alembic_cfg)
    expected_heads = set(script_directory.get_heads())

    with engine.connect() as connection:
        inspector = inspect(connection)
        if "alembic_version" not in inspector.get_table_names():
            logger.critical("%s alembic_version table missing", MIGRATIONS_PREFIX)
            raise RuntimeError("Database has no migration state")

        current_rows = connection.exec_driver_sql("SELECT version_num FROM alembic_version").fetchall()

    current_heads = {row[0] for row in current_rows if row and row[0]}
    if current_heads != expected_heads:
        logger.critical(
            "%s pending migration detected current=%s expected=%s",
            MIGRATIONS_PREFIX,
            sorted(current_heads),
            sorted(expected_heads),
        )
        raise RuntimeError("Pending migrations detected")

    logger.info("%s migration state verified", MIGRATIONS_PREFIX)
