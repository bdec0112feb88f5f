from pathlib import Path

import pytest

from smartops.core import config, startup_checks
from smartops.services.auth import create_access_token, decode_access_token


def test_missing_jwt_secret_blocks_startup(monkeypatch):
    monkeypatch.setattr(config, "JWT_SECRET_KEY", "")

    with pytest.raises(RuntimeError, match="JWT_SECRET_KEY"):
        startup_checks.validate_security_settings()


def test_missing_jwt_secret_blocks_token_operations(monkeypatch):
    token = create_access_token(1, 1)
    monkeypatch.setattr(config, "JWT_SECRET_KEY", "")

    with pytest.raises(RuntimeError):
        create_access_token(1, 1)
    with pytest.raises(RuntimeError):
        decode_access_token(token)


def test_configured_secret_passes():
    startup_checks.validate_security_settings()


def test_sqlite_is_refused_in_production(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "production")
    monkeypatch.setattr(config, "DATABASE_URL", "sqlite:///./prod.db")

    with pytest.raises(RuntimeError, match="SQLite"):
        startup_checks.validate_database_environment()


def test_sqlite_is_allowed_outside_production(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "dev")
    monkeypatch.setattr(config, "DATABASE_URL", "sqlite:///./dev.db")

    startup_checks.validate_database_environment()


def test_migration_check_is_skipped_in_test_env(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "test")

    startup_checks.ensure_migrations_applied(engine=None, alembic_config_path=Path("/nonexistent/alembic.ini"))


def test_auto_migrations_disabled_by_default(monkeypatch):
    monkeypatch.delenv("AUTO_APPLY_MIGRATIONS", raising=False)

    startup_checks.apply_migrations(alembic_config_path=Path("/nonexistent/alembic.ini"))


def test_auto_migrations_need_a_config_file(monkeypatch):
    monkeypatch.setenv("AUTO_APPLY_MIGRATIONS", "true")

    with pytest.raises(RuntimeError, match="alembic config not found"):
        startup_checks.apply_migrations(alembic_config_path=Path("/nonexistent/alembic.ini"))
