"""The alembic history must build the same schema the models declare."""

from __future__ import annotations

from pathlib import Path

import pytest
import sqlalchemy as sa
from alembic import command
from alembic.config import Config as AlembicConfig

from reflections.extensions import db

pytestmark = pytest.mark.integration

MIGRATIONS_DIR = Path(__file__).resolve().parents[1] / "migrations"


@pytest.fixture
def migrated_engine(app, tmp_path):
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    cfg = AlembicConfig()
    cfg.set_main_option("script_location", str(MIGRATIONS_DIR))
    cfg.set_main_option("sqlalchemy.url", url)
    command.upgrade(cfg, "head")
    engine = sa.create_engine(url)
    try:
        yield engine
    finally:
        engine.dispose()
        command.downgrade(cfg, "base")


def test_upgrade_creates_every_model_table(migrated_engine):
    inspector = sa.inspect(migrated_engine)
    tables = set(inspector.get_table_names()) - {"alembic_version"}
    assert tables == set(db.metadata.tables)

    for name, table in db.metadata.tables.items():
        migrated_columns = {column["name"] for column in inspector.get_columns(name)}
        assert migrated_columns == set(table.columns.keys()), name


def test_upgrade_creates_uniqueness_rules(migrated_engine):
    inspector = sa.inspect(migrated_engine)
    entry_uniques = {c["name"] for c in inspector.get_unique_constraints("journal_entries")}
    assert "uq_journal_entries_user_date" in entry_uniques
    tag_uniques = {c["name"] for c in inspector.get_unique_constraints("tags")}
    assert "uq_tags_user_name" in tag_uniques
    user_indexes = {i["name"]: i["unique"] for i in inspector.get_indexes("users")}
    assert user_indexes["ix_users_username"]
    assert user_indexes["ix_users_email"]
    blocklist_uniques = {tuple(c["column_names"]) for c in inspector.get_unique_constraints("jwt_blocklist")}
    assert ("jti",) in blocklist_uniques
