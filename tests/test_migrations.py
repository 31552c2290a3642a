from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

ROOT = Path(__file__).resolve().parents[1]


def alembic_config(url: str) -> Config:
    config = Config()
    config.set_main_option("script_location", str(ROOT / "alembic"))
    config.set_main_option("sqlalchemy.url", url)
    return config


def test_upgrade_and_downgrade(tmp_path: Path):
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    config = alembic_config(url)

    command.upgrade(config, "head")

    engine = create_engine(url)
    inspector = inspect(engine)
    assert {"users", "todos"} <= set(inspector.get_table_names())
    assert {c["name"] for c in inspector.get_columns("todos")} == {
        "id", "text", "completed", "user_id", "created_at", "updated_at"
    }
    [foreign_key] = inspector.get_foreign_keys("todos")
    assert foreign_key["referred_table"] == "users"
    assert foreign_key["options"].get("ondelete") == "CASCADE"
    assert any(index["unique"] for index in inspector.get_indexes("users"))

    command.downgrade(config, "base")

    assert {"users", "todos"}.isdisjoint(inspect(engine).get_table_names())
    engine.dispose()
