import pytest

from fishforge.abstractions import CatalogBuilder, SimpleBotConfig, build_config


def test_build_config_interprets_storage_target(tmp_path):
    sqlite = build_config(SimpleBotConfig(bot_token="t", storage=str(tmp_path / "bot.db")))
    assert sqlite.storage.backend == "sqlalchemy"
    assert sqlite.storage.dsn.startswith("sqlite+aiosqlite:///")

    files = build_config(SimpleBotConfig(bot_token="t", storage=str(tmp_path / "data")))
    assert files.storage.backend == "json"
    assert files.storage.data_dir == (tmp_path / "data").resolve()

    memory = build_config(SimpleBotConfig(bot_token="t", storage="memory", admin_ids=(7,)))
    assert memory.storage.backend == "memory"
    assert memory.admin.admin_ids == {7}
    assert memory.bot_token == "t"


def test_catalog_builder_rejects_duplicates():
    builder = CatalogBuilder().add_item("Carp", 10).add_item("CARP", 12)
    with pytest.raises(ValueError):
        builder.build()
