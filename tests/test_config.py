import pytest

from chorepack.app import ChorePackApp, get_default_app, reset_default_app
from chorepack.config import ChorePackConfig, PackConfig, StorageConfig
from chorepack.domain.cards import Rarity
from chorepack.domain.exceptions import StoreNotConfigured
from chorepack.storage.memory import InMemoryCardStore, InMemoryPackStore


@pytest.fixture(autouse=True)
def clean_default_app():
    reset_default_app()
    yield
    reset_default_app()


def test_from_env_defaults(monkeypatch):
    for name in ("CHOREPACK_STORAGE_BACKEND", "CHOREPACK_BASE_URL", "CHOREPACK_RARITY_WEIGHTS"):
        monkeypatch.delenv(name, raising=False)
    config = ChorePackConfig.from_env()
    assert config.storage.backend == "memory"
    assert config.packs.ttl_days == 7
    assert config.reveal.slide_in_ms(3) == 820
    assert config.rng_seed is None


def test_from_env_reads_overrides(monkeypatch):
    monkeypatch.setenv("CHOREPACK_BASE_URL", "https://chores.example")
    monkeypatch.setenv("CHOREPACK_RARITY_WEIGHTS", '{"legendary": 0.1}')
    monkeypatch.setenv("CHOREPACK_REVEAL_PER_CARD_MS", "300")
    monkeypatch.setenv("CHOREPACK_RNG_SEED", "42")
    config = ChorePackConfig.from_env()
    assert config.packs.link_for("abc") == "https://chores.example/open/abc"
    assert config.packs.rarity_weights == {"LEGENDARY": 0.1}
    assert config.reveal.per_card_interval_ms == 300
    assert config.rng_seed == 42

    app = ChorePackApp(config)
    assert app.weights[Rarity.LEGENDARY] == 0.1
    assert app.weights[Rarity.COMMON] == 0.5


def test_from_env_rejects_bad_weights(monkeypatch):
    monkeypatch.setenv("CHOREPACK_RARITY_WEIGHTS", "[0.5]")
    with pytest.raises(ValueError):
        ChorePackConfig.from_env()


def test_link_for_strips_trailing_slash():
    assert PackConfig(base_url="http://x/").link_for("t0k") == "http://x/open/t0k"


def test_sqlalchemy_without_dsn_is_not_configured():
    config = ChorePackConfig(storage=StorageConfig(backend="sqlalchemy"))
    with pytest.raises(StoreNotConfigured):
        ChorePackApp(config)


def test_injected_stores_skip_backend_wiring():
    config = ChorePackConfig(storage=StorageConfig(backend="sqlalchemy"))
    store = InMemoryPackStore()
    app = ChorePackApp(config, pack_store=store, card_store=InMemoryCardStore())
    assert app.pack_store is store


def test_default_app_is_created_once(monkeypatch):
    monkeypatch.setenv("CHOREPACK_STORAGE_BACKEND", "memory")
    first = get_default_app()
    assert get_default_app() is first
    assert first.snapshot()["storage"] == "memory"


def test_default_app_reports_missing_dsn(monkeypatch):
    monkeypatch.setenv("CHOREPACK_STORAGE_BACKEND", "sqlalchemy")
    monkeypatch.delenv("CHOREPACK_STORAGE_DSN", raising=False)
    with pytest.raises(StoreNotConfigured):
        get_default_app()
