from pathlib import Path

import pytest

from portfolio_generator.adapters.json_store import JsonFileStore
from portfolio_generator.adapters.locations import SystemLocations
from portfolio_generator.config.configs import APP_NAME, APP_VERSION, AppConfig, StoreConfig
from portfolio_generator.core.repository import (
    PortfolioRepository,
    build_repository,
    remove,
    resolve_store_config,
    upsert,
)
from portfolio_generator.errors.errors import LocationError, ParseError, WriteError
from portfolio_generator.types.types import PortfolioData

# --- pure transitions ------------------------------------------------------------------------


def test_upsert_new_id_inserts_at_front_and_keeps_order(make_portfolio):
    data = PortfolioData(portfolios=[make_portfolio("b", 2), make_portfolio("a", 1)], next_number=3)

    updated = upsert(data, make_portfolio("c", 3))

    assert [p.id for p in updated.portfolios] == ["c", "b", "a"]
    assert updated.next_number == 4
    # input is not mutated
    assert [p.id for p in data.portfolios] == ["b", "a"]


def test_upsert_existing_id_replaces_in_place(make_portfolio):
    data = PortfolioData(
        portfolios=[make_portfolio("c", 3), make_portfolio("b", 2), make_portfolio("a", 1)],
        next_number=4,
    )

    updated = upsert(data, make_portfolio("b", 2, name="Renamed"))

    assert [p.id for p in updated.portfolios] == ["c", "b", "a"]
    assert updated.portfolios[1].name == "Renamed"
    assert updated.next_number == 4


@pytest.mark.parametrize(
    "next_number,number,expected",
    [
        (1, 1, 2),
        (2, 5, 6),
        (6, 3, 6),
        (6, 5, 6),
    ],
)
def test_upsert_next_number_is_max_of_counter_and_number_plus_one(
    make_portfolio, next_number, number, expected
):
    data = PortfolioData(portfolios=[], next_number=next_number)
    assert upsert(data, make_portfolio("x", number)).next_number == expected


def test_upsert_update_never_moves_next_number(make_portfolio):
    data = PortfolioData(portfolios=[make_portfolio("a", 1)], next_number=2)
    assert upsert(data, make_portfolio("a", 40)).next_number == 2


def test_remove_drops_every_matching_entry(make_portfolio):
    data = PortfolioData(
        portfolios=[make_portfolio("a", 1), make_portfolio("b", 2), make_portfolio("a", 3)],
        next_number=4,
    )

    updated = remove(data, "a")

    assert [p.id for p in updated.portfolios] == ["b"]
    assert updated.next_number == 4


# --- repository operations -------------------------------------------------------------------


def test_get_portfolios_on_fresh_store(repository):
    data = repository.get_portfolios()
    assert data == PortfolioData.empty()
    assert not repository.store.path.exists()


def test_save_portfolio_persists_and_returns_store(repository, store, make_portfolio, telemetry):
    returned = repository.save_portfolio(make_portfolio("a", 1))

    assert returned == store.load()
    assert returned.next_number == 2
    assert telemetry.names() == ["portfolio_saved"]
    assert telemetry.events[0][1]["inserted"] is True


def test_delete_unknown_id_is_noop_and_file_unchanged(repository, store, make_portfolio):
    repository.save_portfolio(make_portfolio("a", 1))
    before = store.path.read_bytes()

    returned = repository.delete_portfolio("missing")

    assert [p.id for p in returned.portfolios] == ["a"]
    assert store.path.read_bytes() == before


def test_delete_removes_exactly_one_entry(repository, store, make_portfolio, telemetry):
    repository.save_portfolio(make_portfolio("a", 1))
    repository.save_portfolio(make_portfolio("b", 2))

    returned = repository.delete_portfolio("a")

    assert [p.id for p in returned.portfolios] == ["b"]
    assert store.load() == returned
    assert telemetry.events[-1] == (
        "portfolio_deleted",
        {"portfolio_id": "a", "removed": 1, "total": 1},
    )


def test_load_failures_abort_without_writing(repository, store, make_portfolio):
    store.path.parent.mkdir(parents=True)
    store.path.write_text("{broken", encoding="utf-8")

    with pytest.raises(ParseError):
        repository.save_portfolio(make_portfolio())
    with pytest.raises(ParseError):
        repository.delete_portfolio("a")

    assert store.path.read_text(encoding="utf-8") == "{broken"


def test_export_writes_content_and_reports_path(
    repository, downloads_dir, make_portfolio, telemetry
):
    result = repository.export_markdown(make_portfolio(name="My Cool App"), "# Hello\n")

    target = downloads_dir / "My_Cool_App.md"
    assert result.success is True
    assert result.path == str(target)
    assert target.read_text(encoding="utf-8") == "# Hello\n"
    assert telemetry.names() == ["portfolio_exported"]


def test_export_overwrites_existing_file(repository, downloads_dir, make_portfolio):
    (downloads_dir / "X.md").write_text("old", encoding="utf-8")

    repository.export_markdown(make_portfolio(name="X"), "new")

    assert (downloads_dir / "X.md").read_text(encoding="utf-8") == "new"


def test_export_into_missing_directory_raises_write_error(store, tmp_path, make_portfolio):
    locations = SystemLocations(home=tmp_path, downloads=tmp_path / "nope", environ={})
    repository = PortfolioRepository(store, locations)

    with pytest.raises(WriteError) as exc:
        repository.export_markdown(make_portfolio(), "content")

    assert "Failed to write file" in str(exc.value)


def test_export_without_downloads_dir_raises_location_error(store, tmp_path, make_portfolio):
    locations = SystemLocations(home=tmp_path, environ={})
    repository = PortfolioRepository(store, locations)

    with pytest.raises(LocationError):
        repository.export_markdown(make_portfolio(), "content")


def test_get_app_info(repository, store):
    info = repository.get_app_info()

    assert info.version == APP_VERSION
    assert info.name == APP_NAME == "Portfolio Generator"
    assert info.data_path == str(store.path)


# --- example scenario ------------------------------------------------------------------------


def test_upsert_delete_export_scenario(repository, downloads_dir, make_portfolio):
    data = repository.save_portfolio(make_portfolio("a", 1, name="X"))
    assert [p.id for p in data.portfolios] == ["a"]
    assert data.next_number == 2

    data = repository.save_portfolio(make_portfolio("b", 5))
    assert [p.id for p in data.portfolios] == ["b", "a"]
    assert data.next_number == 6

    data = repository.save_portfolio(make_portfolio("a", 1, name="X2"))
    assert [p.id for p in data.portfolios] == ["b", "a"]
    assert data.portfolios[1].name == "X2"
    assert data.next_number == 6

    data = repository.delete_portfolio("b")
    assert [p.id for p in data.portfolios] == ["a"]

    result = repository.export_markdown(data.portfolios[0], "# X2\n")
    assert result.path == str(downloads_dir / "X2.md")
    assert (downloads_dir / "X2.md").read_text(encoding="utf-8") == "# X2\n"


# --- wiring ----------------------------------------------------------------------------------


def test_resolve_store_config_defaults_to_home(tmp_path):
    locations = SystemLocations(home=tmp_path, environ={})

    cfg = resolve_store_config(AppConfig(), locations)

    assert cfg == StoreConfig(base_dir=tmp_path / ".portfolio-generator")
    assert cfg.data_path == tmp_path / ".portfolio-generator" / "portfolios.json"


def test_resolve_store_config_prefers_data_dir(tmp_path):
    class NoHome:
        def home_dir(self) -> Path:
            raise LocationError("Failed to get home directory", location="home")

        def downloads_dir(self) -> Path:
            raise LocationError("Failed to get downloads directory", location="downloads")

    cfg = resolve_store_config(AppConfig(data_dir=tmp_path, data_file="p.json"), NoHome())

    assert cfg.data_path == tmp_path / "p.json"


def test_resolve_store_config_propagates_location_error():
    class NoHome:
        def home_dir(self) -> Path:
            raise LocationError("Failed to get home directory", location="home")

        def downloads_dir(self) -> Path:
            raise LocationError("Failed to get downloads directory", location="downloads")

    with pytest.raises(LocationError) as exc:
        resolve_store_config(AppConfig(), NoHome())

    assert exc.value.location == "home"


def test_build_repository_uses_json_file_store(tmp_path):
    repository = build_repository(AppConfig(data_dir=tmp_path, downloads_dir=tmp_path))

    assert isinstance(repository.store, JsonFileStore)
    assert repository.get_app_info().data_path == str(tmp_path / "portfolios.json")
