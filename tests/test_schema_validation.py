from __future__ import annotations

import json
from pathlib import Path

import pytest

from pairmatch.paths import get_paths
from pairmatch.services.settings import SettingsError, SettingsService


def _service() -> SettingsService:
    paths = get_paths()
    return SettingsService(paths.data_dir, paths.schema_dir)


def test_bundled_settings_validate() -> None:
    _service().validate_all()


def test_defaults_map_to_game_config() -> None:
    settings = _service().load()
    assert settings.grid_size == 4
    assert settings.move_limit is None
    cfg = settings.to_game_config()
    assert cfg.grid_size == 4
    assert cfg.move_limit is None
    assert cfg.mismatch_delay == 1.0


def test_partial_override_is_merged(tmp_path: Path) -> None:
    override = tmp_path / "settings.json"
    override.write_text(json.dumps({"grid_size": 6, "move_limit": 30, "seed": 7}), encoding="utf-8")
    settings = _service().load(override)
    assert settings.grid_size == 6
    assert settings.move_limit == 30
    assert settings.seed == 7
    assert settings.mismatch_delay_ms == 1000


@pytest.mark.parametrize(
    "override",
    [
        {"grid_size": 11},
        {"grid_size": 1},
        {"move_limit": 3},
        {"move_limit": 101},
        {"mismatch_delay_ms": -5},
        {"unknown_key": True},
    ],
)
def test_out_of_range_override_fails_validation(tmp_path: Path, override: dict[str, object]) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps(override), encoding="utf-8")
    with pytest.raises(SettingsError, match="Schema validation failed"):
        _service().load(path)


def test_invalid_json_is_reported(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(SettingsError, match="Invalid JSON"):
        _service().load(path)


def test_missing_override_is_reported(tmp_path: Path) -> None:
    with pytest.raises(SettingsError, match="Missing settings file"):
        _service().load(tmp_path / "nope.json")


def test_integral_floats_are_read_as_ints(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text('{"grid_size": 5.0, "move_limit": 40.0, "seed": 3.0}', encoding="utf-8")
    settings = _service().load(path)
    assert settings.grid_size == 5
    assert isinstance(settings.grid_size, int)
    assert settings.move_limit == 40
    assert isinstance(settings.move_limit, int)
    assert settings.seed == 3


def test_fractional_number_fails_validation(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text('{"grid_size": 4.5}', encoding="utf-8")
    with pytest.raises(SettingsError, match="Schema validation failed"):
        _service().load(path)
