from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from jsonschema import Draft202012Validator

from pairmatch.engine.controller import GameConfig


class SettingsError(RuntimeError):
    pass


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise SettingsError(f"Missing settings file: {path}") from e
    except json.JSONDecodeError as e:
        raise SettingsError(f"Invalid JSON in {path}: {e}") from e


def validate_json(instance: object, schema: object, *, context: str) -> None:
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda e: list(e.path))
    if errors:
        lines = [f"Schema validation failed for {context}:"]
        for err in errors[:10]:
            loc = "/".join(str(p) for p in err.absolute_path)
            lines.append(f"- {loc}: {err.message}")
        raise SettingsError("\n".join(lines))


def _optional_int(obj: Mapping[str, object], key: str) -> int | None:
    v = obj.get(key)
    if v is None:
        return None
    # The schema treats integral numbers such as 4.0 as integers too.
    if isinstance(v, float) and v.is_integer():
        return int(v)
    if isinstance(v, bool) or not isinstance(v, int):
        raise SettingsError(f"Expected int or null for {key}")
    return v


def _require_int(obj: Mapping[str, object], key: str) -> int:
    v = _optional_int(obj, key)
    if v is None:
        raise SettingsError(f"Expected int for {key}")
    return v


@dataclass(frozen=True)
class GameSettings:
    grid_size: int
    move_limit: int | None
    mismatch_delay_ms: int
    seed: int | None

    def to_game_config(self) -> GameConfig:
        return GameConfig(
            grid_size=self.grid_size,
            move_limit=self.move_limit,
            mismatch_delay=self.mismatch_delay_ms / 1000.0,
        )


class SettingsService:
    """Loads the bundled defaults, layered with an optional user override file."""

    def __init__(self, data_dir: Path, schema_dir: Path) -> None:
        self._data_dir = data_dir
        self._schema_dir = schema_dir

    def load(self, override_path: Path | None = None) -> GameSettings:
        defaults_path = self._data_dir / "settings.json"
        schema = _load_json(self._schema_dir / "settings.schema.json")
        raw = _load_json(defaults_path)
        validate_json(raw, schema, context=str(defaults_path))
        if not isinstance(raw, dict):
            raise SettingsError("settings.json must be an object")

        merged = dict(raw)
        context = str(defaults_path)
        if override_path is not None:
            override = _load_json(override_path)
            if not isinstance(override, dict):
                raise SettingsError(f"{override_path} must be an object")
            merged.update(override)
            context = str(override_path)
        validate_json(merged, schema, context=context)

        return GameSettings(
            grid_size=_require_int(merged, "grid_size"),
            move_limit=_optional_int(merged, "move_limit"),
            mismatch_delay_ms=_require_int(merged, "mismatch_delay_ms"),
            seed=_optional_int(merged, "seed"),
        )

    def validate_all(self) -> None:
        # Load is validation (schema + parse)
        _ = self.load()
