from __future__ import annotations

import argparse
from pathlib import Path

import pygame  # type: ignore[import-not-found]

from pairmatch.engine.scheduler import ManualScheduler
from pairmatch.paths import get_paths
from pairmatch.services.settings import SettingsService
from pairmatch.services.telemetry import TelemetryService

from .app import App, GameContext
from .asset_manager import AssetManager
from .scenes.boot import BootScene


def main() -> int:
    parser = argparse.ArgumentParser(prog="pairmatch")
    parser.add_argument("--width", type=int, default=800)
    parser.add_argument("--height", type=int, default=900)
    parser.add_argument("--grid-size", type=int, default=None)
    parser.add_argument("--move-limit", type=int, default=None)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--settings", type=Path, default=None, help="JSON file overriding bundled settings")
    args = parser.parse_args()

    overrides: dict[str, int] = {}
    if args.grid_size is not None:
        overrides["grid_size"] = args.grid_size
    if args.move_limit is not None:
        overrides["move_limit"] = args.move_limit
    if args.seed is not None:
        overrides["seed"] = args.seed

    pygame.init()
    screen = pygame.display.set_mode((args.width, args.height))
    pygame.display.set_caption("PairMatch")

    clock = pygame.time.Clock()
    paths = get_paths()

    ctx = GameContext(
        screen=screen,
        clock=clock,
        paths=paths,
        assets=AssetManager(),
        settings_service=SettingsService(data_dir=paths.data_dir, schema_dir=paths.schema_dir),
        telemetry=TelemetryService(paths.userdata_dir / "telemetry.jsonl"),
        scheduler=ManualScheduler(),
        settings_override=args.settings,
        cli_overrides=overrides,
    )

    app = App(ctx, BootScene(ctx))
    return app.run()


if __name__ == "__main__":
    raise SystemExit(main())
