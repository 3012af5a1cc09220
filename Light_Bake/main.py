# main.py

"""Entry point for baking the lighting of a level."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import dataclass
from typing import Any

from Light_Bake.config import Config, load_config
from Light_Bake.engine.render import render_level
from Light_Bake.level.io import load_level, save_level, write_backup

logger = logging.getLogger(__name__)

# Internal Config attributes that should not be exposed as CLI flags
_PRIVATE_KEYS = {
    "base_dir",
    "input_dir",
    "config_file",
    "level_file",
    "output_file",
    "paths",
    "ALIASES",
}

# Flags whose default of ``None`` does not reveal their type
_ARG_TYPES = {"random_seed": int}


def _configure_logging() -> None:
    """Configure application logging and capture uncaught exceptions."""

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    def _log_excepthook(exc_type, exc, tb) -> None:
        logging.getLogger(__name__).exception(
            "Uncaught exception", exc_info=(exc_type, exc, tb)
        )

    sys.excepthook = _log_excepthook


def _apply_log_level() -> None:
    level = getattr(logging, str(Config.log_verbosity).upper(), None)
    if not isinstance(level, int):
        logger.warning("Unknown log verbosity %r", Config.log_verbosity)
        return
    logging.getLogger().setLevel(level)


def _add_config_args(
    parser: argparse.ArgumentParser, data: dict[str, Any], prefix: str = ""
) -> None:
    """Recursively add CLI flags based on ``data`` keys."""
    for key, value in data.items():
        if key in _PRIVATE_KEYS:
            continue
        arg_name = f"--{prefix}{key}"
        dest = f"{prefix}{key}".replace(".", "_")
        if isinstance(value, dict):
            _add_config_args(parser, value, prefix=f"{prefix}{key}.")
            continue
        if isinstance(value, bool):
            parser.add_argument(arg_name, type=lambda x: x.lower() == "true", dest=dest)
        else:
            arg_type = _ARG_TYPES.get(dest, type(value) if value is not None else str)
            parser.add_argument(arg_name, type=arg_type, dest=dest)


def _config_defaults() -> dict[str, Any]:
    """Return a dictionary of all option attributes defined on :class:`Config`."""
    defaults: dict[str, Any] = {}
    for key, value in Config.__dict__.items():
        if key.startswith("_") or key in _PRIVATE_KEYS:
            continue
        if callable(value) or isinstance(value, (classmethod, staticmethod)):
            continue
        defaults[key] = value
    return defaults


def _merge_configs(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base`` returning a new dict."""
    result: dict[str, Any] = {}
    keys = set(base) | set(override)
    for key in keys:
        if isinstance(base.get(key), dict) and isinstance(override.get(key), dict):
            result[key] = _merge_configs(base[key], override[key])
        elif key in override:
            result[key] = override[key]
        else:
            result[key] = base[key]
    return result


def _apply_overrides(
    args: argparse.Namespace, data: dict[str, Any], prefix: str = ""
) -> None:
    """Apply CLI overrides back onto :class:`Config`."""
    for key, value in data.items():
        full = f"{prefix}{key}"
        dest = full.replace(".", "_")
        override = getattr(args, dest, None)
        if override is not None:
            parts = full.split(".")
            target = Config
            for part in parts[:-1]:
                target = (
                    target.setdefault(part, {})
                    if isinstance(target, dict)
                    else getattr(target, part)
                )
            if isinstance(target, dict):
                target[parts[-1]] = override
            else:
                setattr(target, parts[-1], override)
        elif isinstance(value, dict):
            _apply_overrides(args, value, prefix=f"{full}.")


@dataclass
class MainService:
    """Handle CLI parsing and run one bake."""

    argv: list[str] | None = None

    def run(self) -> None:
        _configure_logging()
        args, cfg = self._parse_args()
        _apply_overrides(args, cfg)
        _apply_log_level()

        try:
            level = load_level(Config.level_file)
        except (OSError, ValueError) as exc:
            logger.error("Could not load level %s: %s", Config.level_file, exc)
            sys.exit(1)

        write_backup(Config.backup_file, level)
        result = render_level(level)
        save_level(Config.output_file, level)
        logger.info(
            "Wrote %d objects over %d frames to %s",
            len(result.objects) - 1,
            result.frames,
            Config.output_file,
        )

    # ------------------------------------------------------------------
    def _parse_args(self) -> tuple[argparse.Namespace, dict[str, Any]]:
        initial = argparse.ArgumentParser(add_help=False)
        initial.add_argument(
            "--config",
            default=Config.input_path("config.json"),
            help="Path to JSON or YAML configuration file",
        )
        initial.add_argument(
            "--level",
            default=Config.level_file,
            help="Path to the level file to bake",
        )
        initial.add_argument(
            "--output",
            default=Config.output_file,
            help="Path the baked level is written to",
        )
        known, _ = initial.parse_known_args(self.argv)

        config_data: dict[str, Any] = {}
        if known.config and os.path.exists(known.config):
            loaded = load_config(known.config)
            for key, value in loaded.items():
                key = Config.ALIASES.get(key, key)
                if hasattr(Config, key) and key not in _PRIVATE_KEYS:
                    config_data[key] = value
            initial.set_defaults(level=Config.level_file, output=Config.output_file)

        parser = argparse.ArgumentParser(
            parents=[initial], description="Bake level lighting into a prefab"
        )
        defaults = _merge_configs(_config_defaults(), config_data)
        _add_config_args(parser, defaults)
        args = parser.parse_args(self.argv)
        Config.level_file = os.path.abspath(args.level)
        Config.output_file = os.path.abspath(args.output)
        return args, defaults


def main(argv: list[str] | None = None) -> None:
    """Run the bake with the provided command line arguments."""

    MainService(argv).run()


if __name__ == "__main__":
    main()
