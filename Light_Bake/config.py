# config.py

import json
import os

import yaml


class Config:
    """Global configuration for a bake, optionally loaded from ``input/config.json``.

    Attributes
    ----------
    max_reflections:
        Number of bounces a ray may take before it is dropped.
    simulation_rate:
        Frames per second. Every frame/time conversion in the pipeline goes
        through this value, so it must not change during a render.
    buffer_precision:
        Size of one grid cell in scene units. Smaller values give a finer
        grid and many more output objects.
    buffer_pixel_blur:
        Multiplier applied to ``buffer_precision`` to size each output point.
    start_time, end_time:
        Rendered window in seconds. Frames ``[start_time * rate, end_time *
        rate)`` are simulated.
    light_presets:
        Mapping of light kind name to ``rays``, ``span`` and ``brightness``.
        Values given here override the built-in presets of
        :class:`~Light_Bake.engine.lights.LightKind`.
    thread_count:
        Worker processes used to cast the rays of a frame. ``1`` casts
        sequentially in the calling process.
    frame_log:
        When ``True`` a JSON line per frame and ``metrics.csv`` are written to
        :attr:`output_dir`.
    """

    # Base directories for package resources
    base_dir = os.path.abspath(os.path.dirname(__file__))
    input_dir = os.path.join(base_dir, "input")
    config_file = os.path.join(input_dir, "config.json")
    level_file = os.path.join(input_dir, "level.vgd")
    output_dir = os.path.join(base_dir, "output")
    backup_file = os.path.join(output_dir, "level-backup.vgd")
    output_file = os.path.join(output_dir, "level.vgd")

    @staticmethod
    def input_path(*parts: str) -> str:
        """Return absolute path under the ``input`` directory."""
        return os.path.join(Config.input_dir, *parts)

    @staticmethod
    def output_path(*parts: str) -> str:
        """Return absolute path under the output directory."""
        return os.path.join(Config.output_dir, *parts)

    # Ray marching
    max_reflections = 5
    min_brightness_before_drop = 0.1
    step_speed = 0.25
    collision_tolerance = 0.125
    max_distance_before_drop = 500.0

    # Changing this changes every frame <-> seconds conversion
    simulation_rate = 60

    # Pixel buffer
    buffer_precision = 0.1
    buffer_pixel_blur = 4
    buffer_width = 192
    buffer_height = 108
    log_buffer_exceeded = True

    # Rendered window, in seconds
    start_time = 0.0
    end_time = 1.0

    # Scene classification
    obstacle_marker = "SCENE"
    light_marker = "LIGHT"
    obstacle_reflectance = 20.0
    default_parent_type = "101"
    # Per-kind overrides, e.g. {"point": {"rays": 720}}
    light_presets: dict = {}

    # Export
    output_spawn_time = 1.0
    object_soft_limit = 10000
    object_hard_limit = 100000
    embed_preview = True
    preview_size = 64
    random_seed: int | None = None

    thread_count = 1
    frame_log = False
    log_verbosity = "info"

    #: Option names used by the editor tooling, mapped to attribute names.
    ALIASES = {
        "maxReflections": "max_reflections",
        "simulationRate": "simulation_rate",
        "bufferPrecision": "buffer_precision",
        "bufferPixelBlur": "buffer_pixel_blur",
        "startTime": "start_time",
        "endTime": "end_time",
    }

    @classmethod
    def frame_range(cls) -> range:
        """Return the simulation frames covered by ``start_time``/``end_time``."""

        first = int(round(cls.start_time * cls.simulation_rate))
        last = int(round(cls.end_time * cls.simulation_rate))
        return range(first, last)

    @classmethod
    def load_from_file(cls, path: str) -> None:
        """Load configuration values from a JSON or YAML file.

        Only keys that already exist as attributes on ``Config`` (or one of
        :attr:`ALIASES`) will be assigned. Nested dictionaries are merged
        recursively when the existing attribute is also a ``dict``. Relative
        paths under the ``paths`` section are resolved relative to the
        directory containing ``path``.

        Parameters
        ----------
        path:
            Path to the configuration file. Files ending in ``.yaml`` or
            ``.yml`` are parsed with :mod:`yaml`, anything else as JSON.
        """
        if not os.path.exists(path):
            raise FileNotFoundError(path)
        data = _read_mapping(path)
        cls.config_file = os.path.abspath(path)
        base_dir = os.path.dirname(cls.config_file)

        paths = data.get("paths")
        if isinstance(paths, dict):
            for key, value in paths.items():
                if hasattr(cls, key):
                    if not os.path.isabs(value):
                        value = os.path.join(base_dir, value)
                    setattr(cls, key, os.path.abspath(value))

        for key, value in data.items():
            key = cls.ALIASES.get(key, key)
            if key == "paths" or key.startswith("_") or not hasattr(cls, key):
                continue
            if key.endswith("_file") and isinstance(value, str):
                if not os.path.isabs(value):
                    value = os.path.join(base_dir, value)
            current = getattr(cls, key)
            if isinstance(current, dict) and isinstance(value, dict):
                _merge_into(current, value)
            else:
                setattr(cls, key, value)


def _merge_into(target: dict, source: dict) -> None:
    for key, value in source.items():
        if isinstance(target.get(key), dict) and isinstance(value, dict):
            _merge_into(target[key], value)
        else:
            target[key] = value


def _read_mapping(path: str) -> dict:
    with open(path) as f:
        if path.endswith((".yaml", ".yml")):
            data = yaml.safe_load(f) or {}
        else:
            data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file {path} must contain a mapping")
    return data


def load_config(path: str | None = None) -> dict:
    """Load configuration from ``path`` and return the data."""
    if path is None:
        path = Config.input_path("config.json")
    Config.load_from_file(path)
    return _read_mapping(path)
