import sys
from copy import deepcopy
from pathlib import Path

# Ensure package import for tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from Light_Bake.config import Config
from Light_Bake.engine.logging.logger import reset_metrics


def _config_snapshot() -> dict:
    return {
        key: deepcopy(value)
        for key, value in vars(Config).items()
        if not key.startswith("_")
        and not callable(value)
        and not isinstance(value, (classmethod, staticmethod))
    }


@pytest.fixture(autouse=True)
def _restore_config():
    """Undo any change a test makes to :class:`Config`."""

    saved = _config_snapshot()
    yield
    for key, value in saved.items():
        setattr(Config, key, value)
    reset_metrics()


@pytest.fixture
def output_dir(tmp_path):
    """Point render outputs at a temporary directory."""

    out = tmp_path / "output"
    Config.output_dir = str(out)
    Config.backup_file = str(out / "level-backup.vgd")
    Config.output_file = str(out / "level.vgd")
    return out
