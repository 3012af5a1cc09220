import json

import pytest

from Light_Bake.level.io import load_level, save_level, write_backup
from Light_Bake.level.model import LevelModel, find_object
from tests.levels import wall_level


def test_load_and_save_roundtrip(tmp_path):
    path = tmp_path / "level.vgd"
    path.write_text(json.dumps(wall_level()))
    level = load_level(str(path))
    assert [o["id"] for o in level.objects] == ["wall", "lamp", "deco"]
    assert level.extra == {"themes": [{"name": "kept"}]}

    out = tmp_path / "out" / "level.vgd"
    save_level(str(out), level)
    assert json.loads(out.read_text()) == wall_level()


def test_missing_prefabs_defaults_to_empty():
    level = LevelModel.from_dict({"objects": []})
    assert level.prefabs == []
    assert level.to_dict() == {"objects": [], "prefabs": []}


def test_backup_is_written(tmp_path):
    level = LevelModel.from_dict(wall_level())
    backup = tmp_path / "backup" / "level-backup.vgd"
    write_backup(str(backup), level)
    assert json.loads(backup.read_text())["objects"][0]["id"] == "wall"


def test_find_object():
    level = LevelModel.from_dict(wall_level())
    assert level.find_object("lamp")["n"] == "LIGHT point"
    assert level.find_object("missing") is None


def test_find_object_returns_first_match():
    objects = [{"id": "a", "n": "first"}, {"id": "a", "n": "second"}, {"n": "no id"}]
    assert find_object(objects, "a")["n"] == "first"
    assert find_object(objects, "b") is None


@pytest.mark.parametrize(
    "document",
    [
        [],
        {"prefabs": []},
        {"objects": {}},
        {"objects": [1]},
        {"objects": [], "prefabs": {}},
    ],
)
def test_invalid_documents_are_rejected(tmp_path, document):
    path = tmp_path / "level.vgd"
    path.write_text(json.dumps(document))
    with pytest.raises(ValueError):
        load_level(str(path))


def test_unparseable_document_raises(tmp_path):
    path = tmp_path / "level.vgd"
    path.write_text("{not json")
    with pytest.raises(json.JSONDecodeError):
        load_level(str(path))
