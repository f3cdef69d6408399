import struct

import pytest

from arkengine.level import MAX_OBJECTS, Level, LevelError, LevelObject, ObjectType


def _sample_level():
    level = Level()
    level.add_object(LevelObject(ObjectType.CUBE, (1.0, 2.0, 3.0), 45.0, (0.0, 1.0, 0.0), (2.0, 2.0, 2.0)))
    level.add_object(LevelObject(ObjectType.PLANE, (-0.5, 0.0, 4.25), -90.0, (1.0, 0.0, 0.0), (10.0, 1.0, 10.0)))
    return level


def test_round_trip(tmp_path):
    path = tmp_path / "level.bin"
    original = _sample_level()
    original.save(path)
    loaded = Level()
    loaded.load(path)
    assert loaded.objects == original.objects


def test_file_layout(tmp_path):
    path = tmp_path / "level.bin"
    _sample_level().save(path)
    data = path.read_bytes()
    assert data[:8] == b"\x02" + b"\x00" * 7
    assert len(data) == 8 + 2 * 44
    assert struct.unpack_from("<i", data, 8)[0] == int(ObjectType.CUBE)
    assert struct.unpack_from("<i", data, 8 + 44)[0] == int(ObjectType.PLANE)


def test_empty_level_round_trip(tmp_path):
    path = tmp_path / "empty.bin"
    Level().save(path)
    level = _sample_level()
    level.load(path)
    assert level.objects == []


def test_defaults():
    obj = LevelObject(ObjectType.CUBE)
    assert obj.position == (0.0, 0.0, 0.0)
    assert obj.rotation_axis == (0.0, 1.0, 0.0)
    assert obj.scale == (1.0, 1.0, 1.0)


def test_missing_file_raises_and_keeps_objects(tmp_path):
    level = _sample_level()
    with pytest.raises(LevelError):
        level.load(tmp_path / "missing.bin")
    assert len(level.objects) == 2


def test_too_many_objects_rejected(tmp_path):
    path = tmp_path / "big.bin"
    path.write_bytes(struct.pack("<Q", MAX_OBJECTS + 1))
    level = _sample_level()
    with pytest.raises(LevelError):
        level.load(path)
    assert len(level.objects) == 2


def test_short_header_rejected(tmp_path):
    path = tmp_path / "short.bin"
    path.write_bytes(b"\x01\x00")
    level = _sample_level()
    with pytest.raises(LevelError):
        level.load(path)
    assert len(level.objects) == 2


def test_truncated_record_clears_objects(tmp_path):
    path = tmp_path / "level.bin"
    _sample_level().save(path)
    path.write_bytes(path.read_bytes()[:-4])
    level = _sample_level()
    with pytest.raises(LevelError):
        level.load(path)
    assert level.objects == []


def test_unknown_type_rejected(tmp_path):
    path = tmp_path / "bad.bin"
    path.write_bytes(struct.pack("<Q", 1) + struct.pack("<i10f", 7, *([0.0] * 10)))
    level = Level()
    with pytest.raises(LevelError):
        level.load(path)
    assert level.objects == []


def test_clear_empties_level():
    level = _sample_level()
    level.clear()
    assert level.objects == []