"""Level descriptions and their binary file format."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path
from typing import Tuple, Union

Vec3 = Tuple[float, float, float]

MAX_OBJECTS = 10000

_HEADER = struct.Struct("<Q")
_RECORD = struct.Struct("<i10f")


class ObjectType(enum.IntEnum):
    """Kinds of object a level can place."""

    CUBE = 0
    PLANE = 1


class LevelError(Exception):
    """Raised when a level file cannot be read."""


def _vec3(values) -> Vec3:
    x, y, z = (float(c) for c in values)
    return (x, y, z)


@dataclass
class LevelObject:
    """One placed object: its kind and its transform."""

    type: ObjectType
    position: Vec3 = (0.0, 0.0, 0.0)
    rotation_angle: float = 0.0
    rotation_axis: Vec3 = (0.0, 1.0, 0.0)
    scale: Vec3 = (1.0, 1.0, 1.0)

    def __post_init__(self) -> None:
        self.type = ObjectType(self.type)
        self.position = _vec3(self.position)
        self.rotation_angle = float(self.rotation_angle)
        self.rotation_axis = _vec3(self.rotation_axis)
        self.scale = _vec3(self.scale)


@dataclass
class Level:
    """An ordered collection of level objects that can be saved and loaded."""

    objects: list[LevelObject] = field(default_factory=list)

    def add_object(self, obj: LevelObject) -> None:
        self.objects.append(obj)

    def clear(self) -> None:
        self.objects.clear()

    def save(self, filename: Union[str, PathLike]) -> None:
        """Write the level as a count followed by one fixed-size record per object."""
        with open(filename, "wb") as out:
            out.write(_HEADER.pack(len(self.objects)))
            for obj in self.objects:
                out.write(
                    _RECORD.pack(
                        int(obj.type),
                        *obj.position,
                        obj.rotation_angle,
                        *obj.rotation_axis,
                        *obj.scale,
                    )
                )

    def load(self, filename: Union[str, PathLike]) -> None:
        """Replace the objects with those stored in ``filename``.

        A missing file, a short header or a count above ``MAX_OBJECTS`` leaves
        the level untouched; a damaged record leaves it empty.
        """
        try:
            data = Path(filename).read_bytes()
        except OSError as exc:
            raise LevelError(f"cannot open level file {filename}") from exc
        if len(data) < _HEADER.size:
            raise LevelError("level file is too short for its header")
        (count,) = _HEADER.unpack_from(data)
        if count > MAX_OBJECTS:
            raise LevelError(f"level holds {count} objects, more than {MAX_OBJECTS}")

        self.objects.clear()
        loaded = []
        for index in range(count):
            offset = _HEADER.size + index * _RECORD.size
            if offset + _RECORD.size > len(data):
                raise LevelError(f"level file ends inside object {index}")
            type_code, *values = _RECORD.unpack_from(data, offset)
            try:
                kind = ObjectType(type_code)
            except ValueError as exc:
                raise LevelError(f"unknown object type {type_code}") from exc
            loaded.append(
                LevelObject(
                    type=kind,
                    position=values[0:3],
                    rotation_angle=values[3],
                    rotation_axis=values[4:7],
                    scale=values[7:10],
                )
            )
        self.objects.extend(loaded)