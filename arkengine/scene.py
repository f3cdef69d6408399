"""The live scene: placed objects together with the meshes that draw them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional, Sequence

from .level import Level, LevelObject, ObjectType, Vec3
from .mesh import Mesh, cube, plane

_MESH_FACTORIES: Dict[ObjectType, Callable[[], Mesh]] = {
    ObjectType.CUBE: cube,
    ObjectType.PLANE: plane,
}


def _vec3(values: Sequence[float]) -> Vec3:
    x, y, z = (float(c) for c in values)
    return (x, y, z)


@dataclass
class SceneObject:
    """A placed object, its transform and the mesh built for it."""

    type: ObjectType
    position: Vec3 = (0.0, 0.0, 0.0)
    rotation_angle: float = 0.0
    rotation_axis: Vec3 = (0.0, 1.0, 0.0)
    scale: Vec3 = (1.0, 1.0, 1.0)
    mesh: Optional[Mesh] = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.type = ObjectType(self.type)
        self.position = _vec3(self.position)
        self.rotation_angle = float(self.rotation_angle)
        self.rotation_axis = _vec3(self.rotation_axis)
        self.scale = _vec3(self.scale)


def _apply_transform(mesh: Mesh, obj: SceneObject) -> None:
    # Rotation first: it is the only step that can reject its input.
    mesh.set_rotation(obj.rotation_angle, obj.rotation_axis)
    mesh.set_position(obj.position)
    mesh.set_scale(obj.scale)


def _new_mesh(kind: ObjectType) -> Mesh:
    return _MESH_FACTORIES[kind]()


class Scene:
    """An ordered list of scene objects, convertible to and from a level."""

    def __init__(self) -> None:
        self.objects: List[SceneObject] = []

    def __len__(self) -> int:
        return len(self.objects)

    def __iter__(self) -> Iterator[SceneObject]:
        return iter(self.objects)

    def __getitem__(self, index: int) -> SceneObject:
        return self.objects[index]

    def add_object(
        self,
        type: ObjectType,
        position: Sequence[float] = (0.0, 0.0, 0.0),
        rotation_angle: float = 0.0,
        rotation_axis: Sequence[float] = (0.0, 1.0, 0.0),
        scale: Sequence[float] = (1.0, 1.0, 1.0),
    ) -> SceneObject:
        """Append an object of ``type`` with a freshly built mesh and return it."""
        obj = SceneObject(type, position, rotation_angle, rotation_axis, scale)
        mesh = _new_mesh(obj.type)
        _apply_transform(mesh, obj)
        obj.mesh = mesh
        self.objects.append(obj)
        return obj

    def remove_object_at(self, index: int) -> None:
        """Remove the object at ``index``; an index out of range is ignored."""
        if 0 <= index < len(self.objects):
            del self.objects[index]

    def update_object(self, index: int, obj: SceneObject) -> None:
        """Copy type and transform of ``obj`` onto the object at ``index``.

        A change of type rebuilds the mesh; an index out of range is ignored.
        """
        if not 0 <= index < len(self.objects):
            return
        target = self.objects[index]
        updated = SceneObject(
            obj.type, obj.position, obj.rotation_angle, obj.rotation_axis, obj.scale
        )
        if updated.type != target.type or target.mesh is None:
            mesh = _new_mesh(updated.type)
        else:
            mesh = target.mesh
        _apply_transform(mesh, updated)
        target.type = updated.type
        target.position = updated.position
        target.rotation_angle = updated.rotation_angle
        target.rotation_axis = updated.rotation_axis
        target.scale = updated.scale
        target.mesh = mesh

    def clear(self) -> None:
        self.objects.clear()

    def from_level(self, level: Level) -> None:
        """Replace the scene's contents with the objects of ``level``."""
        self.clear()
        for obj in level.objects:
            self.add_object(
                obj.type, obj.position, obj.rotation_angle, obj.rotation_axis, obj.scale
            )

    def to_level(self) -> Level:
        """Return a level holding the type and transform of every object."""
        return Level(
            objects=[
                LevelObject(
                    type=obj.type,
                    position=obj.position,
                    rotation_angle=obj.rotation_angle,
                    rotation_axis=obj.rotation_axis,
                    scale=obj.scale,
                )
                for obj in self.objects
            ]
        )