"""Editor state and the layout rules of the editing interface."""

from __future__ import annotations

from collections import Counter
from os import PathLike
from typing import List, Optional, Sequence, Tuple, Union

from .level import Level, ObjectType
from .scene import Scene, SceneObject

TEXTURE_OPTIONS = (
    "resources/images/awesomeface.png",
    "resources/images/container.jpg",
)
ROTATION_RANGE = (-360.0, 360.0)
SCALE_RANGE = (0.01, 100.0)
DEFAULT_LEVEL_PATH = "level.bin"


def type_to_string(type) -> str:
    """Return the display name of an object type."""
    try:
        kind = ObjectType(type)
    except ValueError:
        return "Unknown"
    return {ObjectType.CUBE: "Cube", ObjectType.PLANE: "Plane"}.get(kind, "Unknown")


def fit_image(
    avail_width: float, avail_height: float, tex_width: float, tex_height: float
) -> Tuple[float, float]:
    """Return the largest size with the texture's aspect ratio that fits the area."""
    if avail_width <= 0 or avail_height <= 0:
        raise ValueError("available area must be positive")
    if tex_width <= 0 or tex_height <= 0:
        raise ValueError("texture size must be positive")
    avail_aspect = avail_width / avail_height
    tex_aspect = tex_width / tex_height
    if avail_aspect > tex_aspect:
        return (avail_height * tex_aspect, float(avail_height))
    return (float(avail_width), avail_width / tex_aspect)


def scene_labels(scene: Scene) -> List[str]:
    """Return list labels such as "Cube 1", numbered per type in scene order."""
    counts: Counter = Counter()
    labels = []
    for obj in scene:
        counts[obj.type] += 1
        labels.append(f"{type_to_string(obj.type)} {counts[obj.type]}")
    return labels


def _clamp(value: float, bounds: Tuple[float, float]) -> float:
    low, high = bounds
    return max(low, min(high, float(value)))


class Editor:
    """The selection and the edits the interface applies to a scene."""

    def __init__(
        self, scene: Scene, level_path: Union[str, PathLike] = DEFAULT_LEVEL_PATH
    ) -> None:
        self.scene = scene
        self.level_path = level_path
        self.selected_index = 0
        self.texture_index = 0

    @property
    def selected(self) -> Optional[SceneObject]:
        """The selected object, or None when the selection is not in the scene."""
        if 0 <= self.selected_index < len(self.scene):
            return self.scene[self.selected_index]
        return None

    def _require_selected(self) -> SceneObject:
        obj = self.selected
        if obj is None:
            raise IndexError("no object selected")
        return obj

    def select(self, index: int) -> None:
        if not 0 <= index < len(self.scene):
            raise IndexError(f"no object at index {index}")
        self.selected_index = index

    def add_object(self, type: ObjectType) -> SceneObject:
        """Add a default object of ``type`` and select it."""
        obj = self.scene.add_object(type)
        self.selected_index = len(self.scene) - 1
        return obj

    def delete_object(self, index: int) -> None:
        """Remove an object, keeping the selection within the scene."""
        self.scene.remove_object_at(index)
        if self.selected_index >= len(self.scene):
            self.selected_index = len(self.scene) - 1

    def edit_selected(
        self,
        position: Sequence[float],
        rotation_angle: float,
        rotation_axis: Sequence[float],
        scale: Sequence[float],
    ) -> None:
        """Apply new transform values to the selection, clamped as the widgets clamp."""
        obj = self._require_selected()
        edited = SceneObject(
            obj.type,
            position,
            _clamp(rotation_angle, ROTATION_RANGE),
            rotation_axis,
            tuple(_clamp(c, SCALE_RANGE) for c in scale),
        )
        self.scene.update_object(self.selected_index, edited)

    def choose_texture(self, option: Union[int, str]) -> None:
        """Give the selected mesh one of ``TEXTURE_OPTIONS``, by index or path."""
        if isinstance(option, str):
            if option not in TEXTURE_OPTIONS:
                raise ValueError(f"unknown texture option {option!r}")
            index = TEXTURE_OPTIONS.index(option)
        else:
            index = int(option)
            if not 0 <= index < len(TEXTURE_OPTIONS):
                raise ValueError(f"texture option {index} out of range")
        obj = self._require_selected()
        if obj.mesh is None:
            raise ValueError("selected object has no mesh")
        obj.mesh.set_texture(TEXTURE_OPTIONS[index])
        self.texture_index = index

    def current_texture(self) -> Optional[str]:
        """Return the option the selected mesh uses, or None when it is none of them."""
        obj = self.selected
        if obj is None or obj.mesh is None:
            return None
        path = obj.mesh.texture_path1
        if path in TEXTURE_OPTIONS:
            self.texture_index = TEXTURE_OPTIONS.index(path)
            return path
        return None

    def save(self) -> None:
        self.scene.to_level().save(self.level_path)

    def load(self) -> None:
        """Replace the scene with the saved level; on a LevelError it stays as it was."""
        level = Level()
        level.load(self.level_path)
        self.scene.from_level(level)