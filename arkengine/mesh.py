"""Indexed triangle meshes with a transform, plus the built-in cube and plane."""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np

from .transforms import angle_axis, quat_to_mat4, scaling, translation

FLOATS_PER_VERTEX = 8  # position (3), normal (3), texture coordinates (2)
DEFAULT_TEXTURE = "resources/images/container.jpg"


class Mesh:
    """Vertex and index data, texture paths, a model transform and instance matrices."""

    def __init__(
        self,
        vertices: Sequence[float],
        indices: Sequence[int],
        texture_path1: Optional[str] = None,
        texture_path2: Optional[str] = None,
        *,
        name: str = "Mesh",
    ) -> None:
        flat = np.asarray(vertices, dtype=np.float32).ravel()
        if flat.size % FLOATS_PER_VERTEX:
            raise ValueError(
                f"vertex data length {flat.size} is not a multiple of {FLOATS_PER_VERTEX}"
            )
        self.name = name
        self.vertices = flat.reshape(-1, FLOATS_PER_VERTEX)
        self.indices = np.asarray(indices, dtype=np.uint32).ravel()
        self.texture_path1 = texture_path1
        self.texture_path2 = texture_path2
        self.instance_matrices = np.zeros((0, 4, 4), dtype=np.float32)
        self._position = np.zeros(3)
        self._rotation = np.array([1.0, 0.0, 0.0, 0.0])
        self._scale = np.ones(3)
        self._model = np.eye(4)
        self._prototype: Optional[Mesh] = None

    @property
    def index_count(self) -> int:
        return int(self.indices.size)

    @property
    def instance_count(self) -> int:
        return len(self.instance_matrices)

    @property
    def position(self) -> np.ndarray:
        return self._position.copy()

    @property
    def rotation(self) -> np.ndarray:
        return self._rotation.copy()

    @property
    def scale(self) -> np.ndarray:
        return self._scale.copy()

    @property
    def model_matrix(self) -> np.ndarray:
        return self._model.copy()

    @property
    def prototype(self) -> Mesh:
        """The mesh whose buffers draw this one; the mesh itself unless set."""
        return self._prototype if self._prototype is not None else self

    def set_position(self, pos: Sequence[float]) -> None:
        self._position = np.asarray(pos, dtype=np.float64).copy()
        self._update_model()

    def set_rotation(self, angle_deg: float, axis: Sequence[float]) -> None:
        self._rotation = angle_axis(angle_deg, axis)
        self._update_model()

    def set_scale(self, s: Sequence[float]) -> None:
        self._scale = np.asarray(s, dtype=np.float64).copy()
        self._update_model()

    def set_model_matrices(self, matrices: Sequence) -> None:
        """Set the per-instance model matrices used for instanced drawing."""
        stacked = np.asarray(list(matrices), dtype=np.float32)
        if stacked.size == 0:
            stacked = np.zeros((0, 4, 4), dtype=np.float32)
        if stacked.shape[1:] != (4, 4):
            raise ValueError("instance matrices must be 4x4")
        self.instance_matrices = stacked

    def set_prototype(self, proto: Optional[Mesh]) -> None:
        self._prototype = proto

    def set_texture(self, texture_path: str) -> None:
        self.texture_path1 = texture_path

    def _update_model(self) -> None:
        self._model = translation(self._position) @ quat_to_mat4(self._rotation) @ scaling(self._scale)


_CUBE_VERTICES = (
    # back
    0.5, -0.5, -0.5, 0, 0, -1, 0.0, 1.0,
    -0.5, -0.5, -0.5, 0, 0, -1, 1.0, 1.0,
    -0.5, 0.5, -0.5, 0, 0, -1, 1.0, 0.0,
    0.5, 0.5, -0.5, 0, 0, -1, 0.0, 0.0,
    # front
    -0.5, -0.5, 0.5, 0, 0, 1, 0.0, 1.0,
    0.5, -0.5, 0.5, 0, 0, 1, 1.0, 1.0,
    0.5, 0.5, 0.5, 0, 0, 1, 1.0, 0.0,
    -0.5, 0.5, 0.5, 0, 0, 1, 0.0, 0.0,
    # left
    -0.5, -0.5, -0.5, -1, 0, 0, 0.0, 1.0,
    -0.5, -0.5, 0.5, -1, 0, 0, 1.0, 1.0,
    -0.5, 0.5, 0.5, -1, 0, 0, 1.0, 0.0,
    -0.5, 0.5, -0.5, -1, 0, 0, 0.0, 0.0,
    # right
    0.5, -0.5, 0.5, 1, 0, 0, 0.0, 1.0,
    0.5, -0.5, -0.5, 1, 0, 0, 1.0, 1.0,
    0.5, 0.5, -0.5, 1, 0, 0, 1.0, 0.0,
    0.5, 0.5, 0.5, 1, 0, 0, 0.0, 0.0,
    # bottom
    -0.5, -0.5, -0.5, 0, -1, 0, 0.0, 1.0,
    0.5, -0.5, -0.5, 0, -1, 0, 1.0, 1.0,
    0.5, -0.5, 0.5, 0, -1, 0, 1.0, 0.0,
    -0.5, -0.5, 0.5, 0, -1, 0, 0.0, 0.0,
    # top
    -0.5, 0.5, 0.5, 0, 1, 0, 0.0, 1.0,
    0.5, 0.5, 0.5, 0, 1, 0, 1.0, 1.0,
    0.5, 0.5, -0.5, 0, 1, 0, 1.0, 0.0,
    -0.5, 0.5, -0.5, 0, 1, 0, 0.0, 0.0,
)

_CUBE_INDICES = tuple(
    index
    for face in range(6)
    for index in (4 * face, 4 * face + 1, 4 * face + 2, 4 * face, 4 * face + 2, 4 * face + 3)
)

_PLANE_VERTICES = (
    -0.5, 0.0, -0.5, 0, 1, 0, 0.0, 0.0,
    0.5, 0.0, -0.5, 0, 1, 0, 1.0, 0.0,
    0.5, 0.0, 0.5, 0, 1, 0, 1.0, 1.0,
    -0.5, 0.0, 0.5, 0, 1, 0, 0.0, 1.0,
)

_PLANE_INDICES = (0, 1, 2, 2, 3, 0)


def cube(texture_path: Optional[str] = DEFAULT_TEXTURE) -> Mesh:
    """Return a unit cube centred on the origin, one textured quad per face."""
    return Mesh(_CUBE_VERTICES, _CUBE_INDICES, texture_path, name="Cube")


def plane(texture_path: Optional[str] = DEFAULT_TEXTURE) -> Mesh:
    """Return a unit square in the XZ plane facing up."""
    return Mesh(_PLANE_VERTICES, _PLANE_INDICES, texture_path, name="Plane")