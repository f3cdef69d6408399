"""GLSL shader programs loaded from vertex and fragment source files."""

from __future__ import annotations

from os import PathLike
from pathlib import Path
from typing import Any, Callable, Optional, Sequence, Union

import numpy as np


class ShaderError(Exception):
    """Raised when shader source cannot be read, compiled or linked."""


def load_shader_code(path: Union[str, PathLike]) -> str:
    """Return the text of a shader source file."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ShaderError(f"shader file could not be read: {path}") from exc


def _compile_program(vertex_code: str, fragment_code: str) -> Any:
    from pyglet.graphics.shader import Shader as StageShader
    from pyglet.graphics.shader import ShaderException, ShaderProgram

    try:
        vertex = StageShader(vertex_code, "vertex")
    except ShaderException as exc:
        raise ShaderError(f"vertex shader compilation failed:\n{exc}") from exc
    try:
        fragment = StageShader(fragment_code, "fragment")
    except ShaderException as exc:
        vertex.delete()
        raise ShaderError(f"fragment shader compilation failed:\n{exc}") from exc
    try:
        return ShaderProgram(vertex, fragment)
    except ShaderException as exc:
        raise ShaderError(f"shader program linking failed:\n{exc}") from exc
    finally:
        vertex.delete()
        fragment.delete()


class Shader:
    """A linked program; uniforms the program does not use are silently ignored."""

    def __init__(
        self,
        vertex_path: Union[str, PathLike],
        fragment_path: Union[str, PathLike],
        *,
        compiler: Optional[Callable[[str, str], Any]] = None,
    ) -> None:
        vertex_code = load_shader_code(vertex_path)
        fragment_code = load_shader_code(fragment_path)
        self.vertex_path = str(vertex_path)
        self.fragment_path = str(fragment_path)
        build = compiler if compiler is not None else _compile_program
        self._program = build(vertex_code, fragment_code)

    @property
    def id(self) -> int:
        return self._program.id

    def use(self) -> None:
        self._program.use()

    def _set(self, name: str, value: Any) -> None:
        if name in self._program.uniforms:
            self._program[name] = value

    def set_bool(self, name: str, value: bool) -> None:
        self._set(name, int(bool(value)))

    def set_int(self, name: str, value: int) -> None:
        self._set(name, int(value))

    def set_float(self, name: str, value: float) -> None:
        self._set(name, float(value))

    def set_mat4(self, name: str, mat: Any) -> None:
        """Upload a 4x4 matrix in the column-major order GLSL expects."""
        arr = np.asarray(mat, dtype=np.float64)
        if arr.shape != (4, 4):
            raise ValueError(f"expected a 4x4 matrix, got shape {arr.shape}")
        self._set(name, tuple(float(c) for c in arr.T.flatten()))

    def set_vec3(self, name: str, vec: Sequence[float]) -> None:
        values = tuple(float(c) for c in vec)
        if len(values) != 3:
            raise ValueError(f"expected 3 components, got {len(values)}")
        self._set(name, values)