"""Caches for textures and shader programs shared by the whole engine."""

from __future__ import annotations

from typing import Callable, Optional, Protocol

from .shader import Shader


class TextureBackend(Protocol):
    def load(self, path: str) -> int: ...

    def delete(self, texture_id: int) -> None: ...


class _PygletTextures:
    """Uploads image files as mip-mapped, repeating 2D textures."""

    def __init__(self) -> None:
        self._textures: dict = {}

    def load(self, path: str) -> int:
        import pyglet
        from pyglet import gl

        try:
            image = pyglet.image.load(path)
        except (OSError, pyglet.image.codecs.ImageDecodeException):
            return 0
        raw = image.get_image_data()
        fmt = "RGBA" if "A" in raw.format else "RGB"
        # Rows top to bottom, as the texture coordinates of the meshes expect.
        data = raw.get_data(fmt, -raw.width * len(fmt))
        texture = pyglet.image.ImageData(raw.width, raw.height, fmt, data).get_texture()
        gl.glBindTexture(texture.target, texture.id)
        gl.glTexParameteri(texture.target, gl.GL_TEXTURE_WRAP_S, gl.GL_REPEAT)
        gl.glTexParameteri(texture.target, gl.GL_TEXTURE_WRAP_T, gl.GL_REPEAT)
        gl.glTexParameteri(texture.target, gl.GL_TEXTURE_MIN_FILTER, gl.GL_LINEAR_MIPMAP_LINEAR)
        gl.glTexParameteri(texture.target, gl.GL_TEXTURE_MAG_FILTER, gl.GL_LINEAR)
        gl.glGenerateMipmap(texture.target)
        self._textures[texture.id] = texture
        return texture.id

    def delete(self, texture_id: int) -> None:
        texture = self._textures.pop(texture_id, None)
        if texture is not None:
            texture.delete()


class ResourceManager:
    """Loads each texture and shader program once and hands out the cached one."""

    def __init__(
        self,
        texture_backend: Optional[TextureBackend] = None,
        shader_factory: Optional[Callable[[str, str], Shader]] = None,
    ) -> None:
        self._backend = texture_backend if texture_backend is not None else _PygletTextures()
        self._shader_factory = shader_factory if shader_factory is not None else Shader
        self._textures: dict[str, int] = {}
        self._shaders: dict[str, Shader] = {}

    def get_texture(self, path: str) -> int:
        """Return the texture id for ``path``; 0 when the image cannot be loaded."""
        if path in self._textures:
            return self._textures[path]
        texture_id = self._backend.load(path)
        if not texture_id:
            return 0
        self._textures[path] = texture_id
        return texture_id

    def clear(self) -> None:
        """Delete every cached texture."""
        for texture_id in self._textures.values():
            self._backend.delete(texture_id)
        self._textures.clear()

    def get_shader(self, vertex_path: str, fragment_path: str) -> Shader:
        """Return the program built from the two files, building it on first use."""
        key = f"{vertex_path}|{fragment_path}"
        shader = self._shaders.get(key)
        if shader is None:
            shader = self._shader_factory(vertex_path, fragment_path)
            self._shaders[key] = shader
        return shader

    def clear_shaders(self) -> None:
        """Forget every cached shader program."""
        self._shaders.clear()