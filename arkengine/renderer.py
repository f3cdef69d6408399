"""The frame loop: window, input, drawing the scene and pacing the frames."""

from __future__ import annotations

import argparse
import time
from typing import Dict, Iterable, List, Optional, Sequence

import numpy as np

from .camera import Camera, Direction
from .level import Level, LevelError
from .mesh import Mesh
from .resources import ResourceManager
from .scene import Scene, SceneObject
from .shader import Shader
from .transforms import perspective, scaling, translation
from .ui import Editor, fit_image

TARGET_FPS = 300.0
VIEWPORT_SIZE = (1280, 720)
FPS_TITLE = "3D Renderer - FPS: {}"
LIGHT_POS = (1.2, 1.0, 2.0)
LIGHT_SCALE = 0.2
LIGHT_COLOR = (1.0, 1.0, 1.0)
CLEAR_COLOR = (0.1, 0.1, 0.1, 1.0)
FIELD_OF_VIEW = 45.0
NEAR_PLANE = 0.1
FAR_PLANE = 100.0
MESH_VERTEX_SHADER = "shaders/firstVert.vert"
MESH_FRAGMENT_SHADER = "shaders/firstFrag.frag"
LIGHT_VERTEX_SHADER = "shaders/lightVert.vert"
LIGHT_FRAGMENT_SHADER = "shaders/lightFrag.frag"
DEFAULT_LEVEL_PATH = "level.bin"

_FLOAT_SIZE = 4
_MAT4_SIZE = 16 * _FLOAT_SIZE

_LIGHT_VERTICES = np.array(
    [
        -0.5, -0.5, -0.5, 0.5, -0.5, -0.5, 0.5, 0.5, -0.5, 0.5, 0.5, -0.5, -0.5, 0.5, -0.5, -0.5, -0.5, -0.5,
        -0.5, -0.5, 0.5, 0.5, -0.5, 0.5, 0.5, 0.5, 0.5, 0.5, 0.5, 0.5, -0.5, 0.5, 0.5, -0.5, -0.5, 0.5,
        -0.5, 0.5, 0.5, -0.5, 0.5, -0.5, -0.5, -0.5, -0.5, -0.5, -0.5, -0.5, -0.5, -0.5, 0.5, -0.5, 0.5, 0.5,
        0.5, 0.5, 0.5, 0.5, 0.5, -0.5, 0.5, -0.5, -0.5, 0.5, -0.5, -0.5, 0.5, -0.5, 0.5, 0.5, 0.5, 0.5,
        -0.5, -0.5, -0.5, 0.5, -0.5, -0.5, 0.5, -0.5, 0.5, 0.5, -0.5, 0.5, -0.5, -0.5, 0.5, -0.5, -0.5, -0.5,
        -0.5, 0.5, -0.5, 0.5, 0.5, -0.5, 0.5, 0.5, 0.5, 0.5, 0.5, 0.5, -0.5, 0.5, 0.5, -0.5, 0.5, -0.5,
    ],
    dtype=np.float32,
)


def group_by_prototype(objects: Iterable[SceneObject]) -> Dict[Mesh, List[np.ndarray]]:
    """Collect model matrices per prototype mesh, in order of first appearance.

    Objects without a mesh are skipped.
    """
    groups: Dict[Mesh, List[np.ndarray]] = {}
    for obj in objects:
        if obj.mesh is None:
            continue
        groups.setdefault(obj.mesh.prototype, []).append(obj.mesh.model_matrix)
    return groups


def frame_wait(frame_start: float, now: float, target_fps: float) -> float:
    """Return how long to wait so a frame begun at ``frame_start`` lasts 1/target_fps."""
    if target_fps <= 0.0:
        return 0.0
    remaining = 1.0 / target_fps - (now - frame_start)
    return remaining if remaining > 0.0 else 0.0


class FpsCounter:
    """Counts frames and reports the count once per elapsed second."""

    def __init__(self, start: float = 0.0) -> None:
        self.last_time = float(start)
        self.frames = 0

    def tick(self, now: float) -> Optional[int]:
        """Count a frame; return the frames of the last second once it has passed."""
        self.frames += 1
        if now - self.last_time >= 1.0:
            count = self.frames
            self.frames = 0
            self.last_time += 1.0
            return count
        return None


class PauseToggle:
    """Flips a paused flag each time a key goes from released to pressed."""

    def __init__(self) -> None:
        self.paused = False
        self._was_pressed = False

    def update(self, pressed: bool) -> bool:
        """Feed the key's current state; return True when the flag flipped."""
        pressed = bool(pressed)
        toggled = pressed and not self._was_pressed
        if toggled:
            self.paused = not self.paused
        self._was_pressed = pressed
        return toggled


class _GpuMesh:
    """Vertex, index and instance buffers of one prototype mesh."""

    def __init__(self, mesh: Mesh) -> None:
        from pyglet import gl
        from pyglet.graphics.vertexarray import VertexArray
        from pyglet.graphics.vertexbuffer import BufferObject

        vertices = np.ascontiguousarray(mesh.vertices, dtype=np.float32)
        indices = np.ascontiguousarray(mesh.indices, dtype=np.uint32)
        self.index_count = int(indices.size)
        self.instance_count = 0
        self.vbo = BufferObject(max(vertices.nbytes, 1))
        self.ebo = BufferObject(max(indices.nbytes, 1))
        self.instances = BufferObject(_MAT4_SIZE)
        self.vao = VertexArray()

        self.vao.bind()
        gl.glBindBuffer(gl.GL_ARRAY_BUFFER, self.vbo.id)
        gl.glBufferData(gl.GL_ARRAY_BUFFER, vertices.nbytes, vertices.ctypes.data, gl.GL_STATIC_DRAW)
        gl.glBindBuffer(gl.GL_ELEMENT_ARRAY_BUFFER, self.ebo.id)
        gl.glBufferData(gl.GL_ELEMENT_ARRAY_BUFFER, indices.nbytes, indices.ctypes.data, gl.GL_STATIC_DRAW)
        stride = 8 * _FLOAT_SIZE
        for location, (size, offset) in enumerate(((3, 0), (3, 3), (2, 6))):
            gl.glVertexAttribPointer(location, size, gl.GL_FLOAT, gl.GL_FALSE, stride, offset * _FLOAT_SIZE)
            gl.glEnableVertexAttribArray(location)
        gl.glBindBuffer(gl.GL_ARRAY_BUFFER, self.instances.id)
        for column in range(4):
            location = 3 + column
            gl.glVertexAttribPointer(
                location, 4, gl.GL_FLOAT, gl.GL_FALSE, _MAT4_SIZE, column * 4 * _FLOAT_SIZE
            )
            gl.glEnableVertexAttribArray(location)
            gl.glVertexAttribDivisor(location, 1)
        self.vao.unbind()

    def upload_instances(self, matrices: np.ndarray) -> None:
        from pyglet import gl

        # Each matrix is stored column by column, as the shader reads it.
        data = np.ascontiguousarray(np.asarray(matrices).transpose(0, 2, 1), dtype=np.float32)
        self.instance_count = len(data)
        gl.glBindBuffer(gl.GL_ARRAY_BUFFER, self.instances.id)
        gl.glBufferData(gl.GL_ARRAY_BUFFER, data.nbytes, data.ctypes.data, gl.GL_DYNAMIC_DRAW)

    def draw(self, texture1: int, texture2: int) -> None:
        from pyglet import gl

        self.vao.bind()
        if texture1:
            gl.glActiveTexture(gl.GL_TEXTURE0)
            gl.glBindTexture(gl.GL_TEXTURE_2D, texture1)
        if texture2:
            gl.glActiveTexture(gl.GL_TEXTURE1)
            gl.glBindTexture(gl.GL_TEXTURE_2D, texture2)
        gl.glDrawElementsInstanced(
            gl.GL_TRIANGLES, self.index_count, gl.GL_UNSIGNED_INT, None, self.instance_count
        )
        self.vao.unbind()

    def delete(self) -> None:
        self.vao.delete()
        self.vbo.delete()
        self.ebo.delete()
        self.instances.delete()


class _LightCube:
    """The small cube drawn at the light's position."""

    def __init__(self) -> None:
        from pyglet import gl
        from pyglet.graphics.vertexarray import VertexArray
        from pyglet.graphics.vertexbuffer import BufferObject

        self.vbo = BufferObject(_LIGHT_VERTICES.nbytes)
        self.vao = VertexArray()
        self.vao.bind()
        gl.glBindBuffer(gl.GL_ARRAY_BUFFER, self.vbo.id)
        gl.glBufferData(
            gl.GL_ARRAY_BUFFER, _LIGHT_VERTICES.nbytes, _LIGHT_VERTICES.ctypes.data, gl.GL_STATIC_DRAW
        )
        gl.glVertexAttribPointer(0, 3, gl.GL_FLOAT, gl.GL_FALSE, 3 * _FLOAT_SIZE, 0)
        gl.glEnableVertexAttribArray(0)
        self.vao.unbind()

    def draw(self) -> None:
        from pyglet import gl

        self.vao.bind()
        gl.glDrawArrays(gl.GL_TRIANGLES, 0, len(_LIGHT_VERTICES) // 3)
        self.vao.unbind()

    def delete(self) -> None:
        self.vao.delete()
        self.vbo.delete()


class Renderer:
    """Runs the frame loop for a window until it is closed."""

    def __init__(
        self,
        window,
        scene: Scene,
        shader: Shader,
        camera: Camera,
        resources: ResourceManager,
        editor: Optional[Editor] = None,
        target_fps: float = TARGET_FPS,
    ) -> None:
        from pyglet import gl
        from pyglet.window import key

        self.window = window
        self.scene = scene
        self.shader = shader
        self.camera = camera
        self.resources = resources
        self.editor = editor if editor is not None else Editor(scene)
        self.target_fps = target_fps
        self.pause = PauseToggle()
        self.fps = FpsCounter(time.perf_counter())
        self.keys = key.KeyStateHandler()
        self._cursor = [0.0, 0.0]
        self._gpu_meshes: Dict[Mesh, _GpuMesh] = {}
        self._last_frame = time.perf_counter()
        self._delta_time = 0.0

        window.push_handlers(self.keys)
        window.push_handlers(on_mouse_motion=self._on_mouse_motion, on_key_press=self._on_key_press)
        window.set_exclusive_mouse(True)

        shader.use()
        shader.set_int("texture1", 0)
        shader.set_int("texture2", 1)
        gl.glEnable(gl.GL_DEPTH_TEST)
        self._light = _LightCube()

    def _on_mouse_motion(self, x, y, dx, dy) -> None:
        # Track a virtual cursor with y growing downwards, as the camera expects.
        self._cursor[0] += dx
        self._cursor[1] -= dy
        self.camera.on_mouse(self._cursor[0], self._cursor[1])

    def _on_key_press(self, symbol, modifiers):
        from pyglet.window import key

        if not modifiers & key.MOD_CTRL:
            return None
        if symbol == key.S:
            self.editor.save()
        elif symbol == key.O:
            try:
                self.editor.load()
            except LevelError:
                pass
        else:
            return None
        return True

    def _input(self) -> None:
        from pyglet.window import key

        if self.pause.update(self.keys[key.ESCAPE]):
            self.camera.paused = self.pause.paused
            if self.pause.paused:
                self.window.set_exclusive_mouse(False)
            else:
                self.window.set_exclusive_mouse(True)
                self.camera.reset_mouse(*self._cursor)
        if self.pause.paused:
            return
        bindings = {
            key.W: Direction.FORWARD,
            key.S: Direction.BACKWARD,
            key.A: Direction.LEFT,
            key.D: Direction.RIGHT,
            key.Q: Direction.UP,
            key.E: Direction.DOWN,
        }
        held = [direction for symbol, direction in bindings.items() if self.keys[symbol]]
        self.camera.move(held, self._delta_time)

    def _gpu_mesh(self, mesh: Mesh) -> _GpuMesh:
        gpu = self._gpu_meshes.get(mesh)
        if gpu is None:
            gpu = _GpuMesh(mesh)
            self._gpu_meshes[mesh] = gpu
        return gpu

    def _texture(self, path: Optional[str]) -> int:
        return self.resources.get_texture(path) if path else 0

    def _draw_frame(self) -> None:
        from pyglet import gl

        fb_width, fb_height = self.window.get_framebuffer_size()
        gl.glClearColor(*CLEAR_COLOR)
        gl.glClear(gl.GL_COLOR_BUFFER_BIT | gl.GL_DEPTH_BUFFER_BIT)
        if fb_width <= 0 or fb_height <= 0:
            return
        view_w, view_h = fit_image(fb_width, fb_height, *VIEWPORT_SIZE)
        gl.glViewport(
            int((fb_width - view_w) / 2), int((fb_height - view_h) / 2), int(view_w), int(view_h)
        )
        projection = perspective(FIELD_OF_VIEW, fb_width / fb_height, NEAR_PLANE, FAR_PLANE)
        view = self.camera.view_matrix

        light_shader = self.resources.get_shader(LIGHT_VERTEX_SHADER, LIGHT_FRAGMENT_SHADER)
        light_shader.use()
        light_shader.set_mat4("model", translation(LIGHT_POS) @ scaling((LIGHT_SCALE,) * 3))
        light_shader.set_mat4("view", view)
        light_shader.set_mat4("projection", projection)
        light_shader.set_vec3("objectColor", LIGHT_COLOR)
        light_shader.set_vec3("lightColor", LIGHT_COLOR)
        self._light.draw()

        shader = self.shader
        shader.use()
        shader.set_int("texture1", 0)
        shader.set_int("texture2", 1)
        shader.set_mat4("projection", projection)
        shader.set_mat4("view", view)
        shader.set_vec3("lightColor", LIGHT_COLOR)
        shader.set_vec3("lightPos", LIGHT_POS)
        shader.set_vec3("viewPos", self.camera.position)
        gl.glPolygonMode(gl.GL_FRONT_AND_BACK, gl.GL_FILL)

        for prototype, matrices in group_by_prototype(self.scene).items():
            prototype.set_model_matrices(matrices)
            gpu = self._gpu_mesh(prototype)
            gpu.upload_instances(prototype.instance_matrices)
            gpu.draw(self._texture(prototype.texture_path1), self._texture(prototype.texture_path2))

        live = {obj.mesh.prototype for obj in self.scene if obj.mesh is not None}
        for stale in [mesh for mesh in self._gpu_meshes if mesh not in live]:
            self._gpu_meshes.pop(stale).delete()

    def render(self) -> None:
        """Draw frames until the window is closed, then free the GPU objects."""
        try:
            while not self.window.has_exit:
                frame_start = time.perf_counter()
                self._delta_time = frame_start - self._last_frame
                self._last_frame = frame_start

                count = self.fps.tick(frame_start)
                if count is not None:
                    self.window.set_caption(FPS_TITLE.format(count))

                self.window.switch_to()
                self.window.dispatch_events()
                if self.window.has_exit:
                    break
                self._input()
                self._draw_frame()
                self.window.flip()

                wait = frame_wait(frame_start, time.perf_counter(), self.target_fps)
                if wait > 0.0:
                    time.sleep(wait)
        finally:
            for gpu in self._gpu_meshes.values():
                gpu.delete()
            self._gpu_meshes.clear()
            self._light.delete()


class ArkEngine:
    """Sets up window, camera, shaders, scene and editor, then runs the renderer."""

    def __init__(
        self, width: int, height: int, title: str, level_path: str = DEFAULT_LEVEL_PATH
    ) -> None:
        self.width = width
        self.height = height
        self.title = title
        self.level_path = level_path

    def run(self) -> None:
        import pyglet

        config = pyglet.gl.Config(
            major_version=3,
            minor_version=3,
            forward_compatible=True,
            double_buffer=True,
            depth_size=24,
            alpha_size=0,
        )
        window = pyglet.window.Window(
            self.width, self.height, self.title, config=config, resizable=True, vsync=False
        )
        resources = ResourceManager()
        try:
            camera = Camera()
            shader = resources.get_shader(MESH_VERTEX_SHADER, MESH_FRAGMENT_SHADER)
            level = Level()
            try:
                level.load(self.level_path)
            except LevelError:
                pass
            scene = Scene()
            scene.from_level(level)
            editor = Editor(scene, self.level_path)
            Renderer(window, scene, shader, camera, resources, editor).render()
        finally:
            resources.clear()
            resources.clear_shaders()
            window.close()


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="arkengine", description="Interactive 3D scene editor.")
    parser.add_argument("--width", type=int, default=1920)
    parser.add_argument("--height", type=int, default=1080)
    parser.add_argument("--level", default=DEFAULT_LEVEL_PATH, help="level file to load and save")
    args = parser.parse_args(argv)
    ArkEngine(args.width, args.height, "3D Renderer", args.level).run()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())