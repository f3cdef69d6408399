# arkengine

A small 3D scene renderer with a scene-editing library. It draws a scene of
cubes and planes with instanced rendering (one draw call per mesh), lit by a
single point light that is shown as a small cube, through a free-flying
first-person camera. Scenes are stored in a compact binary level file.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Running

```
arkengine
```

This opens an OpenGL 3.3 window and loads the level file (`level.bin` in the
working directory by default). If the file is missing or damaged the scene
starts empty.

Options:

| Option            | Default     | Meaning                          |
|-------------------|-------------|----------------------------------|
| `--width`         | `1920`      | window width in pixels           |
| `--height`        | `1080`      | window height in pixels          |
| `--level PATH`    | `level.bin` | level file to load and save      |

The window caption shows the frame rate, which is capped at 300 frames per
second. The scene is drawn into a 16:9 area centred in the window.

The program reads its shaders and textures relative to the working directory;
they are not part of the package and must be supplied:

- `shaders/firstVert.vert`, `shaders/firstFrag.frag` — the mesh shader. It
  receives the vertex attributes position (0), normal (1), texture coordinates
  (2) and the per-instance model matrix (3–6), and the uniforms `texture1`,
  `texture2`, `projection`, `view`, `lightColor`, `lightPos` and `viewPos`.
- `shaders/lightVert.vert`, `shaders/lightFrag.frag` — the light cube shader,
  with position at attribute 0 and the uniforms `model`, `view`, `projection`,
  `objectColor` and `lightColor`.
- `resources/images/container.jpg` (the default texture) and
  `resources/images/awesomeface.png`.

### Controls

| Key / input | Action                                  |
|-------------|-----------------------------------------|
| W / S       | move forward / backward                 |
| A / D       | strafe left / right                     |
| Q / E       | move up / down                          |
| Mouse       | look around (pitch is limited to ±89°)  |
| Esc         | pause or resume camera control          |
| Ctrl+S      | save the scene to the level file        |
| Ctrl+O      | reload the scene from the level file    |

While paused the mouse cursor is released and the camera does not move.

### What the window does not offer

The window has no on-screen editing panels: there is no object list, no
inspector and no menu. Objects cannot be added, removed or changed from the
window. Those edits are available through `arkengine.ui.Editor` in Python,
after which the level can be saved and opened in the window.

## Library use

The parts that do not need a window can be used on their own.

### Levels

`arkengine.level` holds `ObjectType` (`CUBE`, `PLANE`), `LevelObject` and
`Level`, which is saved and loaded in a binary form: a little-endian unsigned
64-bit object count, followed by one record per object of a 32-bit type code
and ten 32-bit floats (position, rotation angle in degrees, rotation axis,
scale).

```python
from arkengine.level import Level, LevelObject, ObjectType

level = Level()
level.add_object(LevelObject(ObjectType.CUBE, position=(1.0, 0.0, -2.0)))
level.save("level.bin")

loaded = Level()
loaded.load("level.bin")
```

`Level.load` raises `LevelError` when the file cannot be opened, is shorter
than its header, holds more than 10000 objects, ends inside a record or names
an unknown type. In the first three cases the level keeps its objects; in the
others it is left empty.

### Transforms

`arkengine.transforms` works on `numpy` arrays, with points transformed as
`m @ p` and quaternions as `(w, x, y, z)`:

```python
from arkengine.transforms import perspective, look_at, angle_axis, quat_to_mat4

projection = perspective(45.0, 16 / 9, 0.1, 100.0)
view = look_at((0.0, 0.0, 3.0), (0.0, 0.0, 0.0), (0.0, 1.0, 0.0))
rotation = quat_to_mat4(angle_axis(90.0, (0.0, 1.0, 0.0)))
```

`normalize`, `translation` and `scaling` complete the set; `normalize` raises
`ValueError` for a zero vector.

### Camera

```python
from arkengine.camera import Camera, Direction

camera = Camera()
camera.move({Direction.FORWARD}, delta_time=0.016)
camera.on_mouse(400.0, 300.0)
view = camera.view
```

The camera starts at `(0, 0, 3)` looking at the origin, moves at 2.5 units per
second and turns 0.1° per pixel of mouse motion. `reset_mouse` forgets the
previous cursor position, and `on_mouse` does nothing while `paused` is set.

### Meshes, scenes and editing

`arkengine.mesh` provides `Mesh` with position, rotation, scale and model
matrix, and the built-in `cube()` and `plane()`.

`arkengine.scene.Scene` holds `SceneObject`s together with their meshes and
converts to and from a level with `from_level` and `to_level`.

`arkengine.ui.Editor` carries the editing actions on a scene: `select`,
`add_object`, `delete_object`, `edit_selected` (rotation clamped to ±360°,
scale to 0.01–100), `choose_texture` and `current_texture` (among
`TEXTURE_OPTIONS`), and `save` and `load` of its level file. The same module
has `type_to_string`, `scene_labels` (such as `"Cube 1"`, `"Plane 1"`,
`"Cube 2"`) and `fit_image`.

```python
from arkengine.level import ObjectType
from arkengine.scene import Scene
from arkengine.ui import Editor

scene = Scene()
editor = Editor(scene, "level.bin")
editor.add_object(ObjectType.PLANE)
editor.edit_selected((0.0, -1.0, 0.0), 0.0, (0.0, 1.0, 0.0), (10.0, 1.0, 10.0))
editor.save()
```

`arkengine.resources.ResourceManager` caches textures and shader programs, and
`arkengine.shader.Shader` loads, compiles and links a program from two files,
raising `ShaderError` on failure; both need an OpenGL context.