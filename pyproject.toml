[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "arkengine"
version = "0.1.0"
description = "A small 3D scene editor and renderer with instanced meshes, a free-fly camera and binary level files"
requires-python = ">=3.10"
keywords = ["3d", "renderer", "opengl", "scene", "level-editor", "camera", "instancing"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: X11 Applications",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
]
dependencies = [
    "numpy",
    "pyglet",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
arkengine = "arkengine.renderer:main"

[tool.hatch.build.targets.wheel]
packages = ["arkengine"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
