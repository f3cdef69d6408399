"""A small 3D scene renderer with a free-fly camera, instanced meshes, scene editing and binary level files."""

__version__ = "0.1.0"