"""Vector, quaternion and 4x4 matrix helpers for a right-handed OpenGL world.

Matrices use the usual mathematical layout: a point ``p`` is transformed as
``m @ p``, so the translation part lives in the last column.  Quaternions are
``(w, x, y, z)`` arrays.
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

Vector = Sequence[float]


def normalize(v: Vector) -> np.ndarray:
    """Return ``v`` scaled to unit length."""
    arr = np.asarray(v, dtype=np.float64)
    length = float(np.linalg.norm(arr))
    if length == 0.0:
        raise ValueError("cannot normalize a zero-length vector")
    return arr / length


def translation(v: Vector) -> np.ndarray:
    """Return the matrix that moves points by ``v``."""
    m = np.eye(4)
    m[:3, 3] = np.asarray(v, dtype=np.float64)
    return m


def scaling(v: Vector) -> np.ndarray:
    """Return the matrix that scales each axis by the matching entry of ``v``."""
    x, y, z = (float(c) for c in v)
    return np.diag([x, y, z, 1.0])


def angle_axis(angle_deg: float, axis: Vector) -> np.ndarray:
    """Return the unit quaternion rotating ``angle_deg`` degrees about ``axis``."""
    unit = normalize(axis)
    half = math.radians(angle_deg) / 2.0
    s = math.sin(half)
    return np.array([math.cos(half), unit[0] * s, unit[1] * s, unit[2] * s])


def quat_to_mat4(q: Sequence[float]) -> np.ndarray:
    """Return the rotation matrix of the quaternion ``(w, x, y, z)``."""
    w, x, y, z = (float(c) for c in q)
    xx, yy, zz = x * x, y * y, z * z
    xy, xz, yz = x * y, x * z, y * z
    wx, wy, wz = w * x, w * y, w * z
    return np.array(
        [
            [1 - 2 * (yy + zz), 2 * (xy - wz), 2 * (xz + wy), 0.0],
            [2 * (xy + wz), 1 - 2 * (xx + zz), 2 * (yz - wx), 0.0],
            [2 * (xz - wy), 2 * (yz + wx), 1 - 2 * (xx + yy), 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


def perspective(fovy_deg: float, aspect: float, near: float, far: float) -> np.ndarray:
    """Return a perspective projection mapping depth ``near..far`` onto ``-1..1``."""
    if aspect == 0:
        raise ValueError("aspect ratio must not be zero")
    if near == far:
        raise ValueError("near and far planes must differ")
    f = 1.0 / math.tan(math.radians(fovy_deg) / 2.0)
    m = np.zeros((4, 4))
    m[0, 0] = f / aspect
    m[1, 1] = f
    m[2, 2] = -(far + near) / (far - near)
    m[2, 3] = -(2.0 * far * near) / (far - near)
    m[3, 2] = -1.0
    return m


def look_at(eye: Vector, center: Vector, up: Vector) -> np.ndarray:
    """Return a view matrix placing the eye at the origin looking down ``-z``."""
    eye_v = np.asarray(eye, dtype=np.float64)
    forward = normalize(np.asarray(center, dtype=np.float64) - eye_v)
    side = normalize(np.cross(forward, np.asarray(up, dtype=np.float64)))
    true_up = np.cross(side, forward)
    m = np.eye(4)
    m[0, :3] = side
    m[1, :3] = true_up
    m[2, :3] = -forward
    m[0, 3] = -float(np.dot(side, eye_v))
    m[1, 3] = -float(np.dot(true_up, eye_v))
    m[2, 3] = float(np.dot(forward, eye_v))
    return m