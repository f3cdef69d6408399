"""A free-flying first-person camera driven by movement keys and the mouse."""

from __future__ import annotations

import enum
import math
from typing import Iterable

import numpy as np

from .transforms import look_at, normalize

SPEED = 2.5
MOUSE_SENSITIVITY = 0.1
PITCH_LIMIT = 89.0


class Direction(enum.Enum):
    """Movement directions; by default bound to W, S, A, D, Q and E."""

    FORWARD = "forward"
    BACKWARD = "backward"
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"


class Camera:
    """Position, viewing direction and view matrix of the observer."""

    def __init__(self) -> None:
        self.position = np.array([0.0, 0.0, 3.0])
        self.front = normalize(np.zeros(3) - self.position)
        self.up = np.array([0.0, 1.0, 0.0])
        self.yaw = -90.0
        self.pitch = 0.0
        self.last_x = 0.0
        self.last_y = 0.0
        self.first_mouse = True
        self.paused = False
        self.view = np.eye(4)
        self.update_view_matrix()

    @property
    def view_matrix(self) -> np.ndarray:
        return self.view.copy()

    def update_view_matrix(self) -> None:
        self.view = look_at(self.position, self.position + self.front, self.up)

    def move(self, directions: Iterable[Direction], delta_time: float) -> None:
        """Move along the held directions at a fixed speed, scaled by ``delta_time``."""
        right = normalize(np.cross(self.front, self.up))
        offsets = {
            Direction.FORWARD: self.front,
            Direction.BACKWARD: -self.front,
            Direction.LEFT: -right,
            Direction.RIGHT: right,
            Direction.UP: self.up,
            Direction.DOWN: -self.up,
        }
        movement = np.zeros(3)
        for direction in {Direction(d) for d in directions}:
            movement = movement + offsets[direction]
        if np.linalg.norm(movement) > 0.0:
            self.position = self.position + normalize(movement) * (SPEED * delta_time)
        self.update_view_matrix()

    def on_mouse(self, xpos: float, ypos: float) -> None:
        """Turn the camera by the cursor's motion since the previous call."""
        if self.paused:
            return
        if self.first_mouse:
            self.last_x = xpos
            self.last_y = ypos
            self.first_mouse = False

        xoffset = (xpos - self.last_x) * MOUSE_SENSITIVITY
        yoffset = (self.last_y - ypos) * MOUSE_SENSITIVITY
        self.last_x = xpos
        self.last_y = ypos

        self.yaw += xoffset
        self.pitch = max(-PITCH_LIMIT, min(PITCH_LIMIT, self.pitch + yoffset))

        yaw = math.radians(self.yaw)
        pitch = math.radians(self.pitch)
        self.front = normalize(
            [math.cos(yaw) * math.cos(pitch), math.sin(pitch), math.sin(yaw) * math.cos(pitch)]
        )
        self.update_view_matrix()

    def reset_mouse(self, xpos: float, ypos: float) -> None:
        """Forget earlier cursor positions so the next motion causes no jump."""
        self.last_x = xpos
        self.last_y = ypos
        self.first_mouse = True