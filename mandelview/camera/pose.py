from __future__ import annotations

import math
from typing import Optional, Sequence

import numpy as np

def _vec3(v: Optional[Sequence[float]], default: Sequence[float]) -> np.ndarray:
    if v is None:
        v = default
    arr = np.array(v, dtype=float)
    if arr.shape != (3,):
        raise ValueError(f"expected a 3-component vector, got shape {arr.shape}")
    return arr

def _normalise(v: np.ndarray) -> np.ndarray:
    length = float(np.linalg.norm(v))
    if length == 0.0:
        return v
    return v / length


class CameraPose:
    """A position plus an up/side/forward orientation basis.

    Rotations renormalise the two axes they touch. ``interpolate`` blends
    component-wise and does not renormalise, so an interpolated basis is
    only approximately orthonormal.
    """

    def __init__(
        self,
        position: Optional[Sequence[float]] = None,
        up: Optional[Sequence[float]] = None,
        side: Optional[Sequence[float]] = None,
        forward: Optional[Sequence[float]] = None,
    ) -> None:
        self.position = _vec3(position, (0.0, 0.0, 0.0))
        self.up = _vec3(up, (0.0, 1.0, 0.0))
        self.side = _vec3(side, (1.0, 0.0, 0.0))
        self.forward = _vec3(forward, (0.0, 0.0, 1.0))

    def __repr__(self) -> str:
        return (f"CameraPose(position={self.position.tolist()}, up={self.up.tolist()}, "
                f"side={self.side.tolist()}, forward={self.forward.tolist()})")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CameraPose):
            return NotImplemented
        return (np.array_equal(self.position, other.position)
                and np.array_equal(self.up, other.up)
                and np.array_equal(self.side, other.side)
                and np.array_equal(self.forward, other.forward))

    __hash__ = None  # mutable

    def copy(self) -> "CameraPose":
        return CameraPose(self.position, self.up, self.side, self.forward)

    def allclose(self, other: "CameraPose", atol: float = 1e-6) -> bool:
        return (np.allclose(self.position, other.position, atol=atol)
                and np.allclose(self.up, other.up, atol=atol)
                and np.allclose(self.side, other.side, atol=atol)
                and np.allclose(self.forward, other.forward, atol=atol))

    def rotate_x(self, radians: float) -> None:
        c, s = math.cos(radians), math.sin(radians)
        forward, up = self.forward, self.up
        self.forward = _normalise(c * forward + s * up)
        self.up = _normalise(c * up - s * forward)

    def rotate_y(self, radians: float) -> None:
        c, s = math.cos(radians), math.sin(radians)
        forward, side = self.forward, self.side
        self.forward = _normalise(c * forward + s * side)
        self.side = _normalise(c * side - s * forward)

    def rotate_z(self, radians: float) -> None:
        c, s = math.cos(radians), math.sin(radians)
        up, side = self.up, self.side
        self.up = _normalise(c * up + s * side)
        self.side = _normalise(c * side - s * up)

    def interpolate(self, other: "CameraPose", t: float) -> "CameraPose":
        return CameraPose(
            self.position + (other.position - self.position) * t,
            self.up + (other.up - self.up) * t,
            self.side + (other.side - self.side) * t,
            self.forward + (other.forward - self.forward) * t,
        )

    def rotation_matrix(self) -> np.ndarray:
        # columns: -side, up, -forward
        return np.column_stack((-self.side, self.up, -self.forward))
