from __future__ import annotations

from typing import List, Optional

import numpy as np

from mandelview.camera.pose import CameraPose
from mandelview.config.store import ConfigStore, Section
from mandelview.util.logging_setup import get_logger

CAMERA_SECTION = "camera"


class Waypoint:
    """A timed move from ``start`` to ``finish``.

    ``finish`` is fixed when the waypoint is created. ``start`` begins equal
    to it and is replaced by the previous waypoint's finish in ``prepare``.
    """

    def __init__(self, pose: CameraPose, duration: float = 0.0) -> None:
        self.start = pose.copy()
        self.finish = pose.copy()
        self.duration = float(duration)
        self.elapsed = 0.0
        self.finished = False

    def __repr__(self) -> str:
        return f"Waypoint(finish={self.finish!r}, duration={self.duration})"

    @property
    def pose(self) -> CameraPose:
        return self.finish

    def prepare(self, previous: "Waypoint") -> None:
        self.start = previous.pose.copy()
        self.elapsed = 0.0
        self.finished = False

    def logic(self, dt: float) -> CameraPose:
        self.elapsed += dt

        if self.elapsed >= self.duration or self.duration <= 0.0:
            self.elapsed = self.duration
            self.finished = True
            return self.finish.copy()

        return self.start.interpolate(self.finish, self.elapsed / self.duration)


class CameraPath:
    """Ordered waypoints played back one tick at a time.

    ``index`` is -1 before playback starts. Each call to ``logic`` either
    advances to the next waypoint (when the current one finished on the
    previous call) or continues the current one.
    """

    def __init__(self, loop: bool = False, units_per_second: Optional[float] = None) -> None:
        self.loop = loop
        self.units_per_second = units_per_second
        self._waypoints: List[Waypoint] = []
        self._current: Optional[Waypoint] = None
        self._index = -1
        self._finished = False

    def __len__(self) -> int:
        return len(self._waypoints)

    def __iter__(self):
        return iter(self._waypoints)

    def __getitem__(self, i: int) -> Waypoint:
        return self._waypoints[i]

    @property
    def index(self) -> int:
        return self._index

    @property
    def finished(self) -> bool:
        return self._finished

    def reset(self) -> None:
        self._finished = False
        self._index = -1
        self._current = None

    def clear(self) -> None:
        self._waypoints.clear()
        self.reset()

    def total_duration(self) -> float:
        return sum(w.duration for w in self._waypoints)

    def last_pose(self) -> Optional[CameraPose]:
        if not self._waypoints:
            return None
        return self._waypoints[-1].pose.copy()

    def delete_last(self) -> None:
        if self._waypoints:
            self._waypoints.pop()

    def add_waypoint(self, pose: CameraPose, duration: float = 0.0) -> Waypoint:
        waypoint = Waypoint(pose, duration)

        if not self._waypoints:
            # the first pose is an instantaneous anchor
            waypoint.duration = 0.0
        elif self.units_per_second is not None and self.units_per_second > 0.0:
            previous = self._waypoints[-1].pose
            distance = float(np.linalg.norm(waypoint.pose.position - previous.position))
            waypoint.duration = distance / self.units_per_second

        self._waypoints.append(waypoint)
        return waypoint

    def logic(self, dt: float) -> Optional[CameraPose]:
        """Advance playback by ``dt`` seconds.

        Returns the camera pose for this tick, or None once the path has
        finished.
        """
        if self._finished:
            return None

        if not self._waypoints:
            self._current = None
            self._finished = True
            return None

        if self._current is None:
            if self.loop:
                self._index = (self._index + 1) % len(self._waypoints)
            else:
                self._index += 1
                if self._index >= len(self._waypoints):
                    self._finished = True
                    return None

            self._current = self._waypoints[self._index]

            if self._index > 0:
                self._current.prepare(self._waypoints[self._index - 1])
            else:
                self._current.elapsed = 0.0
                self._current.finished = False

        pose = self._current.logic(dt)

        if self._current.finished:
            self._current = None

        return pose

    def load(self, store: ConfigStore) -> int:
        """Replace the waypoints with one per ``camera`` section in ``store``."""
        self.clear()

        sections = store.get_sections(CAMERA_SECTION)
        if sections is None:
            return 0

        for section in sections:
            pose = CameraPose(
                section.get_vec3("pos"),
                section.get_vec3("up"),
                section.get_vec3("side"),
                section.get_vec3("forward"),
            )
            self.add_waypoint(pose, section.get_float("duration"))

        get_logger().debug("Loaded camera path with %s waypoints", len(self._waypoints))
        return len(self._waypoints)

    def save(self, store: ConfigStore) -> None:
        for waypoint in self._waypoints:
            pose = waypoint.pose
            section = Section(CAMERA_SECTION)
            section.set_entry("pos", pose.position)
            section.set_entry("up", pose.up)
            section.set_entry("side", pose.side)
            section.set_entry("forward", pose.forward)
            section.set_entry("duration", waypoint.duration)
            store.add_section(section)
