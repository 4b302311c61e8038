from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

from mandelview.camera.path import CAMERA_SECTION, CameraPath
from mandelview.camera.pose import CameraPose
from mandelview.config.store import ConfigStore
from mandelview.settings import DEFAULT_CONFIG_FILE, ViewerSettings
from mandelview.util.logging_setup import get_logger

RECORDING_NAME_FORMAT = "%06d.mdb"

def next_recording_name(directory: str = ".") -> str:
    recno = 1
    while True:
        path = os.path.join(directory, RECORDING_NAME_FORMAT % recno)
        if not os.path.exists(path):
            return path
        recno += 1


@dataclass(eq=False)
class ViewerContext:
    """State shared between the viewer and its camera recorder."""

    settings: ViewerSettings = field(default_factory=ViewerSettings)
    store: ConfigStore = field(default_factory=ConfigStore)
    view: CameraPose = field(default_factory=lambda: CameraPose(position=(0.0, 0.0, 2.6)))


class RecordingSession:
    """Record and play back camera paths against a live view pose.

    The owner calls ``logic(dt)`` once per frame. While playing, the path
    drives ``context.view``; while recording, the view is sampled into new
    waypoints every ``record_frame_skip`` frames.
    """

    def __init__(
        self,
        context: ViewerContext,
        path: Optional[CameraPath] = None,
        record_frame_skip: int = 1,
        directory: str = ".",
    ) -> None:
        if record_frame_skip < 1:
            raise ValueError("record_frame_skip must be >= 1")
        self.context = context
        self.path = path if path is not None else CameraPath()
        self.record_frame_skip = record_frame_skip
        self.directory = directory
        self.record_frame_delta = 0.0
        self.frame_count = 0
        self.playing = False
        self.recording = False

    def open(self, filename: str) -> bool:
        logger = get_logger()
        store = self.context.store

        if not store.load(filename):
            logger.warning("Could not read %s: %s", filename, store.error)
            store.clear()
            return False

        self.context.settings.import_from(store)

        if store.has_section(CAMERA_SECTION):
            n = self.path.load(store)
            self.playing = True
            logger.info("Playing recording %s (%s waypoints)", filename, n)
        return True

    def toggle_record(self) -> None:
        if self.playing:
            return

        self.recording = not self.recording
        self.record_frame_delta = 0.0

        if self.recording:
            self.path.clear()
            get_logger().info("Recording started")
        else:
            self.save_config(True)

    def toggle_play(self) -> None:
        if self.recording:
            return

        self.playing = not self.playing
        self.path.reset()

    def add_waypoint(self, duration: float) -> None:
        self.path.add_waypoint(self.context.view, duration)

    def logic(self, dt: float) -> None:
        if self.playing:
            pose = self.path.logic(dt)
            if pose is not None:
                self.context.view = pose
            if self.path.finished:
                self.playing = False
                get_logger().info("Playback finished")

        if self.recording:
            self.record_frame_delta += dt
            if self.frame_count % self.record_frame_skip == 0:
                self.add_waypoint(self.record_frame_delta)
                self.record_frame_delta = 0.0

        self.frame_count += 1

    def status(self) -> str:
        if self.recording:
            return f"Recording {len(self.path)}"
        if self.playing:
            return f"Playing {self.path.index} / {len(self.path)}"
        return ""

    def save_config(self, save_recording: bool, directory: Optional[str] = None) -> str:
        if directory is None:
            directory = self.directory
        store = self.context.store
        store.clear()

        if save_recording:
            filename = next_recording_name(directory)
        else:
            filename = os.path.join(directory, DEFAULT_CONFIG_FILE)

        self.context.settings.export_to(store)

        if save_recording:
            self.path.save(store)

        if not store.save(filename):
            raise OSError(store.error or f"no file name for {filename}")

        get_logger().info("Wrote %s", filename)
        return filename
