from __future__ import annotations

import math
from typing import Iterator, Optional, Tuple

from tqdm import tqdm

from mandelview.camera.path import CameraPath
from mandelview.camera.pose import CameraPose
from mandelview.util.logging_setup import get_logger

def estimate_frames(path: CameraPath, framerate: float) -> int:
    """Approximate number of frames a non-looping path yields at ``framerate``.

    Every waypoint takes at least one tick, including zero-length anchors.
    """
    if framerate <= 0:
        raise ValueError("framerate must be > 0")
    return sum(max(1, math.ceil(w.duration * framerate)) for w in path)

def sample_path(
    path: CameraPath,
    framerate: float,
    *,
    max_frames: Optional[int] = None,
    progress: bool = False,
) -> Iterator[Tuple[int, CameraPose]]:
    """Play ``path`` from the start at a fixed tick of 1/framerate seconds."""
    if framerate <= 0:
        raise ValueError("framerate must be > 0")
    if path.loop and max_frames is None:
        raise ValueError("looping paths need max_frames")

    logger = get_logger()
    dt = 1.0 / framerate

    total = max_frames if path.loop else estimate_frames(path, framerate)
    if max_frames is not None:
        total = min(total, max_frames)

    path.reset()
    logger.info("Sampling camera path waypoints=%s framerate=%s frames~%s", len(path), framerate, total)

    bar = tqdm(total=total, unit="frame", disable=not progress)
    frame = 0
    try:
        while max_frames is None or frame < max_frames:
            pose = path.logic(dt)
            if pose is None:
                break
            yield frame, pose
            frame += 1
            bar.update(1)
    finally:
        bar.close()

    logger.info("Sampled %s frames", frame)
