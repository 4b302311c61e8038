from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, get_type_hints

import numpy as np

from mandelview.config.store import ConfigStore, Section

SETTINGS_SECTION = "mandelbulb"
DEFAULT_CONFIG_FILE = "mandelbulb.conf"

def _vec(*components: float):
    return field(default_factory=lambda: np.array(components, dtype=float))


@dataclass(eq=False)
class ViewerSettings:
    """Fractal viewer settings persisted in the ``[mandelbulb]`` section."""

    viewscale: float = 1.0
    timescale: float = 1.0

    fov: float = 45.0
    cameraZoom: float = 0.0
    speed: float = 0.25
    constantSpeed: bool = True

    power: float = 8.0
    bounding: float = 3.0
    bailout: float = 4.0

    stepLimit: int = 600
    maxIterations: int = 6
    epsilonScale: float = 1.0
    aoSteps: float = 100.0

    fogDistance: float = 0.0
    phong: bool = True
    antialiasing: int = 0
    shadows: float = 0.0
    specularity: float = 0.7
    specularExponent: float = 15.0
    ambientOcclusion: float = 0.5
    ambientOcclusionEmphasis: float = 0.58

    radiolaria: bool = False
    radiolariaFactor: float = 0.0

    colorSpread: float = 0.2
    rimLight: float = 0.0

    animated: bool = False
    juliaset: bool = False
    julia_c: np.ndarray = _vec(0.0, 0.0, 0.0)
    backgroundGradient: bool = True

    light: np.ndarray = _vec(38.0, -42.0, 38.0)

    backgroundColor: np.ndarray = _vec(0.0, 0.0, 0.0, 1.0)
    diffuseColor: np.ndarray = _vec(0.0, 0.85, 0.99, 1.0)
    ambientColor: np.ndarray = _vec(0.67, 0.85, 1.0, 1.0)
    lightColor: np.ndarray = _vec(0.48, 0.59, 0.66, 1.0)

    glowColour: np.ndarray = _vec(1.0, 1.0, 0.0)
    glowMulti: float = 1.0
    glowDepth: float = 1.5

    beat: float = 0.0

    def _kind(self, name: str) -> str:
        # annotations are strings here, resolve them against the module
        hint = get_type_hints(type(self))[name]
        if hint is bool:
            return "bool"
        if hint is int:
            return "int"
        if hint is float:
            return "float"
        return f"vec{len(getattr(self, name))}"

    def as_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def import_from(self, store: ConfigStore) -> bool:
        """Read every field present in the settings section.

        Keys that are missing or empty keep their current value.
        """
        section = store.get_section(SETTINGS_SECTION)
        if section is None:
            return False

        for f in fields(self):
            if not section.has_value(f.name):
                continue
            kind = self._kind(f.name)
            getter = getattr(section, f"get_{kind}")
            setattr(self, f.name, getter(f.name))
        return True

    def export_to(self, store: ConfigStore) -> Section:
        section = Section(SETTINGS_SECTION)
        for f in fields(self):
            section.set_entry(f.name, getattr(self, f.name))
        return store.set_section(section)
