from pathlib import Path

import numpy as np
import pytest

from mandelview.config.store import ConfigStore, Section
from mandelview.settings import SETTINGS_SECTION, ViewerSettings


def test_defaults() -> None:
    s = ViewerSettings()
    assert s.power == 8.0
    assert s.fov == 45.0
    assert s.maxIterations == 6
    assert s.phong is True
    np.testing.assert_allclose(s.light, [38, -42, 38])
    np.testing.assert_allclose(s.diffuseColor, [0.0, 0.85, 0.99, 1.0])


def test_default_vectors_are_not_shared() -> None:
    a, b = ViewerSettings(), ViewerSettings()
    a.light[0] = 0.0
    assert b.light[0] == 38.0


def test_import_only_overrides_present_values() -> None:
    store = ConfigStore()
    section = store.add_section(Section(SETTINGS_SECTION))
    section.set_entry("power", "4.5")
    section.set_entry("phong", "no")
    section.set_entry("maxIterations", "12")
    section.set_entry("julia_c", "vec3(0.1, -0.2, 0.3)")
    section.set_entry("fov", "")

    s = ViewerSettings()
    assert s.import_from(store)
    assert s.power == 4.5
    assert s.phong is False
    assert s.maxIterations == 12
    np.testing.assert_allclose(s.julia_c, [0.1, -0.2, 0.3])
    assert s.fov == 45.0
    assert s.bailout == 4.0


def test_import_without_section_is_a_no_op() -> None:
    s = ViewerSettings()
    assert not s.import_from(ConfigStore())
    assert s.power == 8.0


def test_export_replaces_existing_section(tmp_path: Path) -> None:
    store = ConfigStore()
    store.add_section(Section(SETTINGS_SECTION)).set_entry("power", 2.0)

    s = ViewerSettings(power=9.0, juliaset=True)
    s.export_to(store)

    assert len(store.get_sections(SETTINGS_SECTION)) == 1
    assert store.get_string(SETTINGS_SECTION, "power") == "9.00000"
    assert store.get_string(SETTINGS_SECTION, "juliaset") == "yes"
    assert store.get_string(SETTINGS_SECTION, "stepLimit") == "600"
    assert store.get_string(SETTINGS_SECTION, "lightColor") == "vec4(0.48000, 0.59000, 0.66000, 1.00000)"

    path = str(tmp_path / "mandelbulb.conf")
    assert store.save(path)
    reloaded = ConfigStore()
    assert reloaded.load(path)
    restored = ViewerSettings()
    restored.import_from(reloaded)
    for name, value in s.as_dict().items():
        if isinstance(value, np.ndarray):
            np.testing.assert_allclose(getattr(restored, name), value, atol=1e-5)
        elif isinstance(value, bool):
            assert getattr(restored, name) is value
        else:
            assert getattr(restored, name) == pytest.approx(value, abs=1e-5)


def test_import_scalar_fields_by_declared_type() -> None:
    store = ConfigStore()
    section = store.add_section(Section(SETTINGS_SECTION))
    section.set_entry("power", 9)
    section.set_entry("stepLimit", "250")
    section.set_entry("radiolaria", "yes")

    s = ViewerSettings()
    assert s.import_from(store)
    assert isinstance(s.power, float) and s.power == 9.0
    assert isinstance(s.stepLimit, int) and s.stepLimit == 250
    assert s.radiolaria is True
