import pytest
from PySide6.QtCore import QSettings

from stallmap import EngineConfig, MAX_SCALE


@pytest.fixture
def settings(tmp_path):
    return QSettings(str(tmp_path / "stallmap.ini"), QSettings.IniFormat)


def test_defaults(settings):
    cfg = EngineConfig.from_settings(settings)
    assert cfg == EngineConfig()
    assert cfg.max_scale == MAX_SCALE


def test_overrides(settings):
    settings.setValue("engine/max_scale", "4.5")
    settings.setValue("engine/pulse_tick_ms", "33")
    cfg = EngineConfig.from_settings(settings)
    assert cfg.max_scale == 4.5
    assert cfg.pulse_tick_ms == 33


def test_unparsable_value_falls_back(settings):
    settings.setValue("engine/marker_radius", "big")
    assert EngineConfig.from_settings(settings).marker_radius == EngineConfig().marker_radius


def test_inverted_range_rejected(settings):
    settings.setValue("engine/min_scale", "5")
    with pytest.raises(ValueError):
        EngineConfig.from_settings(settings)


def test_validate():
    with pytest.raises(ValueError):
        EngineConfig(marker_radius=0).validate()
    with pytest.raises(ValueError):
        EngineConfig(scale_factor=1.0).validate()
