import base64

import pytest
from PySide6.QtGui import QColor, QImage

from stallmap import ImageLayer, ImageLoadError

pytestmark = pytest.mark.usefixtures("qapp")


@pytest.fixture
def png_path(tmp_path):
    img = QImage(64, 32, QImage.Format_RGB32)
    img.fill(QColor("white"))
    path = tmp_path / "floor.png"
    assert img.save(str(path), "PNG")
    return str(path)


def test_load_file_sets_world_bounds(png_path):
    layer = ImageLayer()
    size = layer.load(png_path)
    assert (size.width(), size.height()) == (64, 32)
    assert layer.loaded
    assert (layer.natural_width, layer.natural_height) == (64, 32)
    assert layer.source_ref == png_path


def test_load_data_url(png_path):
    with open(png_path, "rb") as f:
        url = "data:image/png;base64," + base64.b64encode(f.read()).decode("ascii")
    layer = ImageLayer()
    size = layer.load(url)
    assert (size.width(), size.height()) == (64, 32)


def test_missing_file(tmp_path):
    layer = ImageLayer()
    with pytest.raises(ImageLoadError):
        layer.load(str(tmp_path / "nope.png"))
    assert not layer.loaded


def test_not_a_raster(tmp_path):
    bad = tmp_path / "floor.png"
    bad.write_text("definitely not a png")
    with pytest.raises(ImageLoadError):
        ImageLayer().load(str(bad))


def test_bad_data_url():
    with pytest.raises(ImageLoadError):
        ImageLayer().load("data:image/png;base64,AAAA")
    with pytest.raises(ImageLoadError):
        ImageLayer().load("data:image/png")


def test_failed_reload_leaves_layer_unloaded(png_path, tmp_path):
    layer = ImageLayer()
    layer.load(png_path)
    with pytest.raises(ImageLoadError):
        layer.load(str(tmp_path / "gone.png"))
    assert not layer.loaded and layer.natural_width == 0


def test_empty_source():
    with pytest.raises(ImageLoadError):
        ImageLayer().load("")
