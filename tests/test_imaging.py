import io

import pytest
from PIL import Image

from mediacache.derivatives.imaging import ImageGenerator, generate_image, target_size
from mediacache.exceptions import GenerationFailed
from tests.conftest import image_size, make_jpeg


def test_generate_scales_to_width_preserving_aspect(source_jpeg):
    out = ImageGenerator().generate(source_jpeg, 300)
    assert image_size(out) == ("JPEG", (300, 225))


def test_generate_upscales(source_jpeg):
    out = ImageGenerator().generate(source_jpeg, 1280)
    assert image_size(out) == ("JPEG", (1280, 960))


def test_generate_is_deterministic(source_jpeg):
    generator = ImageGenerator()
    first = generator.generate(source_jpeg, 300)
    assert all(generator.generate(source_jpeg, 300) == first for _ in range(3))
    assert generate_image(source_jpeg, 300) == first


def test_generate_flattens_transparent_png():
    img = Image.new("RGBA", (100, 50), (0, 0, 255, 0))
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    out = ImageGenerator().generate(buffer.getvalue(), 40)
    with Image.open(io.BytesIO(out)) as result:
        assert result.format == "JPEG"
        assert result.mode == "RGB"
        assert result.size == (40, 20)
        # transparent pixels land on white, not black
        assert all(channel > 240 for channel in result.getpixel((20, 10)))


@pytest.mark.parametrize("source", [b"", b"not an image", make_jpeg()[:200]])
def test_generate_rejects_malformed_sources(source):
    with pytest.raises(GenerationFailed):
        ImageGenerator().generate(source, 300)


@pytest.mark.parametrize("width", [0, -5, 5000])
def test_generate_rejects_unsupported_widths(source_jpeg, width):
    with pytest.raises(GenerationFailed):
        ImageGenerator(max_width=4096).generate(source_jpeg, width)


def test_generation_failure_carries_cause():
    with pytest.raises(GenerationFailed) as excinfo:
        ImageGenerator().generate(b"garbage", 10)
    assert excinfo.value.cause is not None
    assert excinfo.value.status_code == 500


def test_target_size_never_collapses_to_zero_height():
    assert target_size((4000, 10), 10) == (10, 1)
