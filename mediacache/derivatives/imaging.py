"""
Render a base image at a requested width.

Output is always a baseline JPEG without metadata, so the same source bytes
and width produce the same output bytes on every call.
"""
import io

from PIL import Image, ImageOps, UnidentifiedImageError

from mediacache.exceptions import GenerationFailed

DEFAULT_QUALITY = 85
DEFAULT_MAX_WIDTH = 4096
OUTPUT_FORMAT = "JPEG"
BACKGROUND = (255, 255, 255)


def _flatten(img: Image.Image) -> Image.Image:
    """JPEG has no alpha channel: composite transparent images onto white"""
    if img.mode in ("RGBA", "LA") or (img.mode == "P" and "transparency" in img.info):
        rgba = img.convert("RGBA")
        canvas = Image.new("RGB", rgba.size, BACKGROUND)
        canvas.paste(rgba, mask=rgba.getchannel("A"))
        return canvas
    return img.convert("RGB")


def target_size(source_size, width: int):
    src_width, src_height = source_size
    height = max(1, round(src_height * width / src_width))
    return width, height


class ImageGenerator:
    def __init__(self, quality: int = DEFAULT_QUALITY, max_width: int = DEFAULT_MAX_WIDTH):
        self.quality = quality
        self.max_width = max_width

    def generate(self, source: bytes, width: int) -> bytes:
        if isinstance(width, bool) or not isinstance(width, int) or width <= 0:
            raise GenerationFailed(f"Unsupported width {width!r}")
        if width > self.max_width:
            raise GenerationFailed(
                f"Unsupported width {width}: maximum is {self.max_width}"
            )
        try:
            with Image.open(io.BytesIO(source)) as img:
                img.load()
                img = ImageOps.exif_transpose(img)
                size = target_size(img.size, width)
                # cover fill: scale so both dimensions are covered, then
                # center crop the overflow
                rendition = ImageOps.fit(
                    _flatten(img), size, method=Image.Resampling.LANCZOS
                )
        except (UnidentifiedImageError, Image.DecompressionBombError) as e:
            raise GenerationFailed(f"Source is not a usable image: {e}", e) from e
        except (OSError, ValueError, EOFError) as e:
            raise GenerationFailed(f"Source image is malformed: {e}", e) from e

        out = io.BytesIO()
        rendition.save(out, format=OUTPUT_FORMAT, quality=self.quality, optimize=False)
        return out.getvalue()


def generate_image(source: bytes, width: int, quality: int = DEFAULT_QUALITY) -> bytes:
    return ImageGenerator(quality=quality).generate(source, width)
