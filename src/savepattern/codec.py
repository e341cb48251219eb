"""Image codec: RasterImage ↔ PNG bytes.

PNG is lossless, so decode(encode(x)) == x for every RGBA8 buffer.
"""

import io
import struct
from typing import Tuple

from PIL import Image

from .errors import DecodeError
from .pattern import CANVAS_HEIGHT, CANVAS_WIDTH
from .raster import RasterImage

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def encode(image: RasterImage) -> bytes:
    """Encode an image as PNG."""
    buffer = io.BytesIO()
    image.to_pil().save(buffer, format="PNG")
    return buffer.getvalue()


def decode(data: bytes, size: Tuple[int, int] = (CANVAS_WIDTH, CANVAS_HEIGHT)) -> RasterImage:
    """Decode PNG bytes back into a canvas-sized image.

    Raises:
        DecodeError: empty, truncated or non-PNG input, or wrong dimensions.
            Never returns a partial image.
    """
    if not data:
        raise DecodeError("empty image data")
    if bytes(data[:8]) != PNG_SIGNATURE:
        raise DecodeError("not a PNG image")

    try:
        with Image.open(io.BytesIO(data)) as img:
            # load() forces a full decode so truncation surfaces here
            img.load()
            if img.size != size:
                raise DecodeError(f"expected {size[0]}x{size[1]} image, got {img.size[0]}x{img.size[1]}")
            return RasterImage.from_pil(img)
    except DecodeError:
        raise
    except (OSError, EOFError, ValueError, SyntaxError, struct.error, Image.DecompressionBombError) as e:
        raise DecodeError(f"could not decode image: {e}") from e
