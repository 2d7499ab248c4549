import io

from PIL import Image
from pillow_heif import register_heif_opener

from sourcelens.ingestion.exceptions import ImageConversionError

register_heif_opener()


def transcode_to_jpeg(image_bytes: bytes, *, quality: int = 90) -> bytes:
    """Re-encode any Pillow-readable image (HEIC/HEIF included) as JPEG.

    Raises:
        ImageConversionError: if the image cannot be decoded or encoded.
    """
    try:
        with Image.open(io.BytesIO(image_bytes)) as image:
            rgb = image.convert("RGB")
        buffer = io.BytesIO()
        rgb.save(buffer, format="JPEG", quality=quality)
        return buffer.getvalue()
    except (OSError, ValueError) as exc:
        raise ImageConversionError(f"Could not convert image to JPEG: {exc}") from exc
