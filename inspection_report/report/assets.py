"""
Image assets: upload validation, decoding and logo/watermark loading.

Everything here runs before a render starts: the PDF engine only receives
already-decoded `ImageReader` objects (or None).
"""
import base64
import binascii
import logging
from dataclasses import dataclass, field
from io import BytesIO
from pathlib import Path
from typing import List, Optional, Union

from PIL import Image, UnidentifiedImageError
from reportlab.lib.utils import ImageReader

from ..config import Config
from ..errors import ImageDecodeError, UnsupportedImageError

logger = logging.getLogger(__name__)

ACCEPTED_FORMATS = {"PNG", "JPEG", "GIF", "WEBP"}


def image_to_data_url(data: bytes, filename: str = "", max_bytes: Optional[int] = None) -> str:
    """Validate an uploaded image and encode it as a data URL.

    Raises:
        UnsupportedImageError: if the file is too large or not an accepted image.
    """
    max_bytes = Config.MAX_IMAGE_BYTES if max_bytes is None else max_bytes
    if not data:
        raise UnsupportedImageError(f"{filename or 'image'}: fichier vide")
    if len(data) > max_bytes:
        raise UnsupportedImageError(
            f"{filename or 'image'}: {len(data)} octets (max {max_bytes})"
        )
    try:
        with Image.open(BytesIO(data)) as img:
            fmt = img.format
    except (UnidentifiedImageError, OSError) as e:
        raise UnsupportedImageError(f"{filename or 'image'}: format non reconnu") from e
    if fmt not in ACCEPTED_FORMATS:
        raise UnsupportedImageError(f"{filename or 'image'}: format {fmt} non supporté")

    mime = Image.MIME.get(fmt, "image/png")
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


def data_url_to_bytes(src: str) -> bytes:
    """Decode the payload of a base64 data URL."""
    header, sep, payload = src.partition(",")
    if not sep or not header.startswith("data:") or ";base64" not in header:
        raise ImageDecodeError("not a base64 data URL")
    try:
        return base64.b64decode(payload, validate=False)
    except (binascii.Error, ValueError) as e:
        raise ImageDecodeError(f"invalid base64 payload: {e}") from e


def decode_image(src: Union[str, Path]) -> ImageReader:
    """Turn a data URL or a file path into an embeddable image.

    Raises:
        ImageDecodeError: if the reference cannot be read or is not an image.
    """
    if isinstance(src, str) and src.startswith("data:"):
        raw = data_url_to_bytes(src)
    else:
        path = Path(src)
        try:
            raw = path.read_bytes()
        except OSError as e:
            raise ImageDecodeError(f"cannot read {path}: {e}") from e

    try:
        img = Image.open(BytesIO(raw))
        img.load()
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise ImageDecodeError(f"undecodable image: {e}") from e
    return ImageReader(img)


@dataclass
class RenderAssets:
    """Decoded page decoration images for one render."""
    logo: Optional[ImageReader] = None
    watermark: Optional[ImageReader] = None
    warnings: List[str] = field(default_factory=list)


def load_default_logo() -> Optional[ImageReader]:
    try:
        return decode_image(Config.LOGO_PATH)
    except ImageDecodeError as e:
        logger.warning(f"Default logo unavailable: {e}")
        return None


def load_watermark() -> Optional[ImageReader]:
    if not Config.WATERMARK_PATH.exists():
        return None
    try:
        return decode_image(Config.WATERMARK_PATH)
    except ImageDecodeError as e:
        logger.debug(f"Watermark skipped: {e}")
        return None


def resolve_assets(logo_data_url: Optional[str]) -> RenderAssets:
    """Decode the report logo (falling back to the default one) and the watermark.

    A logo that fails to decode is reported in `warnings` and replaced by the
    default logo; it never blocks the render.
    """
    assets = RenderAssets(watermark=load_watermark())
    if logo_data_url:
        try:
            assets.logo = decode_image(logo_data_url)
            return assets
        except ImageDecodeError as e:
            logger.warning(f"Report logo rejected, using default: {e}")
            assets.warnings.append("Logo illisible : logo par défaut utilisé.")
    assets.logo = load_default_logo()
    return assets
