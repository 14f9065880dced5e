"""Feature image fetching and colour correction for colour e-paper panels."""

import logging
from io import BytesIO
from typing import Optional

import numpy as np
from PIL import Image, UnidentifiedImageError

from common.config import AppConfig
from common.errors import FetchError, ImageError
from common.http_client import relay_get

logger = logging.getLogger(__name__)

CONTRAST_FACTOR = 1.25
SATURATION_FACTOR = 1.35
LUMA_WEIGHTS = np.array([0.2989, 0.5870, 0.1140])
JPEG_QUALITY = 90


def is_webp_url(url: Optional[str]) -> bool:
    return bool(url) and url.lower().endswith(".webp")


def is_webp_data(data: bytes) -> bool:
    return data[:4] == b"RIFF" and data[8:12] == b"WEBP"


def _encode_jpeg(image: Image.Image) -> bytes:
    out = BytesIO()
    image.save(out, format="JPEG", quality=JPEG_QUALITY)
    return out.getvalue()


def decode(data: bytes) -> Image.Image:
    """Decode image bytes into an RGB image."""
    try:
        with Image.open(BytesIO(data)) as image:
            return image.convert("RGB")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise ImageError(f"Could not decode image: {e}") from e


def transcode_webp_to_jpeg(data: bytes) -> bytes:
    """Re-encode WebP bytes as JPEG."""
    return _encode_jpeg(decode(data))


def adjust_pixels(pixels: np.ndarray) -> np.ndarray:
    """Boost contrast (1.25x) then saturation (1.35x) of an HxWx3 RGB array."""
    rgb = pixels[..., :3].astype(np.float64)
    rgb = rgb * CONTRAST_FACTOR + 128 * (1 - CONTRAST_FACTOR)

    gray = (rgb @ LUMA_WEIGHTS)[..., np.newaxis]
    rgb = gray + SATURATION_FACTOR * (rgb - gray)

    return np.rint(np.clip(rgb, 0, 255)).astype(np.uint8)


def correct_for_epaper(data: bytes) -> bytes:
    """Apply the colour correction and re-encode as JPEG.

    Returns ``data`` unchanged if anything goes wrong.
    """
    try:
        pixels = np.asarray(decode(data))
        return _encode_jpeg(Image.fromarray(adjust_pixels(pixels)))
    except Exception as e:
        logger.warning("Could not process image for e-paper: %s", e)
        return data


def prepare_feature_image(data: bytes, source_url: Optional[str]) -> bytes:
    """Transcode WebP sources to JPEG, then colour-correct. Never raises.

    Bytes already transcoded by ``fetch_feature_image`` are not transcoded again.
    """
    if is_webp_url(source_url) and is_webp_data(data):
        try:
            data = transcode_webp_to_jpeg(data)
        except ImageError as e:
            logger.warning("Could not convert WebP image %s: %s", source_url, e)
            return data
    return correct_for_epaper(data)


def fetch_feature_image(url: Optional[str], config: AppConfig) -> Optional[bytes]:
    """Fetch the feature image once through the relay.

    WebP images are converted to JPEG here so layout never sees WebP bytes.
    Failures are logged and yield None.
    """
    if not url:
        return None

    try:
        logger.info("Pre-fetching feature image %s", url)
        response = relay_get(url, config.relay_url, config.http)
        if not response.ok:
            raise ImageError(f"Image fetch failed (Status: {response.status_code})")
        data = response.content
        if is_webp_url(url):
            logger.info("Converting WebP image")
            data = transcode_webp_to_jpeg(data)
        return data
    except (ImageError, FetchError) as e:
        logger.warning("Could not pre-fetch feature image: %s", e)
        return None
