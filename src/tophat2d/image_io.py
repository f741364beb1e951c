"""
Image file reading and writing through OpenCV.
"""
from __future__ import annotations

import logging
import os

import cv2
import numpy as np

from .errors import InvalidInput
from .morphology import validate_image


logger = logging.getLogger(__name__)


def read_gray(path: str) -> np.ndarray:
    """
    Decode an image file as an 8-bit single-channel array.

    Color images are converted to grayscale by OpenCV.

    Raises:
        FileNotFoundError: If ``path`` does not exist
        InvalidInput: If the file cannot be decoded or is empty
    """
    if not os.path.isfile(path):
        raise FileNotFoundError(f"Input image not found: {path}")

    image = cv2.imread(path, cv2.IMREAD_GRAYSCALE)
    if image is None:
        raise InvalidInput(f"Unable to decode image: {path}")

    validate_image(image)
    logger.debug("Read %s (%dx%d, %s)", path, image.shape[1], image.shape[0], image.dtype)
    return image


def write_image(path: str, image: np.ndarray) -> None:
    """
    Encode ``image`` to ``path``; the format follows the file extension.

    Raises:
        FileNotFoundError: If the output directory does not exist
        OSError: If OpenCV cannot encode or write the file
    """
    directory = os.path.dirname(os.path.abspath(path))
    if not os.path.isdir(directory):
        raise FileNotFoundError(f"Output directory does not exist: {directory}")

    try:
        ok = cv2.imwrite(path, image)
    except cv2.error as exc:
        raise OSError(f"Unable to write image {path}: {exc}") from exc
    if not ok:
        raise OSError(f"Unable to write image: {path}")

    logger.debug("Wrote %s", path)
