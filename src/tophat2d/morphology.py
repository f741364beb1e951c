"""
Grayscale morphological operations with flat disk structuring elements.

Erosion and dilation are computed by shifting a padded copy of the image once
per structuring element offset and reducing with ``np.minimum`` /
``np.maximum``. Positions outside the image are padded with the neutral
element of the reduction, so they never contribute to the result.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Literal, Optional, Tuple

import numpy as np

from .errors import InvalidInput, InvalidParameter
from .structuring import StructuringElement


logger = logging.getLogger(__name__)

Operation = Literal["erode", "dilate"]
ProgressCallback = Callable[[float], None]


def validate_image(image: np.ndarray) -> None:
    """
    Check that ``image`` is a non-empty 2D numeric array.

    Raises:
        InvalidInput: If the image is not 2D, is empty, or is not numeric
    """
    if not isinstance(image, np.ndarray):
        raise InvalidInput(f"Expected a numpy array, got {type(image).__name__}")
    if image.ndim != 2:
        raise InvalidInput(f"Expected a 2D grayscale image, got {image.ndim} dimensions")
    if image.shape[0] == 0 or image.shape[1] == 0:
        raise InvalidInput(f"Image has zero width or height: {image.shape[1]}x{image.shape[0]}")
    if image.dtype == np.bool_ or not (
        np.issubdtype(image.dtype, np.integer) or np.issubdtype(image.dtype, np.floating)
    ):
        raise InvalidInput(f"Unsupported pixel type: {image.dtype}")


def _validate_workers(workers: int) -> int:
    if isinstance(workers, bool) or not isinstance(workers, (int, np.integer)) or workers < 1:
        raise InvalidParameter(f"Worker count must be a positive integer, got {workers!r}")
    return int(workers)


def _check_element(element: StructuringElement) -> None:
    if not isinstance(element, StructuringElement):
        raise InvalidParameter(
            f"Expected a StructuringElement, got {type(element).__name__}"
        )


def dtype_range(dtype: np.dtype) -> Tuple[float, float]:
    """Smallest and largest representable sample value for ``dtype``."""
    if np.issubdtype(dtype, np.integer):
        info = np.iinfo(dtype)
        return info.min, info.max
    return -np.inf, np.inf


def _row_bands(height: int, workers: int) -> List[Tuple[int, int]]:
    n_bands = min(workers, height)
    edges = np.linspace(0, height, n_bands + 1).astype(int)
    return [(int(a), int(b)) for a, b in zip(edges[:-1], edges[1:]) if b > a]


def _apply_morphology(
    image: np.ndarray,
    element: StructuringElement,
    operation: Operation,
    workers: int = 1,
) -> np.ndarray:
    """Apply a single erosion or dilation."""
    low, high = dtype_range(image.dtype)
    if operation == "erode":
        reduce, pad_value = np.minimum, high
    elif operation == "dilate":
        reduce, pad_value = np.maximum, low
    else:
        raise ValueError(f"Unsupported morphological operator: {operation}")

    r = element.radius
    height, width = image.shape
    padded = np.pad(image, r, mode="constant", constant_values=pad_value)
    output = np.empty_like(image)

    def run_band(y0: int, y1: int) -> None:
        band = output[y0:y1]
        first = True
        for dx, dy in element.offsets:
            view = padded[r + dy + y0 : r + dy + y1, r + dx : r + dx + width]
            if first:
                band[...] = view
                first = False
            else:
                reduce(band, view, out=band)

    bands = _row_bands(height, workers)
    if len(bands) == 1:
        run_band(*bands[0])
    else:
        with ThreadPoolExecutor(max_workers=len(bands)) as pool:
            futures = [pool.submit(run_band, y0, y1) for y0, y1 in bands]
            for future in futures:
                future.result()

    return output


def erode(
    image: np.ndarray,
    element: StructuringElement,
    workers: int = 1,
) -> np.ndarray:
    """
    Grayscale erosion: minimum over the structuring element neighborhood.

    Shrinks bright regions. Out-of-bounds positions are ignored.
    """
    validate_image(image)
    _check_element(element)
    return _apply_morphology(image, element, "erode", _validate_workers(workers))


def dilate(
    image: np.ndarray,
    element: StructuringElement,
    workers: int = 1,
) -> np.ndarray:
    """
    Grayscale dilation: maximum over the structuring element neighborhood.

    Grows bright regions. Out-of-bounds positions are ignored.
    """
    validate_image(image)
    _check_element(element)
    return _apply_morphology(image, element, "dilate", _validate_workers(workers))


def _padded_sequence(
    image: np.ndarray,
    element: StructuringElement,
    first: Operation,
    second: Operation,
    pad_value: float,
    workers: int,
) -> np.ndarray:
    r = element.radius
    height, width = image.shape
    padded = np.pad(image, r, mode="constant", constant_values=pad_value)
    result = _apply_morphology(padded, element, first, workers)
    result = _apply_morphology(result, element, second, workers)
    return result[r : r + height, r : r + width].copy()


def opening(
    image: np.ndarray,
    element: StructuringElement,
    safe_border: bool = False,
    workers: int = 1,
) -> np.ndarray:
    """
    Morphological opening = Erode → Dilate.

    Removes bright features smaller than the structuring element.

    Args:
        image: 2D input image
        element: Structuring element
        safe_border: Pad the image by the element radius with the maximum
            sample value before opening, then crop. Avoids darkening border
            pixels through a truncated neighborhood.
        workers: Number of threads computing row bands

    Returns:
        Opened image, same shape and dtype as ``image``
    """
    validate_image(image)
    _check_element(element)
    workers = _validate_workers(workers)

    if safe_border:
        _, high = dtype_range(image.dtype)
        return _padded_sequence(image, element, "erode", "dilate", high, workers)

    result = _apply_morphology(image, element, "erode", workers)
    return _apply_morphology(result, element, "dilate", workers)


def closing(
    image: np.ndarray,
    element: StructuringElement,
    safe_border: bool = False,
    workers: int = 1,
) -> np.ndarray:
    """
    Morphological closing = Dilate → Erode.

    Fills dark gaps smaller than the structuring element. ``safe_border`` pads
    with the minimum sample value, the dual of :func:`opening`.
    """
    validate_image(image)
    _check_element(element)
    workers = _validate_workers(workers)

    if safe_border:
        low, _ = dtype_range(image.dtype)
        return _padded_sequence(image, element, "dilate", "erode", low, workers)

    result = _apply_morphology(image, element, "dilate", workers)
    return _apply_morphology(result, element, "erode", workers)


def saturating_subtract(minuend: np.ndarray, subtrahend: np.ndarray) -> np.ndarray:
    """
    Pixelwise ``minuend - subtrahend`` clamped to ``[0, dtype max]``, keeping the dtype.

    Signed integers are subtracted in the unsigned type of the same width: the
    wrapped result is the exact difference whenever ``minuend > subtrahend``.
    """
    dtype = minuend.dtype
    zero = np.zeros_like(minuend)
    if np.issubdtype(dtype, np.signedinteger):
        unsigned = np.dtype(f"u{dtype.itemsize}")
        difference = minuend.astype(unsigned) - subtrahend.astype(unsigned)
        difference = np.minimum(difference, np.iinfo(dtype).max).astype(dtype)
    else:
        with np.errstate(over="ignore"):
            difference = minuend - subtrahend
    return np.where(minuend > subtrahend, difference, zero).astype(dtype)


def _report(progress: Optional[ProgressCallback], fraction: float) -> None:
    if progress is not None:
        progress(fraction)


def white_top_hat(
    image: np.ndarray,
    element: StructuringElement,
    safe_border: bool = False,
    workers: int = 1,
    progress: Optional[ProgressCallback] = None,
) -> np.ndarray:
    """
    White top-hat = Original - Opening.

    Extracts bright details smaller than the structuring element.

    Args:
        image: 2D input image, left unmodified
        element: Structuring element
        safe_border: See :func:`opening`
        workers: Number of threads computing row bands
        progress: Called with the completed fraction after each stage

    Returns:
        Top-hat image, same shape and dtype as ``image``

    Raises:
        InvalidInput: If the image is empty or not 2D
        InvalidParameter: If ``element`` or ``workers`` is invalid
    """
    validate_image(image)
    _check_element(element)
    workers = _validate_workers(workers)
    logger.debug(
        "White top-hat on %dx%d image, radius=%d, safe_border=%s",
        image.shape[1], image.shape[0], element.radius, bool(safe_border),
    )

    _report(progress, 0.0)
    opened = opening(image, element, safe_border=safe_border, workers=workers)
    _report(progress, 2.0 / 3.0)
    result = saturating_subtract(image, opened)
    _report(progress, 1.0)
    return result


def black_top_hat(
    image: np.ndarray,
    element: StructuringElement,
    safe_border: bool = False,
    workers: int = 1,
    progress: Optional[ProgressCallback] = None,
) -> np.ndarray:
    """
    Black top-hat = Closing - Original.

    Extracts dark details smaller than the structuring element.
    """
    validate_image(image)
    _check_element(element)
    workers = _validate_workers(workers)
    logger.debug(
        "Black top-hat on %dx%d image, radius=%d, safe_border=%s",
        image.shape[1], image.shape[0], element.radius, bool(safe_border),
    )

    _report(progress, 0.0)
    closed = closing(image, element, safe_border=safe_border, workers=workers)
    _report(progress, 2.0 / 3.0)
    result = saturating_subtract(closed, image)
    _report(progress, 1.0)
    return result
