"""
Black and white morphological top-hat transforms for 2D grayscale images.
"""
from .errors import InvalidInput, InvalidParameter, TopHatError
from .image_io import read_gray, write_image
from .morphology import (
    black_top_hat,
    closing,
    dilate,
    erode,
    opening,
    saturating_subtract,
    white_top_hat,
)
from .structuring import StructuringElement, ball
from .watcher import FilterWatcher

__version__ = "0.1.0"
