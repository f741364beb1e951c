import logging

import numpy as np
import pytest


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    package_logger = logging.getLogger("tophat2d")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def dot_image():
    img = np.zeros((10, 10), np.uint8)
    img[5, 5] = 255
    return img


@pytest.fixture
def rng():
    return np.random.default_rng(1234)
