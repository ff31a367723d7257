"""
Target extraction: raster image -> binary target grid.

The grid side is estimated from the image size with a fixed step function.
It approximates QR version sizing but does not read the symbol's declared
version, so the sampled cells are not guaranteed to line up with the true
module grid. Sampling is nearest-neighbour with a single brightness threshold.
"""
from __future__ import annotations
import logging
from typing import Callable, List, Tuple

import cv2
import numpy as np
import pygame

from qrtetris_config import CONFIG

log = logging.getLogger(__name__)

Matrix = List[List[int]]


class QRTetrisError(Exception):
    """Base class for errors raised by the engine."""


class DecodeError(QRTetrisError):
    """The input is not a readable image, or carries no QR symbol."""


def estimate_grid_size(size: int) -> int:
    """Map min(image width, height) to an odd grid side in [MIN_GRID, MAX_GRID]."""
    if size <= 25: return 21
    if size <= 30: return 25
    if size <= 35: return 29
    return min(CONFIG["MAX_GRID"], max(CONFIG["MIN_GRID"], (size // 8) * 2 + 1))


def sample_target(surface: pygame.Surface, n: int) -> Matrix:
    """Sample one pixel per cell; dark (mean RGB below threshold) -> 1."""
    w, h = surface.get_size()
    size = min(w, h)
    threshold = CONFIG["BRIGHTNESS_THRESHOLD"]
    grid: Matrix = []
    for y in range(n):
        row = []
        for x in range(n):
            c = surface.get_at((x * size // n, y * size // n))
            row.append(1 if (c.r + c.g + c.b) / 3 < threshold else 0)
        grid.append(row)
    return grid


def _to_gray(surface: pygame.Surface) -> np.ndarray:
    # surfarray is column-major (w, h, 3); OpenCV wants (h, w, 3)
    rgb = np.ascontiguousarray(np.transpose(pygame.surfarray.array3d(surface), (1, 0, 2)))
    return cv2.cvtColor(rgb, cv2.COLOR_RGB2GRAY)


UPSCALE_MIN = 200
UPSCALE_MAX = 4000


def _upscale_factor(w: int, h: int) -> int:
    """Integer zoom bringing the short side to UPSCALE_MIN, long side capped."""
    if min(w, h) >= UPSCALE_MIN:
        return 1
    k = -(-UPSCALE_MIN // max(1, min(w, h)))
    return max(1, min(k, UPSCALE_MAX // max(w, h)))


def detect_qr(surface: pygame.Surface) -> bool:
    """True if OpenCV finds a QR symbol anywhere in the image.

    Raises DecodeError if OpenCV cannot process the image at all.
    """
    try:
        gray = _to_gray(surface)
        h, w = gray.shape
        # small uploads: upscale and add a quiet zone so the finder patterns resolve
        k = _upscale_factor(w, h)
        if k > 1:
            gray = cv2.resize(gray, (w * k, h * k), interpolation=cv2.INTER_NEAREST)
        gray = cv2.copyMakeBorder(gray, 16, 16, 16, 16, cv2.BORDER_CONSTANT, value=255)
        found, _ = cv2.QRCodeDetector().detect(gray)
    except cv2.error as e:
        raise DecodeError("QR detection failed on %dx%d image" % surface.get_size()) from e
    return bool(found)


def load_image(path) -> pygame.Surface:
    try:
        return pygame.image.load(str(path))
    except (pygame.error, OSError, ValueError) as e:
        raise DecodeError(f"not a readable image: {path}") from e


def extract(image: pygame.Surface,
            detector: Callable[[pygame.Surface], bool] | None = detect_qr) -> Tuple[Matrix, int]:
    """Build the target grid for an image.

    Raises DecodeError when the detector rejects the image. Pass detector=None
    to skip symbol validation.
    """
    w, h = image.get_size()
    if w == 0 or h == 0:
        raise DecodeError("empty image")
    if detector is not None and not detector(image):
        raise DecodeError("no QR code found in image")
    n = estimate_grid_size(min(w, h))
    target = sample_target(image, n)
    log.info("extracted %dx%d target from %dx%d image (%d dark cells)",
             n, n, w, h, sum(map(sum, target)))
    return target, n
