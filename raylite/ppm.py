"""
Plain-text (P3) PPM image output.

Files are written through a temporary sibling that is renamed into
place only after the whole image has been written, so a failed render
never leaves a truncated file under the requested name.
"""

from __future__ import annotations
import io
import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, TextIO, Union
import numpy as np

logger = logging.getLogger(__name__)

MAX_VALUE = 255


class ImageWriteError(Exception):
    """The output image could not be created or written."""

    def __init__(self, path: Union[str, os.PathLike], cause: BaseException):
        self.path = str(path)
        self.cause = cause
        super().__init__(f"Couldn't write image {self.path}: {cause}")


class PPMFormatError(ValueError):
    """Text is not a well-formed plain PPM image."""
    pass


def _check_image(image: np.ndarray) -> None:
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected image of shape (height, width, 3), got {image.shape}")


def write_header(stream: TextIO, width: int, height: int) -> None:
    stream.write(f"P3\n{width} {height}\n{MAX_VALUE}\n")


def write_ppm(image: np.ndarray, stream: TextIO) -> None:
    """Write an 8-bit RGB image as plain PPM.

    Args:
        image: Integer array of shape (height, width, 3), rows top to bottom
        stream: Text stream to write to
    """
    _check_image(image)
    height, width = image.shape[:2]
    write_header(stream, width, height)
    for row in image:
        stream.write("".join(f"{r} {g} {b}\n" for r, g, b in row.tolist()))


def format_ppm(image: np.ndarray) -> str:
    """Return the plain PPM text for an image."""
    buffer = io.StringIO()
    write_ppm(image, buffer)
    return buffer.getvalue()


def read_ppm(text: str) -> np.ndarray:
    """Parse plain PPM text back into a (height, width, 3) uint8 array.

    Comments (`#` to end of line) and arbitrary whitespace between
    tokens are accepted.

    Raises:
        PPMFormatError: If the text is not a valid P3 image
    """
    tokens = []
    for line in text.splitlines():
        tokens.extend(line.split('#', 1)[0].split())

    if len(tokens) < 4 or tokens[0] != 'P3':
        raise PPMFormatError("Missing P3 header")

    try:
        width, height, max_value = (int(t) for t in tokens[1:4])
        values = [int(t) for t in tokens[4:]]
    except ValueError as exc:
        raise PPMFormatError(f"Non-integer token in PPM data: {exc}") from exc

    if width <= 0 or height <= 0:
        raise PPMFormatError(f"Invalid dimensions {width}x{height}")
    if max_value != MAX_VALUE:
        raise PPMFormatError(f"Unsupported max value {max_value}")
    if len(values) != width * height * 3:
        raise PPMFormatError(
            f"Expected {width * height * 3} channel values, got {len(values)}"
        )
    if any(v < 0 or v > max_value for v in values):
        raise PPMFormatError(f"Channel value outside [0, {max_value}]")

    return np.array(values, dtype=np.uint8).reshape(height, width, 3)


@contextmanager
def open_sink(path: Union[str, os.PathLike]) -> Iterator[TextIO]:
    """Open a text sink that replaces `path` atomically on success.

    Raises:
        ImageWriteError: If the file cannot be created, written or moved
            into place. The temporary file is removed in every failure case.
    """
    target = Path(path)
    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{target.name}.", suffix=".tmp", dir=target.parent
        )
    except OSError as exc:
        raise ImageWriteError(target, exc) from exc

    try:
        with os.fdopen(fd, 'w', encoding='ascii', newline='\n') as stream:
            yield stream
        # mkstemp creates 0600; give the image the mode a plain open() would
        os.chmod(tmp_name, 0o666 & ~_current_umask())
        os.replace(tmp_name, target)
    except OSError as exc:
        _discard(tmp_name)
        raise ImageWriteError(target, exc) from exc
    except BaseException:
        _discard(tmp_name)
        raise

    logger.info("Wrote %s", target)


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


def _discard(tmp_name: str) -> None:
    try:
        os.unlink(tmp_name)
    except FileNotFoundError:
        pass


def save_ppm(image: np.ndarray, path: Union[str, os.PathLike]) -> None:
    """Write an 8-bit RGB image to a plain PPM file."""
    _check_image(image)
    with open_sink(path) as stream:
        write_ppm(image, stream)
