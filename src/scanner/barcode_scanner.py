# src/scanner/barcode_scanner.py

"""Camera barcode scanning on top of OpenCV and zbar."""

import logging
import time
from pathlib import Path
from typing import Any

import cv2
from pyzbar.pyzbar import ZBarSymbol, decode

from src.config.settings import Settings

logger = logging.getLogger("consulteja.scanner")

# Retail and logistics symbologies; QR codes are ignored
BARCODE_TYPES: list[ZBarSymbol] = [
    ZBarSymbol.EAN13,
    ZBarSymbol.EAN8,
    ZBarSymbol.CODE128,
    ZBarSymbol.CODE39,
    ZBarSymbol.UPCA,
    ZBarSymbol.UPCE,
]


class ScannerError(Exception):
    """Raised when the camera or an image cannot be read."""


def decode_frame(frame: Any) -> str | None:
    """Return the first non-empty barcode in ``frame``, if any."""
    if frame is None:
        return None
    if len(frame.shape) == 3:
        gray = cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY)
    else:
        gray = frame
    for symbol in decode(gray, symbols=BARCODE_TYPES):
        code = symbol.data.decode("utf-8", errors="replace").strip()
        if code:
            logger.debug("Decoded %s: %s", symbol.type, code)
            return code
    return None


def decode_image(path: Path) -> str | None:
    """Decode the first barcode found in an image file."""
    image = cv2.imread(str(path))
    if image is None:
        raise ScannerError(f"Cannot read image: {path}")
    return decode_frame(image)


class BarcodeScanner:
    """Reads frames from a camera until a barcode is decoded.

    The camera is opened lazily by :meth:`scan` and released as soon as
    a code is found or the timeout expires.
    """

    def __init__(self, camera_index: int | None = None) -> None:
        self.settings = Settings()
        self.camera_index: int = (
            camera_index
            if camera_index is not None
            else self.settings.CAMERA_INDEX
        )

    def _open(self) -> Any:
        capture = cv2.VideoCapture(self.camera_index)
        if not capture.isOpened():
            capture.release()
            raise ScannerError(
                f"Could not open camera {self.camera_index}"
            )
        capture.set(cv2.CAP_PROP_FRAME_WIDTH, self.settings.CAMERA_WIDTH)
        capture.set(cv2.CAP_PROP_FRAME_HEIGHT, self.settings.CAMERA_HEIGHT)
        return capture

    def scan(self, timeout: float | None = None) -> str | None:
        """Block until a barcode is seen or ``timeout`` seconds pass."""
        limit = timeout if timeout is not None else self.settings.SCAN_TIMEOUT
        capture = self._open()
        logger.info("Scanning on camera %d", self.camera_index)
        deadline = time.monotonic() + limit
        try:
            while time.monotonic() < deadline:
                ok, frame = capture.read()
                if not ok:
                    raise ScannerError("Could not read a frame from the camera")
                code = decode_frame(frame)
                if code:
                    logger.info("Scanned barcode %s", code)
                    return code
        finally:
            capture.release()
        logger.info("Scan timed out after %.0fs", limit)
        return None
