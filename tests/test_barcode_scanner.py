# tests/test_barcode_scanner.py

"""Tests for the camera scanner with OpenCV and zbar mocked out."""

import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

import numpy as np

from src.scanner.barcode_scanner import (
    BARCODE_TYPES,
    BarcodeScanner,
    ScannerError,
    decode_frame,
    decode_image,
)

CV2_PATH = "src.scanner.barcode_scanner.cv2"
DECODE_PATH = "src.scanner.barcode_scanner.decode"


def _symbol(data: bytes, kind: str = "EAN13") -> MagicMock:
    sym = MagicMock()
    sym.data = data
    sym.type = kind
    return sym


class TestDecodeFrame(unittest.TestCase):
    """Single-frame decoding."""

    @patch(DECODE_PATH)
    def test_returns_first_non_empty_code(self, mock_decode: MagicMock) -> None:
        mock_decode.return_value = [_symbol(b"  "), _symbol(b"7891000100103")]
        frame = np.zeros((480, 640), dtype=np.uint8)
        self.assertEqual(decode_frame(frame), "7891000100103")

    @patch(DECODE_PATH)
    def test_restricts_symbologies(self, mock_decode: MagicMock) -> None:
        mock_decode.return_value = []
        decode_frame(np.zeros((10, 10), dtype=np.uint8))
        self.assertEqual(
            mock_decode.call_args.kwargs["symbols"], BARCODE_TYPES
        )

    @patch(DECODE_PATH)
    def test_colour_frame_converted_to_gray(
        self, mock_decode: MagicMock
    ) -> None:
        mock_decode.return_value = []
        decode_frame(np.zeros((10, 10, 3), dtype=np.uint8))
        gray = mock_decode.call_args[0][0]
        self.assertEqual(gray.ndim, 2)

    def test_none_frame(self) -> None:
        self.assertIsNone(decode_frame(None))

    @patch(DECODE_PATH)
    def test_non_utf8_payload_does_not_raise(
        self, mock_decode: MagicMock
    ) -> None:
        mock_decode.return_value = [_symbol(b"\xff\xfe123", "CODE128")]
        code = decode_frame(np.zeros((4, 4), dtype=np.uint8))
        assert code is not None
        self.assertTrue(code.endswith("123"))


class TestDecodeImage(unittest.TestCase):
    """Decoding from files."""

    @patch(CV2_PATH)
    def test_unreadable_image_raises(self, mock_cv2: MagicMock) -> None:
        mock_cv2.imread.return_value = None
        with self.assertRaises(ScannerError):
            decode_image(Path("missing.png"))

    @patch(DECODE_PATH)
    @patch(CV2_PATH)
    def test_reads_code(
        self, mock_cv2: MagicMock, mock_decode: MagicMock
    ) -> None:
        mock_cv2.imread.return_value = np.zeros((10, 10), dtype=np.uint8)
        mock_decode.return_value = [_symbol(b"12345670", "EAN8")]
        self.assertEqual(decode_image(Path("label.png")), "12345670")


class TestBarcodeScanner(unittest.TestCase):
    """Camera loop behaviour."""

    @patch(CV2_PATH)
    def test_camera_unavailable_raises(self, mock_cv2: MagicMock) -> None:
        capture = MagicMock()
        capture.isOpened.return_value = False
        mock_cv2.VideoCapture.return_value = capture

        with self.assertRaises(ScannerError):
            BarcodeScanner(camera_index=3).scan(timeout=1)
        capture.release.assert_called_once()

    @patch("src.scanner.barcode_scanner.decode_frame")
    @patch(CV2_PATH)
    def test_stops_on_first_detection(
        self, mock_cv2: MagicMock, mock_decode_frame: MagicMock
    ) -> None:
        capture = MagicMock()
        capture.isOpened.return_value = True
        capture.read.return_value = (True, object())
        mock_cv2.VideoCapture.return_value = capture
        mock_decode_frame.side_effect = [None, None, "789", "999"]

        code = BarcodeScanner().scan(timeout=30)

        self.assertEqual(code, "789")
        self.assertEqual(capture.read.call_count, 3)
        capture.release.assert_called_once()

    @patch(CV2_PATH)
    def test_frame_read_failure_raises_and_releases(
        self, mock_cv2: MagicMock
    ) -> None:
        capture = MagicMock()
        capture.isOpened.return_value = True
        capture.read.return_value = (False, None)
        mock_cv2.VideoCapture.return_value = capture

        with self.assertRaises(ScannerError):
            BarcodeScanner().scan(timeout=30)
        capture.release.assert_called_once()

    @patch("src.scanner.barcode_scanner.decode_frame", return_value=None)
    @patch(CV2_PATH)
    def test_timeout_returns_none(
        self, mock_cv2: MagicMock, _mock_decode_frame: MagicMock
    ) -> None:
        capture = MagicMock()
        capture.isOpened.return_value = True
        capture.read.return_value = (True, object())
        mock_cv2.VideoCapture.return_value = capture

        self.assertIsNone(BarcodeScanner().scan(timeout=0))
        capture.release.assert_called_once()


if __name__ == "__main__":
    unittest.main()
