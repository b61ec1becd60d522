import cv2
import numpy as np
import numpy.typing as npt

from voucher_verifier.visual.base import BaseVisualCodeDecoder
from voucher_verifier.visual.exceptions import VisualCodeError


class OpenCvQrDecoder(BaseVisualCodeDecoder):
    """Detects and decodes QR codes with OpenCV's QRCodeDetector."""

    def decode(self, image: npt.NDArray[np.uint8]) -> str | None:
        try:
            gray = cv2.cvtColor(image, cv2.COLOR_RGB2GRAY) if image.ndim == 3 else image
            payload, _points, _straight = cv2.QRCodeDetector().detectAndDecode(gray)
        except cv2.error as exc:
            raise VisualCodeError(f"OpenCV QR detection failed: {exc}") from exc
        return payload or None
