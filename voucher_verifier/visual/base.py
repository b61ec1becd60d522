from abc import ABC, abstractmethod

import numpy as np
import numpy.typing as npt


class BaseVisualCodeDecoder(ABC):
    """Contract for 2D barcode decoders."""

    @abstractmethod
    def decode(self, image: npt.NDArray[np.uint8]) -> str | None:
        """Decode the first visual code found in an image.

        Args:
            image: ``(height, width, 3)`` RGB or ``(height, width)`` grayscale
                pixel buffer.

        Returns:
            The decoded payload, or None when no code is detected.

        Raises:
            VisualCodeError: if the detector itself fails.
        """
