"""OCR engine interface definition."""

from abc import ABC, abstractmethod

from PIL import Image


class IOCREngine(ABC):
    """Interface for OCR operations."""

    @abstractmethod
    def extract_text(self, image: Image.Image) -> str:
        """Extract all text from image.

        Args:
            image: Image to extract text from

        Returns:
            Recognized text, empty string if nothing was found
        """
        pass
