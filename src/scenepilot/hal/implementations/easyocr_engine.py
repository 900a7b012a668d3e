"""EasyOCR-based OCR engine implementation."""

from typing import Any

import easyocr
import numpy as np
from PIL import Image

from ...logging import get_logger
from ..interfaces.ocr_engine import IOCREngine

logger = get_logger(__name__)


class EasyOCREngine(IOCREngine):
    """OCR engine implementation using EasyOCR.

    The reader is created on first use because model loading takes seconds.
    """

    def __init__(self, languages: list[str] | None = None, gpu: bool = False) -> None:
        """Initialize EasyOCR engine.

        Args:
            languages: EasyOCR language codes
            gpu: Use GPU when CUDA is available
        """
        self.languages = languages or ["en"]
        self.use_gpu = gpu
        self._reader: easyocr.Reader | None = None

        if self.use_gpu:
            try:
                import torch

                if not torch.cuda.is_available():
                    self.use_gpu = False
                    logger.info("CUDA not available, using CPU for OCR")
            except ImportError:
                self.use_gpu = False
                logger.info("PyTorch not installed, using CPU for OCR")

        logger.info("easyocr_engine_initialized", gpu_enabled=self.use_gpu, languages=self.languages)

    @property
    def reader(self) -> easyocr.Reader:
        if self._reader is None:
            self._reader = easyocr.Reader(self.languages, gpu=self.use_gpu, verbose=False)
            logger.debug("easyocr_reader_created", languages=self.languages, gpu=self.use_gpu)
        return self._reader

    def _pil_to_numpy(self, image: Image.Image) -> np.ndarray[Any, Any]:
        if image.mode != "RGB":
            image = image.convert("RGB")
        return np.array(image)

    def extract_text(self, image: Image.Image) -> str:
        """Extract all text from image.

        Args:
            image: Image to extract text from

        Returns:
            Recognized fragments joined by spaces
        """
        results = self.reader.readtext(self._pil_to_numpy(image), detail=0)
        text = " ".join(results) if results else ""
        logger.debug("text_extracted", char_count=len(text))
        return text
