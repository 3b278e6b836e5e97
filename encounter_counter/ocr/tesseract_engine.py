# Pytesseract OCR engine returning one entry per detected text line
from typing import Any, Dict, List, Optional, Tuple
import logging

import numpy as np
import pytesseract

from ..errors import OcrError

logger = logging.getLogger(__name__)

LineKey = Tuple[int, int, int]  # block, paragraph, line


class TesseractEngine:
    # Pytesseract-based engine: word boxes grouped into lines, low-confidence words dropped

    def __init__(self, min_confidence: float = 40.0, tesseract_cmd: Optional[str] = None):
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

        self.min_confidence = min_confidence
        self.available = self._check_tesseract_availability()

        # PSM 6 treats the crop as one uniform block and still reports line numbers
        self.config = "--psm 6"

    def _check_tesseract_availability(self) -> bool:
        # Check if Tesseract is available on the system
        try:
            pytesseract.get_tesseract_version()
            return True
        except Exception as e:
            logger.warning(f"Tesseract not available ({e}). Install tesseract-ocr to enable.")
            return False

    def recognize_lines(self, image: np.ndarray) -> List[Optional[str]]:
        # Ordered line texts; None for a line with no confidently recognised word
        if not self.available:
            raise OcrError("Tesseract OCR engine is not available")

        try:
            data = pytesseract.image_to_data(image, config=self.config, output_type=pytesseract.Output.DICT)
        except Exception as e:
            raise OcrError(f"Tesseract OCR failed: {e}") from e

        return self.group_lines(data, self.min_confidence)

    @staticmethod
    def group_lines(data: Dict[str, List[Any]], min_confidence: float) -> List[Optional[str]]:
        # Level 4 rows are line boxes, level 5 rows are the words inside them
        lines: Dict[LineKey, List[str]] = {}

        for i, level in enumerate(data.get("level", [])):
            key = (int(data["block_num"][i]), int(data["par_num"][i]), int(data["line_num"][i]))

            if int(level) == 4:
                lines.setdefault(key, [])
            elif int(level) == 5:
                words = lines.setdefault(key, [])
                word = str(data["text"][i]).strip()
                try:
                    confidence = float(data["conf"][i])
                except (TypeError, ValueError):
                    confidence = -1.0
                if word and confidence >= min_confidence:
                    words.append(word)

        return [" ".join(words) if words else None for words in lines.values()]
