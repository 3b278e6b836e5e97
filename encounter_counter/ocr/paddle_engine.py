# PaddleOCR engine with lazy initialisation, one entry per detected text line
from typing import Any, List, Optional
import logging
import os

import numpy as np

from ..errors import OcrError

logger = logging.getLogger(__name__)

# Basic environment variables for PaddleOCR
os.environ.setdefault("FLAGS_eager_delete_tensor_gb", "0.0")

# Import PaddleOCR with fallback handling
try:
    from paddleocr import PaddleOCR

    _paddle_available = True
except Exception as e:
    logger.debug(f"PaddleOCR import failed: {e}")
    PaddleOCR = None
    _paddle_available = False


class PaddleEngine:  # Wrapper for PaddleOCR with lazy initialisation

    def __init__(self, min_confidence: float = 40.0, lang: str = "en"):
        self.min_confidence = min_confidence
        self.lang = lang
        self._paddle_ocr: Optional[object] = None
        self._init_failed = False

    @property
    def available(self) -> bool:  # Check if PaddleOCR is installed and has not failed to initialise
        return _paddle_available and not self._init_failed

    def get_engine(self) -> Optional[object]:
        if not self.available:
            return None
        if self._paddle_ocr is None:
            self._initialise_paddle()
        return self._paddle_ocr

    def _initialise_paddle(self) -> None:
        try:
            logger.info("Initializing PaddleOCR...")
            self._paddle_ocr = PaddleOCR(use_textline_orientation=False, lang=self.lang)
            logger.info("PaddleOCR ready")
        except Exception as e:
            logger.error(f"PaddleOCR initialization failed: {e}")
            self._init_failed = True
            self._paddle_ocr = None

    def recognize_lines(self, image: np.ndarray) -> List[Optional[str]]:
        paddle = self.get_engine()
        if paddle is None:
            raise OcrError("PaddleOCR engine is not available")

        try:
            results = paddle.ocr(np.ascontiguousarray(image))
        except Exception as e:
            raise OcrError(f"PaddleOCR failed: {e}") from e

        return self.extract_lines(results, self.min_confidence)

    @staticmethod
    def extract_lines(results: Any, min_confidence: float) -> List[Optional[str]]:
        # Handles both the OCRResult/dict format and the older [[box, (text, score)], ...] format
        if not isinstance(results, list) or not results or results[0] is None:
            return []

        result_data = results[0]
        pairs = []
        if isinstance(result_data, dict) or hasattr(result_data, "rec_texts"):
            if isinstance(result_data, dict):
                rec_texts = result_data.get("rec_texts", [])
                rec_scores = result_data.get("rec_scores", [])
            else:
                rec_texts = getattr(result_data, "rec_texts", [])
                rec_scores = getattr(result_data, "rec_scores", [])
            pairs = list(zip(rec_texts, rec_scores))
        else:
            for entry in result_data:
                text, score = entry[1]
                pairs.append((text, score))

        lines: List[Optional[str]] = []
        for text, score in pairs:
            confidence = float(score * 100 if score <= 1.0 else score)
            text = str(text).strip()
            lines.append(text if text and confidence >= min_confidence else None)
        return lines
