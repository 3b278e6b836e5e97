# OCR engine selection from configuration
import logging
from enum import Enum

from ..config import CounterConfig
from ..errors import OcrError
from .paddle_engine import PaddleEngine
from .tesseract_engine import TesseractEngine

logger = logging.getLogger(__name__)


class EngineType(Enum):  # Available OCR engine types
    AUTO = "auto"  # PaddleOCR when usable, else Tesseract
    PADDLE = "paddle"
    TESSERACT = "tesseract"


def parse_engine_preference(preference: str) -> EngineType:
    preference_map = {
        "auto": EngineType.AUTO,
        "paddle": EngineType.PADDLE,
        "paddleocr": EngineType.PADDLE,
        "tesseract": EngineType.TESSERACT,
    }
    engine_type = preference_map.get((preference or "").strip().lower())
    if engine_type is None:
        logger.warning(f"Unknown OCR engine '{preference}', using auto")
        return EngineType.AUTO
    return engine_type


class EngineSelector:  # Builds the configured engine and checks it can run

    def __init__(self, config: CounterConfig):
        self.config = config

    def select(self):
        engine_type = parse_engine_preference(self.config.ocr_engine)

        if engine_type in (EngineType.AUTO, EngineType.PADDLE):
            paddle = PaddleEngine(min_confidence=self.config.ocr_min_confidence)
            if paddle.get_engine() is not None:
                logger.info("Using PaddleOCR engine")
                return paddle
            if engine_type == EngineType.PADDLE:
                raise OcrError("PaddleOCR was requested but is not available")

        tesseract = TesseractEngine(
            min_confidence=self.config.ocr_min_confidence, tesseract_cmd=self.config.tesseract_cmd
        )
        if not tesseract.available:
            raise OcrError("No OCR engine available: install tesseract-ocr or paddleocr")
        logger.info("Using Tesseract OCR engine")
        return tesseract
