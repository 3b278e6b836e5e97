# OCR engines producing ordered text lines
from .engine_selector import EngineSelector, EngineType, parse_engine_preference
from .paddle_engine import PaddleEngine
from .tesseract_engine import TesseractEngine

__all__ = [
    "EngineSelector",
    "EngineType",
    "PaddleEngine",
    "TesseractEngine",
    "parse_engine_preference",
]
