"""OCR engine wrapper for Vision (macOS) and PaddleOCR."""

from __future__ import annotations

import logging
import platform
import threading
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

try:
    import cv2
    import numpy as np
except ImportError:
    cv2 = None  # type: ignore
    np = None  # type: ignore

from ..exceptions import OCRError

logger = logging.getLogger(__name__)


def normalize_ocr_items(items: dict[str, Any]) -> dict[str, Any]:
    """
    Normalize OCR engine output to `rec_texts`/`rec_scores`.

    PaddleOCR v3 returns line-level `rec_*` plus optional token-level
    `text_word` when `return_word_box=True`. Line-level text is preferred
    here since matching only needs reading order, not word boxes.
    """
    rec_texts = items.get("rec_texts")
    if not rec_texts:
        token_lines = items.get("text_word")
        if isinstance(token_lines, list):
            rec_texts = [
                " ".join(str(t).strip() for t in tokens if str(t).strip())
                for tokens in token_lines
                if isinstance(tokens, list)
            ]
    rec_texts = [str(t) for t in (rec_texts or [])]
    rec_scores = items.get("rec_scores", [1.0] * len(rec_texts))
    return {"rec_texts": rec_texts, "rec_scores": list(rec_scores)}


def ocr_result_to_text(result: Any) -> str:
    """Join the recognized texts of a `predict` result into one string."""
    if not result:
        return ""
    if isinstance(result, str):
        return result

    lines: List[str] = []
    for page in result:
        if not page:
            continue
        items = normalize_ocr_items(page)
        lines.extend(t.strip() for t in items["rec_texts"] if t and t.strip())
    return " ".join(lines)


class VisionOCR:
    """Wrapper for Apple's Vision framework OCR."""

    def __init__(self) -> None:
        try:
            import Vision
            from Quartz import CIImage, kCIFormatRGBA8
        except ImportError as e:
            raise OCRError(
                "Apple Vision dependencies not found. "
                "Install with: pip install -e '.[vision_macos]'"
            ) from e

        self.Vision = Vision
        self.CIImage = CIImage
        self.kCIFormatRGBA8 = kCIFormatRGBA8

    def predict(self, frame_nd: np.ndarray) -> List[Dict[str, Any]]:
        """Run OCR on a numpy image array (BGR or grayscale)."""
        if cv2 is None or np is None:
            raise OCRError("OpenCV and Numpy are required for OCR.")

        code = cv2.COLOR_GRAY2RGBA if frame_nd.ndim == 2 else cv2.COLOR_BGR2RGBA
        frame_rgba = cv2.cvtColor(frame_nd, code)
        h, w = frame_rgba.shape[:2]
        ci_image = self.CIImage.imageWithBitmapData_bytesPerRow_size_format_colorSpace_(
            frame_rgba.tobytes(), w * 4, (w, h), self.kCIFormatRGBA8, None
        )

        request = self.Vision.VNRecognizeTextRequest.alloc().init()
        # Fast level keeps a pass well inside the polling interval
        request.setRecognitionLevel_(self.Vision.VNRequestTextRecognitionLevelFast)
        request.setUsesLanguageCorrection_(True)

        handler = self.Vision.VNImageRequestHandler.alloc().initWithCIImage_options_(
            ci_image, None
        )
        success, error = handler.performRequests_error_([request], None)
        if not success:
            raise OCRError(f"Vision OCR request failed: {error}")

        rec_texts = []
        rec_scores = []
        for observation in request.results() or []:
            candidates = observation.topCandidates_(1)
            if not candidates:
                continue
            top_candidate = candidates[0]
            rec_texts.append(str(top_candidate.string()))
            rec_scores.append(float(top_candidate.confidence()))

        if not rec_texts:
            return []
        return [{"rec_texts": rec_texts, "rec_scores": rec_scores}]


def create_ocr_engine() -> Any:
    """Create a new OCR engine, preferring Apple Vision on Apple Silicon."""
    if platform.system() == "Darwin" and platform.machine() == "arm64":
        try:
            logger.info("Initializing Apple Vision OCR...")
            return VisionOCR()
        except Exception as e:
            logger.warning(f"Failed to initialize Apple Vision OCR: {e}. Falling back.")

    try:
        from paddleocr import PaddleOCR
    except ImportError as e:
        msg = "PaddleOCR not found. Please install via `pip install paddlepaddle paddleocr`"
        logger.error(msg)
        raise OCRError(msg) from e

    logger.info("Initializing PaddleOCR...")
    # Newer PaddleOCR releases may reject `show_log`, so retry without it.
    try:
        return PaddleOCR(use_textline_orientation=False, lang="en", show_log=False)
    except Exception as e:
        if "show_log" in str(e):
            logger.warning(
                "PaddleOCR rejected show_log argument; retrying with compatible kwargs"
            )
            return PaddleOCR(use_textline_orientation=False, lang="en")
        raise


class HandleState(str, Enum):
    NOT_CREATED = "not_created"
    CREATED = "created"
    POISONED = "poisoned"


class OcrEngineHandle:
    """Lazily created, shared OCR engine that is rebuilt after any failure.

    Engine construction is expensive, so one instance serves every tick.
    Creation happens under a lock: concurrent callers wait for the same
    creation instead of building duplicates. When recognition fails the
    handle is poisoned and the next ``acquire`` creates a fresh engine.
    """

    def __init__(self, factory: Optional[Callable[[], Any]] = None):
        self._factory = factory or create_ocr_engine
        self._lock = threading.Lock()
        self._engine: Any = None
        self.state = HandleState.NOT_CREATED
        self.creations = 0

    def acquire(self) -> Any:
        """Return the engine, creating it on first use or after a failure."""
        with self._lock:
            if self.state is HandleState.CREATED:
                return self._engine
            if self.state is HandleState.POISONED:
                logger.info("Re-initializing OCR engine after failure")
            try:
                engine = self._factory()
            except OCRError:
                self._poison()
                raise
            except Exception as e:
                self._poison()
                raise OCRError(f"Failed to initialize OCR engine: {e}") from e
            self._engine = engine
            self.state = HandleState.CREATED
            self.creations += 1
            return engine

    def _poison(self) -> None:
        self._engine = None
        self.state = HandleState.POISONED

    def reset(self) -> None:
        """Discard the cached engine so the next call re-initializes it."""
        with self._lock:
            self._poison()

    def recognize(self, image: Any) -> str:
        """Run OCR on a still image and return the recognized text."""
        engine = self.acquire()
        if cv2 is not None and getattr(image, "ndim", 3) == 2 and not isinstance(
            engine, VisionOCR
        ):
            image = cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
        try:
            result = engine.predict(image)
            return ocr_result_to_text(result)
        except Exception as e:
            logger.warning(f"OCR failed, discarding engine: {e}")
            self.reset()
            if isinstance(e, OCRError):
                raise
            raise OCRError(f"OCR recognition failed: {e}") from e
