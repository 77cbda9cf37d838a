"""Test configuration and fixtures.

Provides reusable fixtures for:
- Small question databases with known keyword overlaps
- Fake OCR engines that replay scripted text
- Fake capture surfaces that never touch a camera
"""

import logging
import os
import threading
from typing import List, Optional

import numpy as np
import pytest

from triviabolt.core.models import QuestionRecord
from triviabolt.core.question_bank import QuestionBank
from triviabolt.exceptions import CaptureUnavailableError
from triviabolt.vision.ocr import OcrEngineHandle


def pytest_addoption(parser):
    parser.addoption(
        "--run-camera",
        action="store_true",
        default=False,
        help="Run tests that require a physical camera",
    )


def pytest_collection_modifyitems(config, items):
    run_camera = config.getoption("--run-camera") or os.getenv(
        "RUN_CAMERA_TESTS"
    ) == "1"
    if run_camera:
        return

    skip_camera = pytest.mark.skip(
        reason="requires a camera (use --run-camera or RUN_CAMERA_TESTS=1)"
    )
    for item in items:
        if "camera" in item.keywords:
            item.add_marker(skip_camera)


@pytest.fixture(autouse=True)
def reset_triviabolt_logger():
    """Drop handlers installed by CLI runs so later tests do not log to closed streams."""
    yield
    logger = logging.getLogger("triviabolt")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


# =============================================================================
# Question Fixtures
# =============================================================================

GOLDEN_BOOT = QuestionRecord(
    "Which player won the Golden Boot at the 2010 World Cup?", "Thomas Müller"
)


@pytest.fixture
def golden_boot():
    return GOLDEN_BOOT


@pytest.fixture
def sample_bank():
    """Three unrelated questions plus the Golden Boot one."""
    return QuestionBank([
        QuestionRecord("Who managed Manchester United for 26 years?", "Sir Alex Ferguson"),
        GOLDEN_BOOT,
        QuestionRecord("Which stadium is the home of FC Barcelona?", "Camp Nou"),
        QuestionRecord("What is the nickname of Juventus?", "The Old Lady"),
    ])


@pytest.fixture
def four_word_bank():
    """Records with exactly four keywords each, for threshold checks."""
    return QuestionBank([
        QuestionRecord("falcon harbor meadow quartz", "A"),
        QuestionRecord("falcon harbor violet yellow", "B"),
    ])


# =============================================================================
# OCR / Capture Fakes
# =============================================================================


class FakeOCR:
    """Engine whose `predict` replays scripted texts (last one repeats).

    An Exception instance in the script is raised instead of returned.
    """

    def __init__(self, texts: List, gate: Optional[threading.Event] = None):
        self.texts = list(texts)
        self.calls = 0
        self.gate = gate
        self.started = threading.Event()

    def predict(self, _frame):
        self.started.set()
        if self.gate is not None:
            self.gate.wait(5)
        idx = min(self.calls, len(self.texts) - 1)
        self.calls += 1
        item = self.texts[idx]
        if isinstance(item, Exception):
            raise item
        return [{"rec_texts": [item], "rec_scores": [0.9]}]


class FakeCapture:
    """Capture surface returning a blank grayscale strip."""

    def __init__(self, ready: bool = True):
        self.ready = ready
        self.requests = 0
        self.regions = []

    def get_preprocessed_frame(self, region):
        self.requests += 1
        self.regions.append(region)
        if not self.ready:
            raise CaptureUnavailableError("No frame available yet")
        return np.zeros((40, 200), dtype=np.uint8)


@pytest.fixture
def fake_capture():
    return FakeCapture()


@pytest.fixture
def make_handle():
    """Build an OcrEngineHandle whose factory hands out the given engines in turn."""

    def _make(*engines):
        pool = list(engines)
        created = []

        def factory():
            engine = pool.pop(0) if len(pool) > 1 else pool[0]
            created.append(engine)
            return engine

        handle = OcrEngineHandle(factory=factory)
        handle.created = created
        return handle

    return _make


@pytest.fixture
def fake_ocr():
    """Factory fixture: fake_ocr(texts, gate=None) -> FakeOCR."""
    return FakeOCR
