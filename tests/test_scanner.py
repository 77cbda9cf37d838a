"""Test the scan-and-match pipeline with fake OCR and capture."""

import threading
from unittest.mock import Mock

import numpy as np

from triviabolt.config import get_default_region
from triviabolt.core.models import RecognitionResult, ScanStatus
from triviabolt.core.scanner import QuestionScanner
from triviabolt.vision import capture as capture_module
from triviabolt.vision.capture import CameraCapture
from triviabolt.vision.ocr import HandleState

GOLDEN_TEXT = "Question: 3/10  Which club won the 2010 World Cup top scorer award..."
CAMP_NOU_TEXT = "Score: +2,400 Which stadium is home of FC Barcelona"


def _scanner(bank, capture, handle):
    return QuestionScanner(capture, bank=bank, ocr=handle, interval=0.2)


class TestMatchText:
    """Test matching without the session."""

    def test_end_to_end_golden_boot(self, sample_bank, fake_capture, make_handle, fake_ocr):
        scanner = _scanner(sample_bank, fake_capture, make_handle(fake_ocr([GOLDEN_TEXT])))
        result = scanner.match_text(GOLDEN_TEXT)
        assert result.enough_keywords
        assert result.record.answer == "Thomas Müller"

    def test_short_text_is_not_matched(self, sample_bank, fake_capture, make_handle, fake_ocr):
        scanner = _scanner(sample_bank, fake_capture, make_handle(fake_ocr(["x"])))
        scanner.engine = Mock()
        result = scanner.match_text("cup")
        assert result.keywords == []
        assert result.candidate is None
        scanner.engine.find_best_match.assert_not_called()

    def test_single_keyword_skips_engine(self, sample_bank, fake_capture, make_handle, fake_ocr):
        scanner = _scanner(sample_bank, fake_capture, make_handle(fake_ocr(["x"])))
        scanner.engine = Mock()
        result = scanner.match_text("the ... Barcelona ?!")
        assert result.keywords == ["barcelona"]
        assert not result.enough_keywords
        scanner.engine.find_best_match.assert_not_called()


class TestRunPass:
    """Test single passes driven synchronously."""

    def test_pass_matches_and_announces(self, sample_bank, fake_capture, make_handle, fake_ocr):
        scanner = _scanner(sample_bank, fake_capture, make_handle(fake_ocr([GOLDEN_TEXT])))
        seen = []
        scanner.on_match(seen.append)

        assert scanner.scheduler.run_pass_now()

        snapshot = scanner.get_status()
        assert snapshot.status is ScanStatus.MATCHED
        assert snapshot.last_answer == "Thomas Müller"
        assert snapshot.raw_text == GOLDEN_TEXT.strip()
        assert [r.answer for r in seen] == ["Thomas Müller"]
        assert fake_capture.regions == [get_default_region()]

    def test_same_text_twice_emits_once(self, sample_bank, fake_capture, make_handle, fake_ocr):
        scanner = _scanner(sample_bank, fake_capture, make_handle(fake_ocr([GOLDEN_TEXT])))
        seen = []
        scanner.on_match(seen.append)

        scanner.scheduler.run_pass_now()
        scanner.scheduler.run_pass_now()

        assert len(seen) == 1

    def test_status_sequence(self, sample_bank, fake_capture, make_handle, fake_ocr):
        texts = ["~~ |", "random football words here", GOLDEN_TEXT, CAMP_NOU_TEXT]
        scanner = _scanner(sample_bank, fake_capture, make_handle(fake_ocr(texts)))
        seen = []
        scanner.on_match(seen.append)

        statuses = []
        for _ in texts:
            scanner.scheduler.run_pass_now()
            statuses.append(scanner.get_status().status)

        assert statuses == [
            ScanStatus.READY,
            ScanStatus.SEARCHING,
            ScanStatus.MATCHED,
            ScanStatus.MATCHED,
        ]
        assert [r.answer for r in seen] == ["Thomas Müller", "Camp Nou"]

    def test_capture_unavailable_skips_tick(
        self, sample_bank, fake_capture, make_handle, fake_ocr
    ):
        capture = fake_capture
        capture.ready = False
        engine = fake_ocr([GOLDEN_TEXT])
        handle = make_handle(engine)
        scanner = _scanner(sample_bank, capture, handle)

        assert scanner.run_pass() is None
        assert engine.calls == 0
        assert handle.state is HandleState.NOT_CREATED
        assert scanner.get_status().status is ScanStatus.READY

    def test_ocr_failure_resets_engine_and_keeps_status(
        self, sample_bank, fake_capture, make_handle, fake_ocr
    ):
        first = fake_ocr([GOLDEN_TEXT, RuntimeError("engine crashed")])
        second = fake_ocr([GOLDEN_TEXT])
        handle = make_handle(first, second)
        scanner = _scanner(sample_bank, fake_capture, handle)
        seen = []
        scanner.on_match(seen.append)

        scanner.run_pass()
        assert scanner.get_status().status is ScanStatus.MATCHED

        assert scanner.run_pass() is None
        assert handle.state is HandleState.POISONED
        assert scanner.get_status().status is ScanStatus.MATCHED

        scanner.run_pass()
        assert handle.created == [first, second]
        assert second.calls == 1
        assert len(seen) == 1

    def test_scan_image(self, sample_bank, fake_capture, make_handle, fake_ocr):
        scanner = _scanner(sample_bank, fake_capture, make_handle(fake_ocr([CAMP_NOU_TEXT])))
        result = scanner.scan_image(fake_capture.get_preprocessed_frame(None))
        assert result.record.answer == "Camp Nou"
        assert scanner.get_status().status is ScanStatus.MATCHED


class TestScanLoop:
    """Test ticks on the worker thread."""

    def test_no_second_ocr_call_while_in_flight(
        self, sample_bank, fake_capture, make_handle, fake_ocr
    ):
        gate = threading.Event()
        engine = fake_ocr([GOLDEN_TEXT], gate=gate)
        scanner = _scanner(sample_bank, fake_capture, make_handle(engine))
        try:
            assert scanner.on_tick()
            assert engine.started.wait(5)
            assert not scanner.on_tick()
            assert not scanner.on_tick()
            gate.set()
            assert scanner.scheduler.wait_idle(5)
            assert engine.calls == 1
            assert scanner.get_status().status is ScanStatus.MATCHED
        finally:
            gate.set()
            scanner.stop()

    def test_result_after_teardown_is_discarded(
        self, sample_bank, fake_capture, make_handle, fake_ocr
    ):
        gate = threading.Event()
        engine = fake_ocr([GOLDEN_TEXT], gate=gate)
        scanner = _scanner(sample_bank, fake_capture, make_handle(engine))
        seen = []
        scanner.on_match(seen.append)

        assert scanner.on_tick()
        assert engine.started.wait(5)
        assert scanner.stop(timeout=0.05) is False
        gate.set()
        assert scanner.scheduler.wait_idle(5)

        assert engine.calls == 1
        assert seen == []
        assert scanner.get_status().status is ScanStatus.READY
        assert not scanner.on_tick()

    def test_context_manager_runs_loop(self, sample_bank, fake_capture, make_handle, fake_ocr):
        engine = fake_ocr([GOLDEN_TEXT])
        matched = threading.Event()
        scanner = QuestionScanner(
            fake_capture, bank=sample_bank, ocr=make_handle(engine), interval=0.01
        )
        scanner.on_match(lambda _record: matched.set())

        with scanner:
            assert matched.wait(5)

        assert scanner.scheduler.active is False
        assert scanner.session.match_events == 1


class BlockingCap:
    """VideoCapture stand-in whose read() blocks until released by the test."""

    def __init__(self):
        self.gate = threading.Event()
        self.read_started = threading.Event()
        self.reading = False
        self.released = False
        self.released_during_read = False

    def isOpened(self):
        return not self.released

    def set(self, prop, value):
        return True

    def get(self, prop):
        return 0.0

    def read(self):
        self.reading = True
        self.read_started.set()
        self.gate.wait(5)
        self.reading = False
        return True, np.full((720, 1280, 3), 90, dtype=np.uint8)

    def release(self):
        if self.reading:
            self.released_during_read = True
        self.released = True


class TestTeardown:
    """Test that stopping never races the running pass."""

    def test_camera_is_not_released_during_read(
        self, monkeypatch, sample_bank, make_handle, fake_ocr
    ):
        cap = BlockingCap()
        monkeypatch.setattr(capture_module.cv2, "VideoCapture", lambda _idx: cap)
        camera = CameraCapture(index=0).open()
        scanner = _scanner(sample_bank, camera, make_handle(fake_ocr([GOLDEN_TEXT])))

        assert scanner.on_tick()
        assert cap.read_started.wait(5)
        unblock = threading.Timer(0.1, cap.gate.set)
        unblock.start()
        try:
            assert scanner.stop(timeout=5) is True
            camera.release()
        finally:
            cap.gate.set()
            unblock.cancel()

        assert cap.released
        assert not cap.released_during_read
        assert scanner.session.match_events == 0

    def test_stop_waits_for_result_being_committed(
        self, sample_bank, fake_capture, make_handle, fake_ocr
    ):
        scanner = _scanner(sample_bank, fake_capture, make_handle(fake_ocr([GOLDEN_TEXT])))
        seen = []
        scanner.on_match(seen.append)
        commit = scanner.session.apply
        observed = {}

        def apply_while_stopping(*args, **kwargs):
            stopper = threading.Thread(target=scanner.stop)
            stopper.start()
            stopper.join(0.1)
            observed["stopper"] = stopper
            observed["active"] = scanner.scheduler.active
            return commit(*args, **kwargs)

        scanner.session.apply = apply_while_stopping
        result = scanner.run_pass()
        observed["stopper"].join(5)

        assert observed["active"] is True
        assert result is not None
        assert len(seen) == 1
        assert not observed["stopper"].is_alive()
        assert scanner.scheduler.active is False


class TestRecognitionResult:
    """Test that OCR output travels as a RecognitionResult."""

    def test_run_pass_carries_recognition(
        self, sample_bank, fake_capture, make_handle, fake_ocr
    ):
        scanner = _scanner(sample_bank, fake_capture, make_handle(fake_ocr([GOLDEN_TEXT])))
        result = scanner.run_pass()
        assert result.recognition == RecognitionResult(GOLDEN_TEXT)
        assert result.raw_text == GOLDEN_TEXT

    def test_match_accepts_recognition(self, sample_bank, fake_capture, make_handle, fake_ocr):
        scanner = _scanner(sample_bank, fake_capture, make_handle(fake_ocr([GOLDEN_TEXT])))
        result = scanner.match(RecognitionResult(GOLDEN_TEXT))
        assert result.record.answer == "Thomas Müller"
        assert scanner.match_text(None).recognition == RecognitionResult("")
