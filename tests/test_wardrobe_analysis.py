"""Batch re-analysis of wardrobe images."""

import threading

import pytest

from agents.wardrobe_analysis import (
    BatchAlreadyRunningError,
    PendingImage,
    WardrobeBatchAnalyzer,
)
from matcher_app.logging_config import CORRELATION_ID, correlation_context
from models.attribute_normalizer import ClassificationOutcome
from tools.classifier_gateway import GarmentClassifier


class KeyedClassifier(GarmentClassifier):
    """Returns a payload per image; images starting with b"bad" fail."""

    def classify(self, image: bytes, mime_type: str = "image/jpeg") -> ClassificationOutcome:
        if image.startswith(b"bad"):
            return ClassificationOutcome.failed("request_error", "simulated")
        return ClassificationOutcome.success({"category": "tops", "color_primary": "#FFFFFF", "confidence": 0.9})


class BlockingClassifier(GarmentClassifier):
    def __init__(self) -> None:
        self.started = threading.Event()
        self.release = threading.Event()

    def classify(self, image: bytes, mime_type: str = "image/jpeg") -> ClassificationOutcome:
        self.started.set()
        self.release.wait(timeout=5)
        return ClassificationOutcome.success({"category": "tops"})


def _pending(count: int, bad: set[int] = frozenset()) -> list[PendingImage]:
    return [
        PendingImage(item_id=f"item-{index}", image=(b"bad" if index in bad else b"img") + bytes([index]))
        for index in range(count)
    ]


def test_batches_of_five_with_delay_between_batches() -> None:
    sleeps: list[float] = []
    analyzer = WardrobeBatchAnalyzer(KeyedClassifier(), sleep=sleeps.append)

    report = analyzer.analyze(_pending(7, bad={3}))

    assert sleeps == [2.0]
    assert report.stats.total == 7
    assert report.stats.processed == 7
    assert report.stats.successful == 6
    assert report.stats.failed == 1
    assert report.stats.remaining == 0
    assert report.failures == [("item-3", "request_error")]
    assert [garment.item_id for garment in report.garments] == [f"item-{index}" for index in range(7)]


def test_failed_items_receive_sentinel_garment() -> None:
    report = WardrobeBatchAnalyzer(KeyedClassifier(), sleep=lambda _: None).analyze(_pending(2, bad={0}))

    assert report.garments[0].ai_confidence == 0.1
    assert report.garments[1].ai_confidence == 0.9
    assert "all_seasons" in report.garments[1].style_tags


def test_empty_input_returns_zero_stats() -> None:
    sleeps: list[float] = []

    report = WardrobeBatchAnalyzer(KeyedClassifier(), sleep=sleeps.append).analyze([])

    assert report.stats.total == 0
    assert report.garments == []
    assert sleeps == []


def test_concurrent_run_is_rejected() -> None:
    classifier = BlockingClassifier()
    analyzer = WardrobeBatchAnalyzer(classifier, sleep=lambda _: None)
    worker = threading.Thread(target=analyzer.analyze, args=(_pending(1),))
    worker.start()
    try:
        assert classifier.started.wait(timeout=5)
        with pytest.raises(BatchAlreadyRunningError):
            analyzer.analyze(_pending(1))
    finally:
        classifier.release.set()
        worker.join(timeout=5)

    assert not analyzer.is_processing


class CorrelationRecordingClassifier(GarmentClassifier):
    def __init__(self) -> None:
        self.seen: set[str | None] = set()
        self._lock = threading.Lock()

    def classify(self, image: bytes, mime_type: str = "image/jpeg") -> ClassificationOutcome:
        with self._lock:
            self.seen.add(CORRELATION_ID.get())
        return ClassificationOutcome.success({"category": "tops"})


def test_worker_threads_log_under_the_batch_correlation_id() -> None:
    classifier = CorrelationRecordingClassifier()
    analyzer = WardrobeBatchAnalyzer(classifier, sleep=lambda _: None)

    with correlation_context("run-1"):
        analyzer.analyze(_pending(7))

    assert classifier.seen == {"run-1"}
