"""Batch (re-)analysis of wardrobe images through the garment classifier."""

from __future__ import annotations

import contextvars
import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from typing import Callable, List, Sequence, Tuple

from matcher_app.logging_config import get_logger, log_event, operation_context
from models.attribute_normalizer import ClassificationOutcome
from models.garment import Garment
from tools.classifier_gateway import GarmentClassifier

logger = get_logger(__name__)

DEFAULT_BATCH_SIZE = 5
BATCH_DELAY_SECONDS = 2.0


class BatchAlreadyRunningError(RuntimeError):
    """Raised when a batch run is requested while another is in progress."""


@dataclass(frozen=True)
class PendingImage:
    """An image awaiting classification."""

    item_id: str
    image: bytes
    mime_type: str = "image/jpeg"
    name: str | None = None


@dataclass
class BatchStats:
    total: int = 0
    processed: int = 0
    successful: int = 0
    failed: int = 0
    remaining: int = 0

    def record(self, succeeded: bool) -> None:
        self.processed += 1
        self.remaining -= 1
        if succeeded:
            self.successful += 1
        else:
            self.failed += 1


@dataclass
class BatchAnalysisReport:
    stats: BatchStats
    garments: List[Garment] = field(default_factory=list)
    failures: List[Tuple[str, str]] = field(default_factory=list)


def chunk(items: Sequence[PendingImage], size: int) -> List[List[PendingImage]]:
    if size < 1:
        raise ValueError("batch size must be at least 1")
    return [list(items[index : index + size]) for index in range(0, len(items), size)]


class WardrobeBatchAnalyzer:
    """Classifies pending images in fixed-size parallel batches.

    Batches are separated by a fixed delay to stay under provider rate limits.
    Failed items still produce the sentinel garment so they are not retried on
    every run. Only one run may be active per analyzer.
    """

    def __init__(
        self,
        classifier: GarmentClassifier,
        batch_size: int = DEFAULT_BATCH_SIZE,
        delay_seconds: float = BATCH_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.classifier = classifier
        self.batch_size = batch_size
        self.delay_seconds = delay_seconds
        self.sleep = sleep
        self.stats = BatchStats()
        self._lock = threading.Lock()
        self._processing = False

    @property
    def is_processing(self) -> bool:
        return self._processing

    def _analyze_one(self, pending: PendingImage) -> Tuple[PendingImage, ClassificationOutcome]:
        return pending, self.classifier.classify(pending.image, pending.mime_type)

    def _garment_for(self, pending: PendingImage, outcome: ClassificationOutcome) -> Garment:
        overrides = {"item_id": pending.item_id}
        garment = outcome.to_garment(**overrides)
        if pending.name and outcome.ok and not garment.name:
            garment = replace(garment, name=pending.name)
        return garment

    def analyze(self, pending_images: Sequence[PendingImage]) -> BatchAnalysisReport:
        with self._lock:
            if self._processing:
                raise BatchAlreadyRunningError("Batch processing already in progress")
            self._processing = True

        try:
            with operation_context("agent:wardrobe_analysis.analyze") as correlation_id:
                self.stats = BatchStats(total=len(pending_images), remaining=len(pending_images))
                report = BatchAnalysisReport(stats=self.stats)
                if not pending_images:
                    logger.info("No wardrobe images pending analysis")
                    return report

                batches = chunk(pending_images, self.batch_size)
                with ThreadPoolExecutor(max_workers=self.batch_size) as pool:
                    for batch_index, batch in enumerate(batches):
                        logger.info(
                            "Processing batch",
                            extra={"batch": batch_index + 1, "batches": len(batches), "items": len(batch)},
                        )
                        # Workers see the caller's correlation id.
                        futures = [
                            pool.submit(contextvars.copy_context().run, self._analyze_one, pending) for pending in batch
                        ]
                        for future in futures:
                            pending, outcome = future.result()
                            self.stats.record(outcome.ok)
                            report.garments.append(self._garment_for(pending, outcome))
                            if not outcome.ok:
                                reason = outcome.failure.reason if outcome.failure else "empty_payload"
                                report.failures.append((pending.item_id, reason))

                        if batch_index < len(batches) - 1:
                            self.sleep(self.delay_seconds)

                log_event(
                    logger,
                    logging.INFO,
                    "batch_analysis_completed",
                    correlation_id=correlation_id,
                    total=self.stats.total,
                    successful=self.stats.successful,
                    failed=self.stats.failed,
                )
                return report
        finally:
            with self._lock:
                self._processing = False


__all__ = [
    "BatchAlreadyRunningError",
    "PendingImage",
    "BatchStats",
    "BatchAnalysisReport",
    "WardrobeBatchAnalyzer",
]
