"""
Submit confirmed candidates to the persistence boundary.

Records are dispatched in input order to a worker pool whose size bounds how
many submissions are in flight (one by default). A failing submission only
increments the error tally; the rest of the queue always runs.
"""
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Optional, Sequence

from contact_import.domain.imports.models import CandidateRecord, ImportResult

logger = logging.getLogger(__name__)

ContactSubmitter = Callable[[CandidateRecord], object]
ProgressCallback = Callable[[int], None]


def progress_percent(processed: int, total: int) -> int:
    if total <= 0:
        return 100
    return min(100, round(processed * 100 / total))


class ImportExecutor:
    """
    Run a batch of submissions with bounded concurrency.

    Args:
        submitter: Called once per record; raising marks that record as failed.
        concurrency: Maximum submissions in flight (1 = strictly sequential).
        progress_callback: Receives the 0-100 progress after every attempt.
    """

    def __init__(
        self,
        submitter: ContactSubmitter,
        *,
        concurrency: int = 1,
        progress_callback: Optional[ProgressCallback] = None,
    ):
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self.submitter = submitter
        self.concurrency = concurrency
        self.progress_callback = progress_callback

    def _report(self, progress: int) -> None:
        if self.progress_callback is None:
            return
        try:
            self.progress_callback(progress)
        except Exception:
            logger.exception("Progress callback failed; continuing import")

    def run(self, records: Sequence[CandidateRecord]) -> ImportResult:
        total = len(records)
        result = ImportResult()
        if total == 0:
            self._report(100)
            return result

        logger.info(f"Submitting {total} contacts with concurrency {self.concurrency}")
        processed = 0

        with ThreadPoolExecutor(max_workers=self.concurrency) as pool:
            future_to_position = {
                pool.submit(self.submitter, record): position
                for position, record in enumerate(records, start=1)
            }
            for future in as_completed(future_to_position):
                position = future_to_position[future]
                try:
                    future.result()
                    result.success += 1
                except Exception as exc:
                    result.errors += 1
                    logger.warning(
                        f"Submission {position}/{total} failed for '{records[position - 1].name}': {exc}"
                    )
                processed += 1
                self._report(progress_percent(processed, total))

        logger.info(f"Import finished: {result.success} succeeded, {result.errors} failed")
        return result
