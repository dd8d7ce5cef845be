import logging
import time
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence

from models import Athlete, LogEntry, LogStatus, ProcessingProgress
from repos.sheet_gateway import SheetGateway

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "PDF generated successfully"
CANCELLED_MESSAGE = "Skipped: run cancelled"

ProgressCallback = Callable[[ProcessingProgress], None]


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class BatchProcessor:
    """Generates one PDF per athlete, strictly one athlete at a time.

    Each athlete is shown on the dashboard, given `settle_delay` seconds for the
    sheet to recalculate, exported, and logged. `rate_limit_delay` seconds pass
    between athletes to stay under the Sheets API quota. A failure only affects
    the athlete it happened on.
    """
    def __init__(
        self,
        gateway: SheetGateway,
        *,
        settle_delay: float = 1.0,
        rate_limit_delay: float = 2.0,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], str] = _utc_now,
        should_cancel: Optional[Callable[[], bool]] = None,
    ):
        self.gateway = gateway
        self.settle_delay = settle_delay
        self.rate_limit_delay = rate_limit_delay
        self._sleep = sleep
        self._clock = clock
        self._should_cancel = should_cancel
        self.is_processing = False
        self.warnings: List[str] = []

    def run(
        self,
        sheet_id: str,
        athletes: Sequence[Athlete],
        on_progress: Optional[ProgressCallback] = None,
    ) -> List[LogEntry]:
        if not athletes:
            logger.debug("No athletes to process for %s", sheet_id)
            return []
        if self.is_processing:
            raise RuntimeError("A run is already in progress")

        self.is_processing = True
        self.warnings = []
        emit = on_progress or (lambda _progress: None)
        total = len(athletes)
        results: List[LogEntry] = []
        cancelled = False
        try:
            for i, athlete in enumerate(athletes):
                if not cancelled and self._cancel_requested():
                    logger.info("Run cancelled before %s (%s/%s)", athlete.name, i + 1, total)
                    cancelled = True

                emit(ProcessingProgress(current=i + 1, total=total, current_athlete=athlete.name))
                if cancelled:
                    entry = self._entry(self._clock(), athlete, LogStatus.SKIP, CANCELLED_MESSAGE)
                else:
                    entry = self._process_athlete(sheet_id, athlete)

                results.append(entry)
                self._append_log(sheet_id, entry)

                if cancelled or i == total - 1:
                    continue
                # Skipped athletes make no API calls, so a pending cancel skips the pause too.
                if self._cancel_requested():
                    logger.info("Run cancelled after %s (%s/%s)", athlete.name, i + 1, total)
                    cancelled = True
                else:
                    self._sleep(self.rate_limit_delay)
        finally:
            self.is_processing = False

        emit(ProcessingProgress(current=total, total=total, current_athlete=None, is_complete=True))
        failed = sum(1 for e in results if e.status is LogStatus.ERROR)
        logger.info("Run complete for %s: %s athletes, %s failed", sheet_id, total, failed)
        return results

    def _process_athlete(self, sheet_id: str, athlete: Athlete) -> LogEntry:
        timestamp = self._clock()
        try:
            self.gateway.update_dashboard(sheet_id, athlete.name, athlete.team)
        except Exception as err:
            logger.warning("Dashboard update failed for %s (%s): %s", athlete.name, athlete.team, err)
            return self._entry(timestamp, athlete, LogStatus.ERROR, f"Error: {err}")

        self._sleep(self.settle_delay)

        file_name = athlete.file_name
        try:
            reference = self.gateway.export_to_pdf(sheet_id, file_name)
        except Exception as err:
            logger.warning("PDF export failed for %s (%s): %s", athlete.name, athlete.team, err)
            return self._entry(timestamp, athlete, LogStatus.ERROR, f"Error: {err}")

        logger.debug("Exported %s to %s", athlete.name, reference)
        return self._entry(timestamp, athlete, LogStatus.SUCCESS, SUCCESS_MESSAGE, pdf_reference=file_name)

    def _cancel_requested(self) -> bool:
        return self._should_cancel is not None and bool(self._should_cancel())

    def _append_log(self, sheet_id: str, entry: LogEntry) -> None:
        try:
            self.gateway.append_log(sheet_id, entry)
        except Exception as err:
            message = f"Could not write log row for {entry.athlete_name}: {err}"
            logger.warning(message)
            self.warnings.append(message)

    @staticmethod
    def _entry(
        timestamp: str,
        athlete: Athlete,
        status: LogStatus,
        message: str,
        pdf_reference: Optional[str] = None,
    ) -> LogEntry:
        return LogEntry(
            timestamp=timestamp,
            athlete_name=athlete.name,
            team=athlete.team,
            status=status,
            message=message,
            pdf_reference=pdf_reference,
        )
