"""Progress and cancellation reporting for the import driver."""
import logging
from abc import ABC, abstractmethod
from typing import Optional

from tqdm import tqdm

from .models import ProgressResult

logger = logging.getLogger(__name__)


class ProgressReporter(ABC):
    """Interface polled by the importer between block files."""

    @abstractmethod
    def update(self, done: int, total: int) -> ProgressResult:
        """Report ``done`` of ``total`` samples; return whether to go on."""
        pass

    def is_cancelled(self) -> bool:
        return False

    def close(self) -> None:
        pass


class NullProgress(ProgressReporter):
    """Reporter that never cancels."""

    def update(self, done: int, total: int) -> ProgressResult:
        return ProgressResult.SUCCESS


class TqdmProgress(ProgressReporter):
    """Console progress bar counting imported samples."""

    def __init__(self, desc: str = "Importing", leave: bool = False):
        self.desc = desc
        self.leave = leave
        self._bar: Optional[tqdm] = None
        self._cancelled = False

    def update(self, done: int, total: int) -> ProgressResult:
        if self._bar is None:
            self._bar = tqdm(total=total, desc=self.desc, unit="samples",
                             unit_scale=True, leave=self.leave)
        self._bar.update(done - self._bar.n)
        return ProgressResult.SUCCESS

    def cancel(self) -> None:
        self._cancelled = True

    def is_cancelled(self) -> bool:
        return self._cancelled

    def close(self) -> None:
        if self._bar is not None:
            self._bar.close()
            self._bar = None
