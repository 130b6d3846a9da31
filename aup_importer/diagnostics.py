"""First-message-wins accumulator for import errors and warnings."""
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .models import Severity

logger = logging.getLogger(__name__)


@dataclass
class ImportDiagnostics:
    """
    Collects errors and warnings raised while importing.

    Only the first error and the first warning are kept for the user. An
    error marks the import as failed; warnings never do. Every message is
    logged and kept in ``history``.
    """
    error: Optional[str] = None
    warning: Optional[str] = None
    history: List[Tuple[Severity, str]] = field(default_factory=list)

    def set_error(self, message: str) -> bool:
        logger.error(message)
        self.history.append((Severity.ERROR, message))
        if self.error is None:
            self.error = message
        return False

    def set_warning(self, message: str) -> bool:
        logger.warning(message)
        self.history.append((Severity.WARNING, message))
        if self.warning is None:
            self.warning = message
        return False

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def message(self) -> Optional[str]:
        """The message to show the user: first error, else first warning."""
        return self.error if self.failed else self.warning

    @property
    def warnings(self) -> List[str]:
        return [msg for sev, msg in self.history if sev is Severity.WARNING]
