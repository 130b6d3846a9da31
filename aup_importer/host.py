"""Host project the importer commits into."""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .models import Severity, Tags, TimeTrack, Track

logger = logging.getLogger(__name__)


class HostProject(ABC):
    """Interface for the project that receives imported tracks."""

    @property
    @abstractmethod
    def tags(self) -> Tags:
        """Project metadata map."""
        pass

    @abstractmethod
    def is_dirty(self) -> bool:
        """True if the project has unsaved changes or any tracks."""
        pass

    @abstractmethod
    def has_time_track(self) -> bool:
        pass

    @abstractmethod
    def add_tracks(self, tracks: List[Track]) -> None:
        """Take ownership of imported tracks."""
        pass

    @abstractmethod
    def report(self, severity: Severity, message: str) -> None:
        """Show an error or warning to the user."""
        pass

    # View state setters, applied in a fixed order after a clean import
    @abstractmethod
    def set_rate(self, rate: float) -> None:
        pass

    @abstractmethod
    def set_snap_to(self, snap: bool) -> None:
        pass

    @abstractmethod
    def set_selection_format(self, name: str) -> None:
        pass

    @abstractmethod
    def set_audio_time_format(self, name: str) -> None:
        pass

    @abstractmethod
    def set_frequency_format(self, name: str) -> None:
        pass

    @abstractmethod
    def set_bandwidth_format(self, name: str) -> None:
        pass

    @abstractmethod
    def set_vpos(self, vpos: int) -> None:
        pass

    @abstractmethod
    def set_h(self, h: float) -> None:
        pass

    @abstractmethod
    def set_zoom(self, zoom: float) -> None:
        pass

    @abstractmethod
    def set_sel0(self, t0: float) -> None:
        pass

    @abstractmethod
    def set_sel1(self, t1: float) -> None:
        pass

    @abstractmethod
    def set_sel_low(self, f0: float) -> None:
        pass

    @abstractmethod
    def set_sel_high(self, f1: float) -> None:
        pass


@dataclass
class ViewState:
    """View settings of an in-memory project."""
    rate: float = 44100.0
    snap_to: bool = False
    selection_format: str = "hh:mm:ss + milliseconds"
    audio_time_format: str = "hh:mm:ss + milliseconds"
    frequency_format: str = "Hz"
    bandwidth_format: str = "octaves"
    vpos: int = 0
    h: float = 0.0
    zoom: float = 86.1328125
    sel0: float = 0.0
    sel1: float = 0.0
    sel_low: Optional[float] = None
    sel_high: Optional[float] = None


class InMemoryProject(HostProject):
    """Plain in-memory host used by the CLI and tests."""

    def __init__(self, dirty: bool = False):
        self.tracks: List[Track] = []
        self.view = ViewState()
        self.reports: List[Tuple[Severity, str]] = []
        self.applied: List[str] = []
        self.dirty = dirty
        self._tags = Tags()

    @property
    def tags(self) -> Tags:
        return self._tags

    def is_dirty(self) -> bool:
        return self.dirty or bool(self.tracks)

    def has_time_track(self) -> bool:
        return any(isinstance(t, TimeTrack) for t in self.tracks)

    def add_tracks(self, tracks: List[Track]) -> None:
        self.tracks.extend(tracks)
        self.dirty = True
        logger.info(f"Added {len(tracks)} tracks to project")

    def report(self, severity: Severity, message: str) -> None:
        self.reports.append((severity, message))

    def _set(self, name: str, value) -> None:
        setattr(self.view, name, value)
        self.applied.append(name)

    def set_rate(self, rate: float) -> None:
        self._set("rate", rate)

    def set_snap_to(self, snap: bool) -> None:
        self._set("snap_to", snap)

    def set_selection_format(self, name: str) -> None:
        self._set("selection_format", name)

    def set_audio_time_format(self, name: str) -> None:
        self._set("audio_time_format", name)

    def set_frequency_format(self, name: str) -> None:
        self._set("frequency_format", name)

    def set_bandwidth_format(self, name: str) -> None:
        self._set("bandwidth_format", name)

    def set_vpos(self, vpos: int) -> None:
        self._set("vpos", vpos)

    def set_h(self, h: float) -> None:
        self._set("h", h)

    def set_zoom(self, zoom: float) -> None:
        self._set("zoom", zoom)

    def set_sel0(self, t0: float) -> None:
        self._set("sel0", t0)

    def set_sel1(self, t1: float) -> None:
        self._set("sel1", t1)

    def set_sel_low(self, f0: float) -> None:
        self._set("sel_low", f0)

    def set_sel_high(self, f1: float) -> None:
        self._set("sel_high", f1)
