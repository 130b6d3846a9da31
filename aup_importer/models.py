"""Data models for the legacy project graph."""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import List, Dict, Optional, Any, Tuple

import numpy as np

from .validators import (
    is_good_string,
    parse_bool_int,
    parse_double,
    parse_int,
)

Attributes = List[Tuple[str, str]]


class SampleFormat(Enum):
    """Sample formats, keyed by their legacy numeric codes."""
    INT16 = 0x00020001
    INT24 = 0x00040001
    FLOAT = 0x0004000F

    @property
    def dtype(self) -> np.dtype:
        """Numpy dtype used to hold samples of this format."""
        return {
            SampleFormat.INT16: np.dtype(np.int16),
            SampleFormat.INT24: np.dtype(np.int32),
            SampleFormat.FLOAT: np.dtype(np.float32),
        }[self]

    @classmethod
    def from_name(cls, name: str) -> "SampleFormat":
        """Look up a format by its config name (int16, int24, float)."""
        names = {"int16": cls.INT16, "int24": cls.INT24, "float": cls.FLOAT}
        try:
            return names[name.lower()]
        except (KeyError, AttributeError):
            raise ValueError(f"Unknown sample format name: {name!r}")

    @classmethod
    def is_valid(cls, code: int) -> bool:
        return code in {fmt.value for fmt in cls}


class ProgressResult(Enum):
    """Outcome of an import or of a single progress update."""
    SUCCESS = "success"
    CANCELLED = "cancelled"
    FAILED = "failed"
    STOPPED = "stopped"


class Severity(Enum):
    """Severity of a user-facing report."""
    WARNING = "warning"
    ERROR = "error"


class TagHandler:
    """Entity that parses its own tag attributes and owns child tags."""

    def handle_tag(self, tag: str, attrs: Attributes) -> bool:
        return True

    def handle_child(self, tag: str) -> Optional["TagHandler"]:
        return None

    def handle_end_tag(self, tag: str) -> None:
        pass


@dataclass
class SampleRun:
    """Contiguous run of samples; ``data`` is None for silence."""
    start: int
    length: int
    data: Optional[np.ndarray] = None

    @property
    def is_silence(self) -> bool:
        return self.data is None


@dataclass(eq=False)
class ControlPoint(TagHandler):
    """Single envelope point."""
    t: float = 0.0
    val: float = 1.0

    def handle_tag(self, tag: str, attrs: Attributes) -> bool:
        try:
            for attr, value in attrs:
                if attr == "t":
                    self.t = parse_double(value, allow_negative=True)
                elif attr == "val":
                    self.val = parse_double(value, allow_negative=True)
        except ValueError:
            return False
        return True


@dataclass(eq=False)
class Envelope(TagHandler):
    """Gain or time-warp envelope owned by a clip or time track."""
    points: List[ControlPoint] = field(default_factory=list)
    numpoints: int = 0
    track_len: float = 0.0

    def handle_tag(self, tag: str, attrs: Attributes) -> bool:
        try:
            for attr, value in attrs:
                if attr == "numpoints":
                    self.numpoints = parse_int(value)
        except ValueError:
            return False
        return True

    def handle_child(self, tag: str) -> Optional[TagHandler]:
        if tag != "controlpoint":
            return None
        point = ControlPoint()
        self.points.append(point)
        return point

    def handle_end_tag(self, tag: str) -> None:
        if tag == "envelope":
            self.points.sort(key=lambda p: p.t)


@dataclass(eq=False)
class WaveClip(TagHandler):
    """Audio clip; nested clips are cut lines."""
    track: "WaveTrack"
    parent: Optional["WaveClip"] = None
    offset: float = 0.0
    colorindex: int = 0
    envelope: Envelope = field(default_factory=Envelope)
    runs: List[SampleRun] = field(default_factory=list)
    cut_lines: List["WaveClip"] = field(default_factory=list)
    declared_samples: Optional[int] = None
    max_samples: Optional[int] = None
    sample_format: Optional[SampleFormat] = None
    closed: bool = False
    _length: int = field(default=0, init=False, repr=False)

    @property
    def depth(self) -> int:
        """Nesting depth; 0 for a clip placed directly on its track."""
        return 0 if self.parent is None else self.parent.depth + 1

    @property
    def num_samples(self) -> int:
        return self._length

    @property
    def end_time(self) -> float:
        return self.offset + self.num_samples / self.track.rate

    def handle_tag(self, tag: str, attrs: Attributes) -> bool:
        try:
            for attr, value in attrs:
                if attr == "offset":
                    self.offset = parse_double(value, allow_negative=True)
                elif attr == "colorindex":
                    self.colorindex = parse_int(value)
        except ValueError:
            return False
        return True

    def handle_child(self, tag: str) -> Optional[TagHandler]:
        if tag == "waveclip":
            cut_line = WaveClip(track=self.track, parent=self)
            self.cut_lines.append(cut_line)
            return cut_line
        if tag == "envelope":
            return self.envelope
        return None

    def handle_end_tag(self, tag: str) -> None:
        if tag != "waveclip":
            return
        self.closed = True
        if self.declared_samples is not None:
            self.envelope.track_len = self.declared_samples / self.track.rate

    def append(self, data: np.ndarray, sample_format: Optional[SampleFormat] = None) -> None:
        """Append decoded samples at the end of the clip."""
        if self.sample_format is None:
            self.sample_format = sample_format
        self.runs.append(SampleRun(start=self.num_samples, length=len(data), data=data))
        self._length += len(data)

    def insert_silence(self, length: int) -> None:
        """Append ``length`` samples of silence at the end of the clip."""
        self.runs.append(SampleRun(start=self.num_samples, length=length))
        self._length += length

    def samples(self, sample_format: Optional[SampleFormat] = None) -> np.ndarray:
        """Materialize the clip's runs as one array, silence included."""
        sample_format = sample_format or self.sample_format or SampleFormat.FLOAT
        dtype = sample_format.dtype
        if not self.runs:
            return np.zeros(0, dtype=dtype)
        parts = []
        for run in self.runs:
            if run.is_silence:
                parts.append(np.zeros(run.length, dtype=dtype))
            else:
                parts.append(run.data.astype(dtype, copy=False))
        return np.concatenate(parts)

    def all_clips(self) -> List["WaveClip"]:
        """This clip followed by every nested cut line, depth first."""
        clips = [self]
        for cut_line in self.cut_lines:
            clips.extend(cut_line.all_clips())
        return clips


@dataclass(eq=False)
class Track(TagHandler):
    """Base track."""
    name: str = ""
    kind = "track"

    def _handle_name(self, value: str) -> bool:
        if not is_good_string(value):
            return False
        self.name = value
        return True


@dataclass(eq=False)
class WaveTrack(Track):
    """Audio track holding clips."""
    rate: float = 44100.0
    channel: int = 2
    linked: bool = False
    mute: bool = False
    solo: bool = False
    gain: float = 1.0
    pan: float = 0.0
    offset: float = 0.0
    colorindex: int = 0
    clips: List[WaveClip] = field(default_factory=list)
    kind = "wave"

    def handle_tag(self, tag: str, attrs: Attributes) -> bool:
        try:
            for attr, value in attrs:
                if attr == "name":
                    if not self._handle_name(value):
                        return False
                elif attr == "channel":
                    channel = parse_int(value)
                    if channel > 2:
                        return False
                    self.channel = channel
                elif attr == "linked":
                    self.linked = parse_bool_int(value)
                elif attr == "mute":
                    self.mute = parse_bool_int(value)
                elif attr == "solo":
                    self.solo = parse_bool_int(value)
                elif attr == "rate":
                    rate = parse_double(value)
                    if rate < 1.0 or rate > 1000000.0:
                        return False
                    self.rate = rate
                elif attr == "gain":
                    self.gain = parse_double(value, allow_negative=True)
                elif attr == "pan":
                    pan = parse_double(value, allow_negative=True)
                    if pan < -1.0 or pan > 1.0:
                        return False
                    self.pan = pan
                elif attr == "offset":
                    self.offset = parse_double(value, allow_negative=True)
                elif attr == "colorindex":
                    self.colorindex = parse_int(value)
        except ValueError:
            return False
        return True

    def create_clip(self) -> WaveClip:
        clip = WaveClip(track=self)
        self.clips.append(clip)
        return clip

    def rightmost_or_new_clip(self) -> WaveClip:
        """Last clip on the track; legacy projects have one implied clip."""
        if not self.clips:
            return self.create_clip()
        return max(self.clips, key=lambda c: c.offset)

    def append_samples(self, data: np.ndarray, sample_format: Optional[SampleFormat] = None) -> None:
        self.rightmost_or_new_clip().append(data, sample_format)

    def insert_silence(self, length: int) -> None:
        self.rightmost_or_new_clip().insert_silence(length)

    def all_clips(self) -> List[WaveClip]:
        clips = []
        for clip in self.clips:
            clips.extend(clip.all_clips())
        return clips

    def total_samples(self) -> int:
        """Samples committed to this track, cut lines included."""
        return sum(clip.num_samples for clip in self.all_clips())


@dataclass
class Label:
    """Text label spanning ``[t, t1]`` seconds."""
    t: float
    t1: float
    title: str = ""
    sel_low: Optional[float] = None
    sel_high: Optional[float] = None


@dataclass(eq=False)
class LabelTrack(Track):
    """Track of text labels."""
    labels: List[Label] = field(default_factory=list)
    numlabels: int = 0
    kind = "label"

    def handle_tag(self, tag: str, attrs: Attributes) -> bool:
        if tag == "label":
            return self._handle_label(attrs)
        try:
            for attr, value in attrs:
                if attr == "name":
                    if not self._handle_name(value):
                        return False
                elif attr == "numlabels":
                    self.numlabels = parse_int(value)
        except ValueError:
            return False
        return True

    def _handle_label(self, attrs: Attributes) -> bool:
        values: Dict[str, Any] = {}
        try:
            for attr, value in attrs:
                if attr in ("t", "t1"):
                    values[attr] = parse_double(value)
                elif attr == "selLow":
                    values["sel_low"] = parse_double(value)
                elif attr == "selHigh":
                    values["sel_high"] = parse_double(value)
                elif attr == "title":
                    if not is_good_string(value):
                        return False
                    values["title"] = value
        except ValueError:
            return False
        if "t" not in values:
            return False
        values.setdefault("t1", values["t"])
        self.labels.append(Label(**values))
        return True


@dataclass(eq=False)
class NoteTrack(Track):
    """MIDI note track; the serialized sequence is kept as text."""
    offset: float = 0.0
    visiblechannels: int = 0xFFFF
    velocity: float = 0.0
    bottomnote: int = 24
    data: str = ""
    kind = "note"

    def handle_tag(self, tag: str, attrs: Attributes) -> bool:
        try:
            for attr, value in attrs:
                if attr == "name":
                    if not self._handle_name(value):
                        return False
                elif attr == "offset":
                    self.offset = parse_double(value, allow_negative=True)
                elif attr == "visiblechannels":
                    self.visiblechannels = parse_int(value)
                elif attr == "velocity":
                    self.velocity = parse_double(value, allow_negative=True)
                elif attr == "bottomnote":
                    self.bottomnote = parse_int(value)
                elif attr == "data":
                    self.data = value
        except ValueError:
            return False
        return True


@dataclass(eq=False)
class TimeTrack(Track):
    """Time-warp track with a single envelope."""
    rangelower: float = 0.9
    rangeupper: float = 1.1
    displaylog: bool = False
    interpolatelog: bool = False
    envelope: Envelope = field(default_factory=Envelope)
    kind = "time"

    def handle_tag(self, tag: str, attrs: Attributes) -> bool:
        try:
            for attr, value in attrs:
                if attr == "name":
                    if not self._handle_name(value):
                        return False
                elif attr == "rangelower":
                    self.rangelower = parse_double(value)
                elif attr == "rangeupper":
                    self.rangeupper = parse_double(value)
                elif attr == "displaylog":
                    self.displaylog = parse_bool_int(value)
                elif attr == "interpolatelog":
                    self.interpolatelog = parse_bool_int(value)
        except ValueError:
            return False
        return True

    def handle_child(self, tag: str) -> Optional[TagHandler]:
        return self.envelope if tag == "envelope" else None


class Tags:
    """Project metadata map with upper-cased keys."""

    def __init__(self):
        self._tags: Dict[str, str] = {}

    def set_tag(self, name: str, value: str) -> None:
        if not name:
            return
        key = name.upper()
        if not value:
            self._tags.pop(key, None)
            return
        self._tags[key] = value

    def get_tag(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self._tags.get(name.upper(), default)

    def has_tag(self, name: str) -> bool:
        return name.upper() in self._tags

    def items(self):
        return self._tags.items()

    def to_dict(self) -> Dict[str, str]:
        return dict(self._tags)

    def __len__(self) -> int:
        return len(self._tags)


@dataclass
class ProjectAttributes:
    """View state read from the root tag; ``None`` means absent."""
    vpos: Optional[int] = None
    h: Optional[float] = None
    zoom: Optional[float] = None
    sel0: Optional[float] = None
    sel1: Optional[float] = None
    sel_low: Optional[float] = None
    sel_high: Optional[float] = None
    rate: Optional[float] = None
    snapto: Optional[bool] = None
    selectionformat: Optional[str] = None
    audiotimeformat: Optional[str] = None
    frequencyformat: Optional[str] = None
    bandwidthformat: Optional[str] = None

    def present(self) -> Dict[str, Any]:
        return {k: v for k, v in self.__dict__.items() if v is not None}


@dataclass(frozen=True)
class BlockFileDescriptor:
    """Deferred reference to one block of samples."""
    track: WaveTrack
    clip: Optional[WaveClip]
    path: str
    length: int
    origin: int = 0
    channel: int = 0
    sample_format: SampleFormat = SampleFormat.FLOAT


@dataclass
class ImportSummary:
    """Outcome of importing one legacy project file."""
    project_path: Path
    result: ProgressResult
    tracks: List[Track] = field(default_factory=list)
    tags: Dict[str, str] = field(default_factory=dict)
    descriptor_count: int = 0
    total_samples: int = 0
    message: Optional[str] = None
    warnings: List[str] = field(default_factory=list)
    imported_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "project_path": str(self.project_path),
            "result": self.result.value,
            "tracks": [
                {
                    "kind": track.kind,
                    "name": track.name,
                    "clips": len(track.all_clips()) if isinstance(track, WaveTrack) else 0,
                    "samples": track.total_samples() if isinstance(track, WaveTrack) else 0,
                }
                for track in self.tracks
            ],
            "tags": self.tags,
            "block_files": self.descriptor_count,
            "total_samples": self.total_samples,
            "message": self.message,
            "warnings": len(self.warnings),
            "imported_at": self.imported_at.isoformat(),
        }
