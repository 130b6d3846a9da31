"""Tag rules that build the imported project graph.

``ProjectBuilder`` owns everything constructed during one import: the track
list, the metadata tags, the project view attributes and the queue of
deferred block files. Nothing here touches the host project; the import
driver commits the result once the whole document has been read.
"""
import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional

from .config import ImporterConfig
from .diagnostics import ImportDiagnostics
from .dispatcher import BYPASS, TagFrame, TagKind
from .exceptions import (
    AUPImportError,
    InvalidAttributeError,
    MissingDataError,
    UnrecognizedTagError,
    UnsupportedFormatError,
)
from .host import HostProject
from .models import (
    Attributes,
    BlockFileDescriptor,
    LabelTrack,
    NoteTrack,
    ProjectAttributes,
    SampleFormat,
    TagHandler,
    Tags,
    TimeTrack,
    Track,
    WaveClip,
    WaveTrack,
)
from .validators import (
    is_good_file_name,
    is_good_file_string,
    is_good_path_name,
    is_good_path_string,
    is_good_string,
    parse_bounded_count,
    parse_count,
    parse_double,
    parse_flag,
    parse_int,
)

logger = logging.getLogger(__name__)

REQUIRED_PROJECT_ATTRS = ("version", "audacityversion", "projname")

_PROJECT_DOUBLES = {
    "h": "h",
    "zoom": "zoom",
    "sel0": "sel0",
    "sel1": "sel1",
    "selLow": "sel_low",
    "selHigh": "sel_high",
    "rate": "rate",
}

_PROJECT_FORMATS = (
    "selectionformat",
    "audiotimeformat",
    "frequencyformat",
    "bandwidthformat",
)

TIME_TRACK_BYPASS_MESSAGE = (
    "The active project already has a time track and one was encountered "
    "in the project being imported, bypassing imported time track."
)

Rule = Callable[[Attributes, Optional[TagFrame]], object]


class ProjectBuilder:
    """Entity builder driven by the tag dispatcher."""

    def __init__(self, file_path: Path, project: HostProject,
                 config: Optional[ImporterConfig] = None,
                 diagnostics: Optional[ImportDiagnostics] = None):
        """
        Initialize builder.

        Args:
            file_path: The .aup document being imported
            project: Host project, consulted but never modified
            config: Importer settings
            diagnostics: Accumulator for warnings
        """
        self.file_path = Path(file_path)
        self.project = project
        self.config = config or ImporterConfig()
        self.diagnostics = diagnostics if diagnostics is not None else ImportDiagnostics()

        self.attrs = ProjectAttributes()
        self.tags = Tags()
        self.tracks: List[Track] = []
        self.descriptors: List[BlockFileDescriptor] = []
        self.total_samples = 0

        self.project_dir: Optional[Path] = None
        self.file_map: Dict[str, str] = {}

        self.wave_track: Optional[WaveTrack] = None
        self.clip: Optional[WaveClip] = None
        self.sample_format: SampleFormat = self.config.default_sample_format

        self._rules: Dict[TagKind, Rule] = {
            TagKind.PROJECT: self._handle_project,
            TagKind.LABELTRACK: self._handle_label_track,
            TagKind.NOTETRACK: self._handle_note_track,
            TagKind.TIMETRACK: self._handle_time_track,
            TagKind.WAVETRACK: self._handle_wave_track,
            TagKind.TAGS: self._handle_tags,
            TagKind.TAG: self._handle_tag,
            TagKind.LABEL: self._handle_label,
            TagKind.WAVECLIP: self._handle_wave_clip,
            TagKind.SEQUENCE: self._handle_sequence,
            TagKind.WAVEBLOCK: self._handle_wave_block,
            TagKind.ENVELOPE: self._handle_envelope,
            TagKind.CONTROLPOINT: self._handle_control_point,
            TagKind.SIMPLEBLOCKFILE: self._handle_simple_block_file,
            TagKind.SILENTBLOCKFILE: self._handle_silent_block_file,
            TagKind.PCMALIASBLOCKFILE: self._handle_pcm_alias_block_file,
        }

        # "envelope" means a different envelope under each parent
        self._envelope_rules: Dict[TagKind, Callable[[TagFrame], Optional[TagHandler]]] = {
            TagKind.TIMETRACK: lambda parent: parent.owner.handle_child("envelope"),
            TagKind.WAVECLIP: lambda parent: parent.owner.handle_child("envelope"),
            TagKind.WAVETRACK: lambda parent: parent.owner.rightmost_or_new_clip().envelope,
        }

    def rule_for(self, kind: TagKind) -> Rule:
        return self._rules[kind]

    def tag_closed(self, frame: TagFrame) -> None:
        """Restore the active clip when a clip tag closes."""
        if frame.kind is TagKind.WAVECLIP and frame.owner is not None:
            clip = frame.owner
            self.clip = clip.parent if clip.parent is not None else clip

    def discard(self) -> None:
        """Drop every entity built so far."""
        logger.debug(f"Discarding {len(self.tracks)} tracks and {len(self.descriptors)} block files")
        self.tracks.clear()
        self.descriptors.clear()
        self.tags = Tags()
        self.total_samples = 0
        self.wave_track = None
        self.clip = None

    # Helpers

    def _good(self, value: str) -> bool:
        return is_good_string(value, self.config.max_string_length)

    @staticmethod
    def _require_parent(tag: str, parent: Optional[TagFrame], *kinds: TagKind) -> TagFrame:
        if parent is None or parent.kind not in kinds:
            raise UnrecognizedTagError(tag, parent.tag if parent else None)
        return parent

    # Root

    def _handle_project(self, attrs: Attributes, parent: Optional[TagFrame]):
        if parent is not None:
            raise UnrecognizedTagError("project", parent.tag)

        required = 0
        for attr, value in attrs:
            if not self._good(value):
                raise InvalidAttributeError("project", attr)

            try:
                if attr == "vpos":
                    self.attrs.vpos = parse_int(value)
                elif attr in _PROJECT_DOUBLES:
                    setattr(self.attrs, _PROJECT_DOUBLES[attr], parse_double(value))
                elif attr == "snapto":
                    self.attrs.snapto = parse_flag(value, self.config.snapto_tokens)
                elif attr in _PROJECT_FORMATS:
                    setattr(self.attrs, attr, value)
                elif attr in ("version", "audacityversion"):
                    required += 1
                elif attr == "projname":
                    required += 1
                    self._build_file_map(value)
            except ValueError as e:
                raise InvalidAttributeError("project", attr) from e

        if required < len(REQUIRED_PROJECT_ATTRS):
            raise UnsupportedFormatError(
                f"Not a legacy project: only {required} of "
                f"{', '.join(REQUIRED_PROJECT_ATTRS)} present"
            )
        return None

    def _build_file_map(self, projname: str) -> None:
        """Locate the data folder and index every file in it by bare name."""
        base = self.file_path.parent
        candidates = []
        # Only a bare folder name beside the project file is accepted
        if is_good_file_string(projname, self.config.max_string_length) and projname not in (".", ".."):
            candidates.append(base / projname)
        # Projects moved between systems may have mangled data folder names
        candidates.append(base / f"{self.file_path.stem}-data")

        project_dir = next((d for d in candidates if d.is_dir()), None)
        if project_dir is None:
            raise MissingDataError(
                f"Couldn't find the project data folder: \"{projname}\"",
                str(self.file_path)
            )

        self.project_dir = project_dir
        for path in sorted(project_dir.rglob("*")):
            if path.is_file():
                self.file_map[path.name] = str(path.resolve())
        logger.info(f"Indexed {len(self.file_map)} files in {project_dir}")

    # Tracks

    def _handle_label_track(self, attrs: Attributes, parent: Optional[TagFrame]):
        track = LabelTrack()
        self.tracks.append(track)
        return track

    def _handle_note_track(self, attrs: Attributes, parent: Optional[TagFrame]):
        track = NoteTrack()
        self.tracks.append(track)
        return track

    def _handle_time_track(self, attrs: Attributes, parent: Optional[TagFrame]):
        existing = self.project.has_time_track() or any(
            isinstance(t, TimeTrack) for t in self.tracks
        )
        if existing:
            self.diagnostics.set_warning(TIME_TRACK_BYPASS_MESSAGE)
            return BYPASS

        track = TimeTrack()
        self.tracks.append(track)
        return track

    def _handle_wave_track(self, attrs: Attributes, parent: Optional[TagFrame]):
        track = WaveTrack()
        if self.attrs.rate:
            track.rate = self.attrs.rate
        self.tracks.append(track)

        self.wave_track = track
        # Early projects had one implied clip; blocks before any clip tag
        # go to the track's rightmost clip
        self.clip = None
        return track

    # Metadata

    def _handle_tags(self, attrs: Attributes, parent: Optional[TagFrame]):
        # Legacy projects stored metadata as attributes of <tags>
        for attr, value in attrs:
            if not value:
                continue
            if not self._good(attr) or not self._good(value):
                self.diagnostics.set_warning(f"Ignoring invalid metadata '{attr}'")
                continue
            if attr == "id3v2":
                continue
            name = "TRACKNUMBER" if attr == "track" else attr.upper()
            self.tags.set_tag(name, value)
        return None

    def _handle_tag(self, attrs: Attributes, parent: Optional[TagFrame]):
        self._require_parent("tag", parent, TagKind.TAGS)

        name = value = ""
        for attr, raw in attrs:
            if not self._good(attr) or not self._good(raw):
                self.diagnostics.set_warning(f"Ignoring invalid metadata tag '{attr}'")
                break
            if attr == "name":
                name = raw
            elif attr == "value":
                value = raw

        # id3v2 is obsolete but still appears in old projects
        if name != "id3v2":
            self.tags.set_tag(name, value)
        return None

    def _handle_label(self, attrs: Attributes, parent: Optional[TagFrame]):
        parent = self._require_parent("label", parent, TagKind.LABELTRACK)
        return parent.owner

    # Clips and envelopes

    def _handle_wave_clip(self, attrs: Attributes, parent: Optional[TagFrame]):
        parent = self._require_parent("waveclip", parent, TagKind.WAVETRACK, TagKind.WAVECLIP)

        if parent.kind is TagKind.WAVETRACK:
            clip = parent.owner.create_clip()
        else:
            # Nested clips are cut lines
            clip = parent.owner.handle_child("waveclip")

        self.clip = clip
        return clip

    def _handle_envelope(self, attrs: Attributes, parent: Optional[TagFrame]):
        if parent is None or parent.kind not in self._envelope_rules:
            raise UnrecognizedTagError("envelope", parent.tag if parent else None)
        if parent.owner is None:
            return None
        return self._envelope_rules[parent.kind](parent)

    def _handle_control_point(self, attrs: Attributes, parent: Optional[TagFrame]):
        parent = self._require_parent("controlpoint", parent, TagKind.ENVELOPE)
        if parent.owner is None:
            return None
        return parent.owner.handle_child("controlpoint")

    # Sequences and blocks

    def _handle_sequence(self, attrs: Attributes, parent: Optional[TagFrame]):
        values = {}
        for attr, value in attrs:
            try:
                if attr == "maxsamples":
                    values["max_samples"] = parse_bounded_count(value)
                elif attr == "sampleformat":
                    code = parse_int(value)
                    if not SampleFormat.is_valid(code):
                        raise ValueError(f"invalid sample format {code:#x}")
                    values["sample_format"] = SampleFormat(code)
                elif attr == "numsamples":
                    values["declared_samples"] = parse_count(value)
            except ValueError as e:
                raise InvalidAttributeError("sequence", attr) from e

        if "sample_format" in values:
            self.sample_format = values["sample_format"]

        if parent is not None and isinstance(parent.owner, WaveClip):
            clip = parent.owner
            clip.max_samples = values.get("max_samples", clip.max_samples)
            clip.declared_samples = values.get("declared_samples", clip.declared_samples)
            clip.sample_format = values.get("sample_format", clip.sample_format)
        return None

    def _handle_wave_block(self, attrs: Attributes, parent: Optional[TagFrame]):
        for attr, value in attrs:
            if attr == "start":
                try:
                    parse_count(value)
                except ValueError as e:
                    raise InvalidAttributeError(
                        "waveblock", attr,
                        "Unable to parse the waveblock 'start' attribute"
                    ) from e
        return None

    def _handle_simple_block_file(self, attrs: Attributes, parent: Optional[TagFrame]):
        filename = ""
        length = 0
        for attr, value in attrs:
            attr = attr.lower()
            if attr == "filename":
                if is_good_file_string(value, self.config.max_string_length) and value in self.file_map:
                    filename = self.file_map[value]
                else:
                    self.diagnostics.set_warning(
                        f"Missing project file {value}\n\nInserting silence instead."
                    )
            elif attr == "len":
                length = self._block_length("simpleblockfile", attr, value)

        self._add_file("simpleblockfile", length, filename)
        return None

    def _handle_silent_block_file(self, attrs: Attributes, parent: Optional[TagFrame]):
        length = 0
        for attr, value in attrs:
            if attr.lower() == "len":
                length = self._block_length("silentblockfile", "len", value)

        self._add_file("silentblockfile", length)
        return None

    def _handle_pcm_alias_block_file(self, attrs: Attributes, parent: Optional[TagFrame]):
        tag = "pcmaliasblockfile"
        filename = ""
        start = 0
        length = 0
        channel = 0
        for attr, value in attrs:
            attr = attr.lower()
            try:
                if attr == "aliasfile":
                    filename = self._resolve_alias(value)
                elif attr == "aliasstart":
                    start = parse_count(value)
                elif attr == "aliaslen":
                    length = self._block_length(tag, attr, value)
                elif attr == "aliaschannel":
                    channel = parse_int(value)
            except ValueError as e:
                raise InvalidAttributeError(
                    tag, attr, f"Missing or invalid {tag} '{attr}' attribute."
                ) from e

        self._add_file(tag, length, filename, start, channel)
        return None

    def _resolve_alias(self, value: str) -> str:
        """Absolute path, then data folder, then relative to the project file."""
        max_length = self.config.max_string_length
        if is_good_path_name(value, max_length):
            return str(Path(value).resolve())
        if is_good_file_name(value, self.project_dir, max_length):
            return str((self.project_dir / value).resolve())
        if is_good_path_string(value, max_length) and not Path(value).is_absolute():
            relative = self.file_path.parent / value
            if relative.is_file():
                return str(relative.resolve())

        self.diagnostics.set_warning(f"Missing alias file {value}\n\nInserting silence instead.")
        return ""

    @staticmethod
    def _block_length(tag: str, attr: str, value: str) -> int:
        try:
            return parse_count(value, positive=True)
        except ValueError as e:
            raise InvalidAttributeError(
                tag, attr, f"Missing or invalid {tag} '{attr}' attribute."
            ) from e

    def _add_file(self, tag: str, length: int, path: str = "",
                  origin: int = 0, channel: int = 0) -> None:
        """Queue a block file for the active track and clip."""
        if length <= 0:
            attr = "aliaslen" if tag == "pcmaliasblockfile" else "len"
            raise InvalidAttributeError(tag, attr, f"Missing or invalid {tag} '{attr}' attribute.")
        if self.wave_track is None:
            raise AUPImportError(f"Found <{tag}> outside of a wave track")

        self.descriptors.append(BlockFileDescriptor(
            track=self.wave_track,
            clip=self.clip,
            path=path,
            length=length,
            origin=origin,
            channel=channel,
            sample_format=self.sample_format,
        ))
        self.total_samples += length
        logger.debug(f"Queued {tag} of {length} samples ({path or 'silence'})")
