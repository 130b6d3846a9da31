"""Legacy Audacity (.aup) project importer."""
from .models import (
    BlockFileDescriptor,
    ControlPoint,
    Envelope,
    ImportSummary,
    Label,
    LabelTrack,
    NoteTrack,
    ProgressResult,
    ProjectAttributes,
    SampleFormat,
    Severity,
    Tags,
    TimeTrack,
    Track,
    WaveClip,
    WaveTrack,
)
from .config import ImporterConfig, load_config
from .audio_source import AudioDecodeService, AudioHandle, SoundFileDecodeService
from .block_resolver import BlockResolver
from .builder import ProjectBuilder
from .diagnostics import ImportDiagnostics
from .dispatcher import TagDispatcher, TagFrame, TagKind
from .host import HostProject, InMemoryProject
from .importer import AUPImporter, AUPImportPlugin
from .progress import NullProgress, ProgressReporter, TqdmProgress
from .exceptions import (
    AUPImportError,
    AudioDecodeError,
    ConfigurationError,
    CorruptedFileError,
    InvalidAttributeError,
    MissingDataError,
    UnrecognizedTagError,
    UnsupportedFormatError,
)

__all__ = [
    "BlockFileDescriptor",
    "ControlPoint",
    "Envelope",
    "ImportSummary",
    "Label",
    "LabelTrack",
    "NoteTrack",
    "ProgressResult",
    "ProjectAttributes",
    "SampleFormat",
    "Severity",
    "Tags",
    "TimeTrack",
    "Track",
    "WaveClip",
    "WaveTrack",
    "ImporterConfig",
    "load_config",
    "AudioDecodeService",
    "AudioHandle",
    "SoundFileDecodeService",
    "BlockResolver",
    "ProjectBuilder",
    "ImportDiagnostics",
    "TagDispatcher",
    "TagFrame",
    "TagKind",
    "HostProject",
    "InMemoryProject",
    "AUPImporter",
    "AUPImportPlugin",
    "NullProgress",
    "ProgressReporter",
    "TqdmProgress",
    "AUPImportError",
    "AudioDecodeError",
    "ConfigurationError",
    "CorruptedFileError",
    "InvalidAttributeError",
    "MissingDataError",
    "UnrecognizedTagError",
    "UnsupportedFormatError",
]
