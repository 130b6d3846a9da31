"""Import driver for legacy (.aup) project files."""
import logging
from pathlib import Path
from typing import List, Optional

from .audio_source import AudioDecodeService
from .block_resolver import BlockResolver
from .builder import ProjectBuilder
from .config import ImporterConfig
from .diagnostics import ImportDiagnostics
from .dispatcher import TagDispatcher
from .exceptions import CorruptedFileError, UnsupportedFormatError
from .host import HostProject
from .models import ImportSummary, ProgressResult, ProjectAttributes, Severity
from .progress import NullProgress, ProgressReporter
from .tokenizer import OPEN, iter_tag_events, looks_like_legacy_project

logger = logging.getLogger(__name__)

PLUGIN_ID = "legacyaup"
DESCRIPTION = "AUP project files (*.aup)"
EXTENSIONS = ("aup",)


class AUPImporter:
    """Imports one legacy project file into a host project."""

    def __init__(self, file_path: Path, project: HostProject,
                 config: Optional[ImporterConfig] = None,
                 decoder: Optional[AudioDecodeService] = None):
        """
        Initialize importer.

        Args:
            file_path: Path to the .aup file
            project: Host project receiving the tracks
            config: Importer settings (defaults if None)
            decoder: Audio decode service (libsndfile if None)
        """
        self.file_path = Path(file_path)
        if not self.file_path.exists():
            raise FileNotFoundError(f"Project file not found: {file_path}")

        self.project = project
        self.config = config or ImporterConfig()
        self.decoder = decoder
        self.diagnostics = ImportDiagnostics()

    def get_file_description(self) -> str:
        return DESCRIPTION

    def get_file_uncompressed_bytes(self) -> int:
        # Not computed for legacy projects
        return 0

    def get_stream_count(self) -> int:
        return 1

    def get_stream_info(self) -> List[str]:
        return []

    def set_stream_usage(self, stream_id: int, use: bool) -> None:
        pass

    def open(self) -> bool:
        """Check that the file is a legacy project this importer can read."""
        try:
            return looks_like_legacy_project(self.file_path, self.config.header_probe_bytes)
        except UnsupportedFormatError as e:
            self.project.report(Severity.ERROR, e.message)
            return False

    def import_project(self, progress: Optional[ProgressReporter] = None) -> ImportSummary:
        """
        Parse the document, resolve its block files and commit the tracks.

        Args:
            progress: Polled between block files for progress and cancellation

        Returns:
            ImportSummary; nothing is added to the host unless its result
            is SUCCESS
        """
        progress = progress or NullProgress()
        self.diagnostics = ImportDiagnostics()

        # A project with edits or tracks keeps its own view settings
        is_dirty = self.project.is_dirty()

        builder = ProjectBuilder(self.file_path, self.project, self.config, self.diagnostics)
        logger.info(f"Importing {self.file_path}")

        try:
            try:
                self._parse(builder)
            except CorruptedFileError as e:
                builder.discard()
                message = f"Couldn't import the project:\n\n{e.message}"
                self.project.report(Severity.ERROR, message)
                return self._summary(builder, ProgressResult.FAILED, message)

            if self.diagnostics.failed:
                builder.discard()
                self.project.report(Severity.ERROR, self.diagnostics.error)
                return self._summary(builder, ProgressResult.FAILED, self.diagnostics.error)

            result = self._resolve_blocks(builder, progress)
            if result is not ProgressResult.SUCCESS:
                logger.info(f"Import of {self.file_path.name} ended: {result.value}")
                builder.discard()
                return self._summary(builder, result)
        finally:
            progress.close()

        self._commit(builder, is_dirty)
        if self.diagnostics.warning:
            self.project.report(Severity.WARNING, self.diagnostics.warning)

        logger.info(
            f"Imported {len(builder.tracks)} tracks, {builder.total_samples} samples "
            f"from {self.file_path.name}"
        )
        return self._summary(builder, ProgressResult.SUCCESS, self.diagnostics.warning)

    def _parse(self, builder: ProjectBuilder) -> None:
        dispatcher = TagDispatcher(builder, self.diagnostics)
        for event in iter_tag_events(self.file_path):
            if event.kind == OPEN:
                ok = dispatcher.open_tag(event.name, event.attrs)
            else:
                ok = dispatcher.close_tag(event.name)
            if not ok:
                break

    def _resolve_blocks(self, builder: ProjectBuilder,
                        progress: ProgressReporter) -> ProgressResult:
        resolver = BlockResolver(self.decoder, self.diagnostics, self.config.use_fast_paths)
        total = builder.total_samples
        processed = 0

        for descriptor in builder.descriptors:
            if progress.is_cancelled():
                return ProgressResult.CANCELLED
            result = progress.update(processed, total)
            if result is not ProgressResult.SUCCESS:
                return result

            resolver.resolve(descriptor)
            processed += descriptor.length

        if builder.descriptors:
            progress.update(processed, total)

        logger.debug(f"Resolved {len(builder.descriptors)} block files, {processed} samples")
        return ProgressResult.SUCCESS

    def _commit(self, builder: ProjectBuilder, is_dirty: bool) -> None:
        """Hand the tracks to the host; the only point where the host changes."""
        for name, value in builder.tags.items():
            self.project.tags.set_tag(name, value)
        self.project.add_tracks(list(builder.tracks))

        if is_dirty:
            logger.debug("Host project has changes; keeping its view settings")
            return
        self._apply_project_attributes(builder.attrs)

    def _apply_project_attributes(self, attrs: ProjectAttributes) -> None:
        project = self.project
        if attrs.rate is not None:
            project.set_rate(attrs.rate)
        if attrs.snapto is not None:
            project.set_snap_to(attrs.snapto)
        if attrs.selectionformat is not None:
            project.set_selection_format(attrs.selectionformat)
        if attrs.audiotimeformat is not None:
            project.set_audio_time_format(attrs.audiotimeformat)
        if attrs.frequencyformat is not None:
            project.set_frequency_format(attrs.frequencyformat)
        if attrs.bandwidthformat is not None:
            project.set_bandwidth_format(attrs.bandwidthformat)

        # Positions go after snap-to, which changes how they are interpreted
        if attrs.vpos is not None:
            project.set_vpos(attrs.vpos)
        if attrs.h is not None:
            project.set_h(attrs.h)
        if attrs.zoom is not None:
            project.set_zoom(attrs.zoom)
        if attrs.sel0 is not None:
            project.set_sel0(attrs.sel0)
        if attrs.sel1 is not None:
            project.set_sel1(attrs.sel1)
        if attrs.sel_low is not None:
            project.set_sel_low(attrs.sel_low)
        if attrs.sel_high is not None:
            project.set_sel_high(attrs.sel_high)

    def _summary(self, builder: ProjectBuilder, result: ProgressResult,
                 message: Optional[str] = None) -> ImportSummary:
        committed = result is ProgressResult.SUCCESS
        return ImportSummary(
            project_path=self.file_path,
            result=result,
            tracks=list(builder.tracks) if committed else [],
            tags=builder.tags.to_dict() if committed else {},
            descriptor_count=len(builder.descriptors),
            total_samples=builder.total_samples,
            message=message,
            warnings=self.diagnostics.warnings,
        )


class AUPImportPlugin:
    """Entry point the host uses to recognize and open legacy projects."""

    plugin_id = PLUGIN_ID
    extensions = EXTENSIONS

    def get_format_description(self) -> str:
        return DESCRIPTION

    def open(self, file_path: Path, project: HostProject,
             config: Optional[ImporterConfig] = None,
             decoder: Optional[AudioDecodeService] = None) -> Optional[AUPImporter]:
        """
        Open ``file_path`` for import.

        Returns:
            An AUPImporter, or None if the file is not a supported project
        """
        importer = AUPImporter(file_path, project, config, decoder)
        if not importer.open():
            logger.info(f"{file_path} is not a supported legacy project")
            return None
        return importer
