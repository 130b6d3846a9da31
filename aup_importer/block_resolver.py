"""Turns queued block-file descriptors into silence or decoded samples.

Decoding never fails an import: any problem opening, seeking or reading a
file is recorded as a warning and the block is replaced by silence of the
requested length.
"""
import logging
from typing import Optional

import numpy as np

from .audio_source import AudioDecodeService, AudioHandle, SoundFileDecodeService
from .diagnostics import ImportDiagnostics
from .exceptions import AudioDecodeError
from .models import BlockFileDescriptor, SampleFormat

logger = logging.getLogger(__name__)

INT16_SCALE = float(1 << 15)
INT24_SCALE = float(1 << 23)


def float_to_format(samples: np.ndarray, sample_format: SampleFormat) -> np.ndarray:
    """
    Convert normalized float samples to ``sample_format``.

    Integer targets are rounded to nearest and saturated to the format range.
    """
    if sample_format is SampleFormat.FLOAT:
        return samples.astype(np.float32)

    scale = INT16_SCALE if sample_format is SampleFormat.INT16 else INT24_SCALE
    scaled = np.rint(samples.astype(np.float64) * scale)
    scaled = np.clip(scaled, -scale, scale - 1)
    return scaled.astype(sample_format.dtype)


class BlockResolver:
    """Resolves one descriptor at a time into its owning clip or track."""

    def __init__(self,
                 decoder: Optional[AudioDecodeService] = None,
                 diagnostics: Optional[ImportDiagnostics] = None,
                 use_fast_paths: bool = True):
        """
        Initialize resolver.

        Args:
            decoder: Audio decode service (libsndfile by default)
            diagnostics: Accumulator that receives decode warnings
            use_fast_paths: Read integers directly when formats allow it
        """
        self.decoder = decoder or SoundFileDecodeService()
        self.diagnostics = diagnostics if diagnostics is not None else ImportDiagnostics()
        self.use_fast_paths = use_fast_paths

    def resolve(self, descriptor: BlockFileDescriptor) -> None:
        """Append the descriptor's samples (or silence) to its owner."""
        if not descriptor.path:
            self._add_silence(descriptor)
            return

        samples = None
        try:
            samples = self.decode(
                descriptor.path,
                descriptor.length,
                descriptor.origin,
                descriptor.channel,
                descriptor.sample_format,
            )
        except AudioDecodeError as e:
            self.diagnostics.set_warning(e.message)

        if samples is None:
            self.diagnostics.set_warning(
                f"Error while processing {descriptor.path}\n\nInserting silence."
            )
            self._add_silence(descriptor)
            return

        if descriptor.clip is not None:
            descriptor.clip.append(samples, descriptor.sample_format)
        else:
            descriptor.track.append_samples(samples, descriptor.sample_format)

    def decode(self, path: str, length: int, origin: int = 0, channel: int = 0,
               sample_format: SampleFormat = SampleFormat.FLOAT) -> np.ndarray:
        """
        Read ``length`` frames of one channel of ``path``.

        Raises:
            AudioDecodeError: If the file cannot be opened, seeked or read
                in full
        """
        handle = self.decoder.open(path)
        try:
            if channel >= handle.channels:
                raise AudioDecodeError(
                    f"Channel {channel} not present in {path} ({handle.channels} channels)"
                )
            if origin > 0:
                self.decoder.seek(handle, origin)
            return self._read(handle, length, channel, sample_format)
        finally:
            self.decoder.close(handle)

    def _read(self, handle: AudioHandle, length: int, channel: int,
              sample_format: SampleFormat) -> np.ndarray:
        bits = handle.integer_bits if self.use_fast_paths else None

        if bits is not None and bits <= 16 and sample_format is SampleFormat.INT16:
            # Both sides are 16-bit integers: no conversion needed
            frames = self._read_exact(handle, length, 'int16')
            path = "int16 passthrough" if handle.channels == 1 else "int16 de-interleave"
            samples = frames[:, channel]
        elif bits is not None and bits <= 24 and sample_format is SampleFormat.INT24:
            # libsndfile left-justifies into 32 bits; keep the low 24
            frames = self._read_exact(handle, length, 'int32')
            path = "int24 passthrough"
            samples = frames[:, channel] >> 8
        else:
            frames = self._read_exact(handle, length, 'float32')
            path = "float conversion"
            samples = float_to_format(frames[:, channel], sample_format)

        logger.debug(f"Read {length} frames from {handle.path} via {path}")
        return np.ascontiguousarray(samples, dtype=sample_format.dtype)

    def _read_exact(self, handle: AudioHandle, length: int, dtype: str) -> np.ndarray:
        frames = self.decoder.read_frames(handle, length, dtype)
        if len(frames) != length:
            raise AudioDecodeError(f"Unable to read {length} samples from {handle.path}")
        return frames

    def _add_silence(self, descriptor: BlockFileDescriptor) -> None:
        if descriptor.clip is not None:
            descriptor.clip.insert_silence(descriptor.length)
        else:
            descriptor.track.insert_silence(descriptor.length)
