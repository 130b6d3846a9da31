"""Audio decode service used to read block and alias files."""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

import numpy as np
import soundfile as sf

from .exceptions import AudioDecodeError

logger = logging.getLogger(__name__)

# Subtypes libsndfile decodes to exact integers, with their width in bits
_INTEGER_BITS = {
    "PCM_S8": 8,
    "PCM_U8": 8,
    "PCM_16": 16,
    "PCM_24": 24,
    "PCM_32": 32,
    "ULAW": 16,
    "ALAW": 16,
}


@dataclass
class AudioHandle:
    """Open audio source plus the stream facts the resolver needs."""
    path: str
    channels: int
    frames: int
    samplerate: int
    subtype: str
    stream: Any = None

    @property
    def integer_bits(self) -> Optional[int]:
        """Width of integer source samples, None for float or lossy sources."""
        return _INTEGER_BITS.get(self.subtype)


class AudioDecodeService(ABC):
    """Interface for opening and reading audio files."""

    @abstractmethod
    def open(self, path: str) -> AudioHandle:
        """Open ``path``; raises AudioDecodeError on failure."""
        pass

    @abstractmethod
    def seek(self, handle: AudioHandle, offset: int) -> None:
        """Move to frame ``offset``; raises AudioDecodeError on failure."""
        pass

    @abstractmethod
    def read_frames(self, handle: AudioHandle, count: int, dtype: str) -> np.ndarray:
        """
        Read up to ``count`` frames.

        Returns:
            Array of shape (frames, channels); float data is normalized
            to [-1.0, 1.0), integer data is left-justified in ``dtype``
        """
        pass

    @abstractmethod
    def close(self, handle: AudioHandle) -> None:
        pass


class SoundFileDecodeService(AudioDecodeService):
    """Decode service backed by libsndfile through ``soundfile``."""

    def open(self, path: str) -> AudioHandle:
        try:
            stream = sf.SoundFile(str(path), mode='r')
        except (RuntimeError, OSError, sf.LibsndfileError) as e:
            raise AudioDecodeError(f"Failed to open {path}: {e}") from e

        logger.debug(f"Opened {path}: {stream.channels} ch, {stream.subtype}, {stream.frames} frames")
        return AudioHandle(
            path=str(path),
            channels=stream.channels,
            frames=stream.frames,
            samplerate=stream.samplerate,
            subtype=stream.subtype,
            stream=stream,
        )

    def seek(self, handle: AudioHandle, offset: int) -> None:
        try:
            handle.stream.seek(offset)
        except (RuntimeError, ValueError, sf.LibsndfileError) as e:
            raise AudioDecodeError(
                f"Failed to seek to position {offset} in {handle.path}"
            ) from e

    def read_frames(self, handle: AudioHandle, count: int, dtype: str) -> np.ndarray:
        try:
            return handle.stream.read(frames=count, dtype=dtype, always_2d=True)
        except (RuntimeError, ValueError, sf.LibsndfileError) as e:
            raise AudioDecodeError(f"Unable to read {count} samples from {handle.path}") from e

    def close(self, handle: AudioHandle) -> None:
        if handle.stream is not None and not handle.stream.closed:
            handle.stream.close()
