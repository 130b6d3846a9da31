"""Utility functions for legacy project import."""
import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List

import soundfile as sf

from .models import ImportSummary, SampleFormat, WaveTrack

logger = logging.getLogger(__name__)

_SUBTYPES = {
    SampleFormat.INT16: "PCM_16",
    SampleFormat.INT24: "PCM_24",
    SampleFormat.FLOAT: "FLOAT",
}


def save_summary(summary: ImportSummary, output_path: Path) -> Path:
    """
    Save an import summary to a JSON file.

    Args:
        summary: ImportSummary to save
        output_path: Path to save JSON file

    Returns:
        Path to saved file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(summary.to_dict(), f, indent=2, default=str)

    logger.info(f"Saved summary to {output_path}")
    return output_path


def load_summary(json_path: Path) -> Dict[str, Any]:
    """Load a summary written by save_summary."""
    with open(json_path, 'r', encoding='utf-8') as f:
        return json.load(f)


def find_aup_files(directory: Path) -> List[Path]:
    """Find all legacy project files under ``directory``."""
    return sorted(p for p in Path(directory).rglob("*.aup") if p.is_file())


def _safe_name(name: str) -> str:
    return re.sub(r"[^A-Za-z0-9_.-]+", "_", name).strip("_") or "track"


def export_clips(summary: ImportSummary, output_dir: Path) -> List[Path]:
    """
    Write every imported clip, cut lines included, as a WAV file.

    Args:
        summary: Summary of a successful import
        output_dir: Directory to write into

    Returns:
        Paths of the written files
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    written = []
    for track_idx, track in enumerate(summary.tracks):
        if not isinstance(track, WaveTrack):
            continue
        for clip_idx, clip in enumerate(track.all_clips()):
            if clip.num_samples == 0:
                continue
            sample_format = clip.sample_format or SampleFormat.FLOAT
            data = clip.samples(sample_format)
            if sample_format is SampleFormat.INT24:
                # soundfile expects 24-bit data left-justified in int32
                data = data << 8
            out_path = output_dir / (
                f"{summary.project_path.stem}_{track_idx:02d}_{_safe_name(track.name)}"
                f"_clip{clip_idx:02d}.wav"
            )
            sf.write(str(out_path), data, int(track.rate), subtype=_SUBTYPES[sample_format])
            written.append(out_path)
            logger.debug(f"Exported {clip.num_samples} samples to {out_path}")

    logger.info(f"Exported {len(written)} clips to {output_dir}")
    return written
