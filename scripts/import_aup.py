"""Script to import legacy Audacity (.aup) projects and summarize them."""
import argparse
import json
import logging
from pathlib import Path
import sys

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from aup_importer import (
    AUPImportPlugin,
    AUPImportError,
    InMemoryProject,
    ProgressResult,
    TqdmProgress,
    load_config,
)
from aup_importer.config import ImporterConfig
from aup_importer.utils import export_clips, find_aup_files, save_summary

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def import_aup_file(file_path: Path, output_dir: Path, config: ImporterConfig,
                    export: bool = False, show_progress: bool = True) -> dict:
    """
    Import a single legacy project into a fresh in-memory project.

    Args:
        file_path: Path to .aup file
        output_dir: Directory to save the summary (and exported clips)
        config: Importer settings
        export: Write every clip as a WAV file
        show_progress: Show a progress bar while block files are read

    Returns:
        Dictionary with processing results
    """
    project = InMemoryProject()
    try:
        importer = AUPImportPlugin().open(file_path, project, config=config)
        if importer is None:
            message = project.reports[0][1] if project.reports else "Not a legacy project"
            return {
                "file": str(file_path),
                "status": "unsupported",
                "error": message
            }

        progress = TqdmProgress(desc=file_path.name) if show_progress else None
        summary = importer.import_project(progress)

        output_file = save_summary(summary, output_dir / f"{file_path.stem}_import.json")

        if summary.result is not ProgressResult.SUCCESS:
            return {
                "file": str(file_path),
                "status": summary.result.value,
                "error": summary.message
            }

        exported = export_clips(summary, output_dir / file_path.stem) if export else []

        logger.info(f"Imported {file_path.name}: {len(summary.tracks)} tracks, "
                    f"{summary.total_samples} samples, {len(summary.warnings)} warnings")

        return {
            "file": str(file_path),
            "status": "success",
            "output": str(output_file),
            "exported": [str(p) for p in exported],
            "summary": summary.to_dict()
        }

    except AUPImportError as e:
        logger.error(f"Import error for {file_path}: {e}")
        return {
            "file": str(file_path),
            "status": "error",
            "error": f"Import error: {e}"
        }
    except OSError as e:
        logger.error(f"I/O error importing {file_path}: {e}")
        return {
            "file": str(file_path),
            "status": "error",
            "error": f"I/O error: {e}"
        }


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Import legacy Audacity .aup projects and summarize them"
    )
    parser.add_argument(
        "input",
        type=Path,
        help=".aup file or directory containing .aup files"
    )
    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=Path("data/aup_imports"),
        help="Output directory for summaries (default: data/aup_imports)"
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Importer config YAML (default: config/importer.yaml)"
    )
    parser.add_argument(
        "--export-clips",
        action="store_true",
        help="Write every imported clip as a WAV file"
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable progress bars"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    input_path = Path(args.input)
    output_dir = Path(args.output)

    if not input_path.exists():
        logger.error(f"Input path does not exist: {input_path}")
        return 1

    config = load_config(args.config)

    if input_path.is_file():
        files = [input_path]
    elif input_path.is_dir():
        files = find_aup_files(input_path)
        logger.info(f"Found {len(files)} projects in {input_path}")
    else:
        logger.error(f"Invalid input path: {input_path}")
        return 1

    results = [
        import_aup_file(f, output_dir, config, args.export_clips, not args.no_progress)
        for f in files
    ]

    # Print summary
    successful = sum(1 for r in results if r.get("status") == "success")
    failed = len(results) - successful

    logger.info(f"\nImport complete:")
    logger.info(f"  Successful: {successful}")
    logger.info(f"  Failed: {failed}")
    logger.info(f"  Total: {len(results)}")

    output_dir.mkdir(parents=True, exist_ok=True)
    summary_file = output_dir / "processing_summary.json"
    with open(summary_file, 'w', encoding='utf-8') as f:
        json.dump({
            "total": len(results),
            "successful": successful,
            "failed": failed,
            "results": results
        }, f, indent=2, default=str)

    logger.info(f"Summary saved to: {summary_file}")

    return 0 if failed == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
