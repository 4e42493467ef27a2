"""
Main file processing logic
"""

import logging
from pathlib import Path
from typing import Optional

from .errors import BadExitCodeError
from .ffmpeg_builder import build_ffmpeg_cmd
from .ffmpeg_runner import INTERRUPTED_EXIT_CODE, run
from .media_analyzer import discover_media
from .models import Container, PlanOptions, ProcessingResult, ProcessingSettings
from .planner import is_noop, plan
from .rich_console import rich_output

logger = logging.getLogger(__name__)


def convert(container: Container, src: Path, dst: Path, operations, settings: ProcessingSettings):
    """Run ffmpeg for a plan, showing progress against the container duration.

    Raises:
        ToolNotFoundError: ffmpeg could not be started.
        BadExitCodeError: ffmpeg exited non-zero or was interrupted.
    """
    cmd = build_ffmpeg_cmd(settings.ffmpeg, src, dst, operations)
    dst.parent.mkdir(parents=True, exist_ok=True)

    progress = rich_output.create_progress_bar(container.duration or None)
    with progress:
        task_id = progress.add_task(f"Slimming {src.name}", total=100 if container.duration else None)
        ret = run(cmd, suppress_stderr=settings.suppress_stderr, duration=container.duration,
                  progress_callback=lambda percent: progress.update(task_id, completed=percent))

    if ret == INTERRUPTED_EXIT_CODE:
        rich_output.print_interrupted()
    if ret != 0:
        raise BadExitCodeError(Path(settings.ffmpeg).name, ret)


def process_file(src: Path, dst: Path, options: PlanOptions, settings: ProcessingSettings,
                 container: Optional[Container] = None) -> ProcessingResult:
    """Probe, plan and (unless dry-running) convert a single file.

    A pre-probed container can be passed in to skip probing.

    Raises:
        SlimmerError: probing, planning or ffmpeg failed.
    """
    if container is None:
        container = discover_media(src, settings.ffprobe, settings.suppress_stderr)
    operations = plan(container, options)

    if settings.skip_noops and is_noop(operations, container):
        logger.info("%s would not change; skipping", src)
        rich_output.print_skipped(f"{src.name}: nothing to remove or transcode")
        return ProcessingResult(source_path=src, target_path=dst, status='skipped',
                                operations=operations)

    if settings.dry_run:
        rich_output.print_dry_run(src, dst, operations)
        return ProcessingResult(source_path=src, target_path=dst, status='planned',
                                operations=operations)

    rich_output.print_file_path(src)
    rich_output.print_plan(container, operations)
    convert(container, src, dst, operations, settings)
    rich_output.print_success(f"Wrote {dst}")
    return ProcessingResult(source_path=src, target_path=dst, status='processed',
                            operations=operations)
