"""
Dask-based batch processing of a directory tree
"""

import logging
import os
import sys
from pathlib import Path
from typing import List, Optional, Tuple, Union

import dask
from dask import delayed
from dask.diagnostics import ProgressBar

from .errors import SlimmerError
from .file_utils import collect_video_files, output_path_for
from .media_analyzer import discover_media
from .models import BatchProcessingStats, Container, PlanOptions, ProcessingResult, ProcessingSettings
from .processor import process_file
from .rich_console import rich_output

logger = logging.getLogger(__name__)

ProbeOutcome = Tuple[Path, Union[Container, Exception]]


class ParallelProcessor:
    """Probes files concurrently, then converts them one at a time.

    Probing and planning share no state, so they run on dask's threaded
    scheduler. Only one ffmpeg process runs at a time.
    """

    def __init__(self, max_workers: Optional[int] = None):
        self.max_workers = max_workers or min(os.cpu_count() or 1, 8)

    @staticmethod
    def _probe_single_file(path: Path, settings: ProcessingSettings) -> ProbeOutcome:
        try:
            return path, discover_media(path, settings.ffprobe, settings.suppress_stderr)
        except (SlimmerError, ValueError) as e:
            # ValueError covers malformed JSON and pydantic validation errors
            return path, e

    def probe_files(self, file_paths: List[Path], settings: ProcessingSettings) -> List[ProbeOutcome]:
        """Probe files in parallel; failures are returned in place of the container"""
        if not file_paths:
            return []

        rich_output.print_info(f"Analyzing {len(file_paths)} files with {self.max_workers} workers...")
        tasks = [delayed(self._probe_single_file)(path, settings) for path in file_paths]
        with ProgressBar(out=sys.stderr):
            results = dask.compute(*tasks, scheduler='threads', num_workers=self.max_workers)
        return list(results)

    def process_batch(self, root: Path, out_dir: Path, options: PlanOptions,
                      settings: ProcessingSettings) -> BatchProcessingStats:
        """Slim every video file below root into the same relative path under out_dir"""
        file_paths = collect_video_files(root)
        stats = BatchProcessingStats(total_files=len(file_paths))

        for path, outcome in self.probe_files(file_paths, settings):
            dst = output_path_for(path, root, out_dir)
            if isinstance(outcome, Exception):
                rich_output.print_error(f"Analysis failed for {path}", str(outcome))
                stats.add_result(ProcessingResult(source_path=path, target_path=dst, status='error',
                                                  error_message=str(outcome)))
                continue
            try:
                result = process_file(path, dst, options, settings, container=outcome)
            except SlimmerError as e:
                rich_output.print_error(f"Processing failed for {path}", e.message)
                result = ProcessingResult(source_path=path, target_path=dst, status='error',
                                          error_message=e.message)
            stats.add_result(result)

        return stats
