"""
Video slimmer library modules

Plans which streams of a media container to keep, copy or transcode, and
drives ffmpeg to write the slimmed file.
"""

__version__ = '1.0.0'

# Import all public interfaces for easy access
from .errors import (
    SlimmerError, NoVideoStreamError, UnknownStreamTypeError, NoProbeDataError, BadExitCodeError,
    ToolNotFoundError,
)
from .models import (
    Disposition, FieldOrder, VideoStream, AudioStream, SubtitleStream, AttachmentStream,
    Container, StreamType, Copy, Convert, Operation, PlanOptions, ProcessingSettings,
    ProcessingResult, BatchProcessingStats, prefer_codec,
)
from .comparators import VideoComparator, AudioComparator, SubtitleComparator
from .selection import (
    best_video_stream, default_audio_stream, other_audio_streams, matching_subtitle_streams,
)
from .planner import plan, is_noop
from .media_analyzer import discover_media
from .ffmpeg_runner import run, ffprobe_report
from .ffmpeg_builder import build_ffmpeg_args, build_ffmpeg_cmd
from .processor import process_file
from .parallel_processor import ParallelProcessor
from .file_utils import VIDEO_EXTS, format_file_size, collect_video_files

__all__ = [
    'SlimmerError', 'NoVideoStreamError', 'UnknownStreamTypeError', 'NoProbeDataError',
    'BadExitCodeError', 'ToolNotFoundError',
    'Disposition', 'FieldOrder', 'VideoStream', 'AudioStream', 'SubtitleStream',
    'AttachmentStream', 'Container', 'StreamType', 'Copy', 'Convert', 'Operation',
    'PlanOptions', 'ProcessingSettings', 'ProcessingResult', 'BatchProcessingStats',
    'prefer_codec',
    'VideoComparator', 'AudioComparator', 'SubtitleComparator',
    'best_video_stream', 'default_audio_stream', 'other_audio_streams',
    'matching_subtitle_streams',
    'plan', 'is_noop',
    'discover_media',
    'run', 'ffprobe_report',
    'build_ffmpeg_args', 'build_ffmpeg_cmd',
    'process_file',
    'ParallelProcessor',
    'VIDEO_EXTS', 'format_file_size', 'collect_video_files',
]
