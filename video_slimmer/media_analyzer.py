"""
Media file analysis
"""

import logging
from pathlib import Path

from .ffmpeg_runner import ffprobe_report
from .models import Container

logger = logging.getLogger(__name__)


def discover_media(path: Path, ffprobe: Path = Path('ffprobe'), suppress_stderr: bool = False) -> Container:
    """Probe a media file and decode the report into a Container"""
    container = Container.from_ffprobe(ffprobe_report(path, ffprobe, suppress_stderr))
    logger.debug("%s: %d streams (%d video, %d audio, %d subtitle, %d attachment)",
                 path, len(container.streams), len(container.video_streams),
                 len(container.audio_streams), len(container.subtitle_streams),
                 len(container.attachment_streams))
    return container

