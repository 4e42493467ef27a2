"""
Exceptions raised while probing, planning and converting media files
"""

from pathlib import Path
from typing import Union


class SlimmerError(Exception):
    """Base class for all video slimmer errors"""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NoVideoStreamError(SlimmerError):
    """The container has no video stream, so no plan can be made"""

    def __init__(self, filename: str):
        self.filename = filename
        super().__init__(f'File "{filename}" does not contain a matching video stream')


class UnknownStreamTypeError(SlimmerError):
    """ffprobe reported a stream whose codec_type we do not recognize"""

    def __init__(self, codec_type: str):
        self.codec_type = codec_type
        super().__init__(
            f'Unknown stream type "{codec_type}"; expected video, audio, subtitle or attachment'
        )


class NoProbeDataError(SlimmerError):
    """ffprobe returned no data for a file.

    This usually means the file is not a media container or is corrupted.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        super().__init__(f'ffprobe returned no data for "{self.path.name}"')


class BadExitCodeError(SlimmerError):
    """A subprocess exited with a non-zero exit code"""

    def __init__(self, process: str, exit_code: int):
        self.process = process
        self.exit_code = exit_code
        super().__init__(f'{process} exited with code {exit_code}')


class ToolNotFoundError(SlimmerError):
    """An external tool (ffmpeg, ffprobe) could not be started"""

    def __init__(self, tool: Union[str, Path], reason: str):
        self.tool = str(tool)
        super().__init__(f'Could not run "{self.tool}": {reason}')
