"""
ffprobe/ffmpeg process execution with progress monitoring
"""

import json
import logging
import signal
import subprocess
import sys
from pathlib import Path
from typing import Callable, List, Optional

from .errors import BadExitCodeError, NoProbeDataError, ToolNotFoundError

logger = logging.getLogger(__name__)

# Global variables for signal handling
current_ffmpeg_process = None
interrupted = False

INTERRUPTED_EXIT_CODE = 130


class ProgressMonitor:
    """Tracks ffmpeg's `-progress` key=value output as a percentage of the duration"""

    def __init__(self, duration_seconds: Optional[float] = None):
        self.duration = duration_seconds
        self.current_time = 0.0
        self.progress_percent = 0.0

    def parse_progress_line(self, line: str) -> bool:
        """Parse one progress line; True when progress_percent may have changed"""
        line = line.strip()
        if '=' not in line:
            return False
        key, _, value = line.partition('=')

        if key == 'out_time_us':
            try:
                self.current_time = int(value) / 1_000_000
            except ValueError:
                return False
            if self.duration and self.duration > 0:
                self.progress_percent = min(100.0, (self.current_time / self.duration) * 100)
            return True
        if key == 'progress' and value == 'end':
            self.progress_percent = 100.0
            return True
        return False


def signal_handler(signum, frame):
    """Stop the running ffmpeg process on Ctrl+C or SIGTERM"""
    global interrupted

    logger.warning("Interrupted (signal %d)", signum)
    interrupted = True

    process = current_ffmpeg_process
    if process and process.poll() is None:
        process.terminate()
        try:
            process.wait(timeout=5)
        except subprocess.TimeoutExpired:
            logger.warning("ffmpeg did not exit, killing it")
            process.kill()
            process.wait()

    sys.exit(INTERRUPTED_EXIT_CODE)


def setup_signal_handlers():
    """Set up signal handlers for graceful interruption"""
    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)


def run(cmd: List, suppress_stderr: bool = False, duration: Optional[float] = None,
        progress_callback: Optional[Callable[[float], None]] = None) -> int:
    """Run ffmpeg and return its exit code.

    When progress_callback is given, ffmpeg is asked to write `-progress`
    reports to stdout and the callback receives the completed percentage
    of duration. Stderr goes to the terminal unless suppress_stderr is set.

    Raises:
        ToolNotFoundError: the executable could not be started.
    """
    global current_ffmpeg_process

    if interrupted:
        return INTERRUPTED_EXIT_CODE

    cmd_str = [str(c) for c in cmd]
    stderr = subprocess.DEVNULL if suppress_stderr else None

    if progress_callback is None:
        logger.debug("Running %s", ' '.join(cmd_str))
        try:
            return subprocess.run(cmd_str, stdin=subprocess.DEVNULL, stderr=stderr).returncode
        except OSError as e:
            raise ToolNotFoundError(cmd_str[0], e.strerror or str(e)) from e

    # Progress options must precede the output path, which is always last
    cmd_str = cmd_str[:-1] + ['-nostats', '-progress', 'pipe:1'] + cmd_str[-1:]
    logger.debug("Running %s", ' '.join(cmd_str))

    monitor = ProgressMonitor(duration)
    try:
        p = subprocess.Popen(cmd_str, stdin=subprocess.DEVNULL, stdout=subprocess.PIPE,
                             stderr=stderr, text=True)
    except OSError as e:
        raise ToolNotFoundError(cmd_str[0], e.strerror or str(e)) from e
    current_ffmpeg_process = p
    try:
        for line in p.stdout:
            if monitor.parse_progress_line(line):
                progress_callback(monitor.progress_percent)
        p.wait()
    finally:
        current_ffmpeg_process = None

    if interrupted:
        return INTERRUPTED_EXIT_CODE
    return p.returncode


def ffprobe_report(path: Path, ffprobe: Path = Path('ffprobe'), suppress_stderr: bool = False) -> dict:
    """Run ffprobe on a file and return its parsed JSON report (format and streams)

    Raises:
        ToolNotFoundError: ffprobe could not be started.
        NoProbeDataError: ffprobe printed nothing.
        BadExitCodeError: ffprobe exited non-zero.
    """
    cmd = [
        str(ffprobe),
        '-print_format', 'json',
        '-show_format', '-show_streams',
        str(path),
    ]
    logger.debug("Running %s", ' '.join(cmd))
    try:
        p = subprocess.run(cmd, stdin=subprocess.DEVNULL, stdout=subprocess.PIPE,
                           stderr=subprocess.DEVNULL if suppress_stderr else None, text=True)
    except OSError as e:
        raise ToolNotFoundError(ffprobe, e.strerror or str(e)) from e
    if not p.stdout or not p.stdout.strip():
        raise NoProbeDataError(path)
    if p.returncode != 0:
        raise BadExitCodeError(Path(ffprobe).name, p.returncode)
    return json.loads(p.stdout)
