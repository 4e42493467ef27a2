"""
pytest configuration and fixtures for video slimmer tests

Most tests build ffprobe-style reports in memory. The integration tests
generate small media files with ffmpeg and are skipped when ffmpeg is not
installed.
"""

import subprocess
import sys
from pathlib import Path

import pytest

# Add the project root to path for importing
sys.path.insert(0, str(Path(__file__).parent.parent))
from video_slimmer import Container, PlanOptions


def video_stream(index, codec='h264', width=1920, height=1080, dispositions=('default',), **tags):
    """ffprobe-style record for a video stream"""
    return {
        'index': index,
        'codec_type': 'video',
        'codec_name': codec,
        'profile': 'High',
        'width': width,
        'height': height,
        'pix_fmt': 'yuv420p',
        'field_order': 'progressive',
        'disposition': {name: 1 for name in dispositions},
        'tags': tags,
    }


def audio_stream(index, codec='aac', channels=2, language=None, dispositions=('default',),
                 sample_rate=48000, bits_per_sample=0, bits_per_raw_sample=None, **tags):
    """ffprobe-style record for an audio stream"""
    record = {
        'index': index,
        'codec_type': 'audio',
        'codec_name': codec,
        'sample_fmt': 'fltp',
        'sample_rate': str(sample_rate),
        'channels': channels,
        'bits_per_sample': bits_per_sample,
        'disposition': {name: 1 for name in dispositions},
        'tags': dict(tags),
    }
    if bits_per_raw_sample is not None:
        record['bits_per_raw_sample'] = str(bits_per_raw_sample)
    if language is not None:
        record['tags']['language'] = language
    return record


def subtitle_stream(index, codec='subrip', language=None, dispositions=(), **tags):
    """ffprobe-style record for a subtitle stream"""
    record = {
        'index': index,
        'codec_type': 'subtitle',
        'codec_name': codec,
        'disposition': {name: 1 for name in dispositions},
        'tags': dict(tags),
    }
    if language is not None:
        record['tags']['language'] = language
    return record


def attachment_stream(index, filename='font.ttf'):
    """ffprobe-style record for an attachment"""
    return {
        'index': index,
        'codec_type': 'attachment',
        'disposition': {'default': 0, 'attached_pic': 0},
        'tags': {'filename': filename, 'mimetype': 'font/ttf'},
    }


def probe_report(*streams, filename='movie.mkv', duration='5400.000000', size='8000000000'):
    """A whole ffprobe report around the given stream records"""
    return {
        'streams': list(streams),
        'format': {
            'filename': filename,
            'duration': duration,
            'size': size,
            'tags': {'title': 'Movie'},
        },
    }


def make_container(*streams, **format_fields) -> Container:
    return Container.from_ffprobe(probe_report(*streams, **format_fields))


@pytest.fixture
def scenario_container():
    """1080p h264, 5.1 truehd English default, 2.0 aac English commentary, English subrip"""
    return make_container(
        video_stream(0, codec='h264'),
        audio_stream(1, codec='truehd', channels=6, language='eng', dispositions=('default',)),
        audio_stream(2, codec='aac', channels=2, language='eng', dispositions=('comment',)),
        subtitle_stream(3, codec='subrip', language='eng'),
    )


@pytest.fixture
def scenario_options():
    return PlanOptions(
        languages=['eng'],
        include_other_audio=True,
        video_codecs=['hevc', 'h264'],
        audio_codecs=['truehd', 'dts', 'eac3', 'ac3', 'flac'],
        subtitle_codecs=['hdmv_pgs_subtitle', 'subrip'],
    )


@pytest.fixture(scope="session")
def check_ffmpeg():
    """Check if ffmpeg is available before running tests"""
    try:
        subprocess.run(['ffmpeg', '-version'], capture_output=True, check=True)
        subprocess.run(['ffprobe', '-version'], capture_output=True, check=True)
    except (subprocess.CalledProcessError, FileNotFoundError):
        pytest.skip("ffmpeg and/or ffprobe not available")


@pytest.fixture(scope="session")
def video_files_dir(check_ffmpeg, tmp_path_factory):
    """Generate small synthetic media files once per session"""
    video_dir = tmp_path_factory.mktemp('video_files')
    duration = 1
    video_size = '320x180'

    test_files = {
        # H.264 + English AAC stereo (default) + untagged AAC stereo
        'multilingual.mkv': [
            '-f', 'lavfi', '-i', f'testsrc2=size={video_size}:duration={duration}:rate=24',
            '-f', 'lavfi', '-i', f'sine=frequency=440:duration={duration}',
            '-f', 'lavfi', '-i', f'sine=frequency=550:duration={duration}',
            '-f', 'lavfi', '-i', f'sine=frequency=660:duration={duration}',
            '-map', '0:v', '-map', '1:a', '-map', '2:a', '-map', '3:a',
            '-metadata:s:a:0', 'language=eng',
            '-metadata:s:a:1', 'language=ger',
            '-c:v', 'libx264', '-preset', 'veryfast', '-crf', '28',
            '-c:a', 'aac', '-ac', '2', '-b:a', '96k',
        ],
        # Audio only; planning must fail
        'audio_only.mkv': [
            '-f', 'lavfi', '-i', f'sine=frequency=440:duration={duration}',
            '-c:a', 'aac', '-b:a', '96k',
        ],
    }

    for name, args in test_files.items():
        cmd = ['ffmpeg', '-y', '-hide_banner', '-loglevel', 'error'] + args + [str(video_dir / name)]
        result = subprocess.run(cmd, capture_output=True, text=True)
        if result.returncode != 0:
            pytest.skip(f"Could not generate {name}: {result.stderr}")

    return video_dir


@pytest.fixture
def run_converter():
    """Fixture to run the command line tool in a subprocess"""
    def _run_converter(args: list):
        script_path = Path(__file__).parent.parent / 'main.py'
        cmd = [sys.executable, str(script_path)] + args
        return subprocess.run(cmd, capture_output=True, text=True)

    return _run_converter
