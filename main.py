#!/usr/bin/env python3
"""
Video slimmer

Removes unneeded audio and subtitle tracks from a movie container using
FFmpeg. No transcoding happens unless necessary: kept tracks are copied to
the new container without modification whenever their codec is one of the
preferred codecs.

Usage:
  python main.py movie.mkv slim.mkv [options]
  python main.py movie.mkv slim.mkv -l eng -l ger --include-other-audio
  python main.py /movies /slimmed --dry-run

Requires: ffmpeg, ffprobe in PATH (or --ffmpeg / --ffprobe)
"""

import argparse
import shutil
import sys
from pathlib import Path

from video_slimmer.errors import SlimmerError
from video_slimmer.ffmpeg_runner import setup_signal_handlers
from video_slimmer.logging_config import configure_logging
from video_slimmer.models import PlanOptions, ProcessingSettings, prefer_codec
from video_slimmer.parallel_processor import ParallelProcessor
from video_slimmer.processor import process_file
from video_slimmer.rich_console import rich_output

EXIT_FAILURE = 1
EXIT_USAGE = 2

DEFAULTS = PlanOptions()


def default_tool_path(name: str) -> Path:
    """Resolve a tool on PATH, falling back to the bare name"""
    return Path(shutil.which(name) or name)


def parse_arguments(argv=None):
    """Parse and validate command line arguments"""
    ap = argparse.ArgumentParser(
        description='Remove unneeded audio and subtitle tracks from a movie container using FFmpeg.')
    ap.add_argument('input', type=Path, help='The video file to slim (or a directory of videos)')
    ap.add_argument('output', type=Path, help='The output path for the slimmed video file (or directory)')

    # Stream selection
    ap.add_argument('-l', '--language', dest='languages', action='append', metavar='LANG',
                    help=f'Audio and subtitle language to preserve, repeatable '
                         f'(default: {" ".join(DEFAULTS.languages)})')
    ap.add_argument('-n', '--no-language', action='store_true',
                    help='Preserve audio and subtitle tracks with no language metadata')
    ap.add_argument('--include-other-audio', action='store_true',
                    help='Include audio streams of non-default disposition (e.g., commentary)')
    ap.add_argument('-s', '--subtitle-filter', action='append', metavar='CODEC',
                    help='Only keep subtitles with this codec, repeatable (default: all codecs)')

    # Codec preferences
    ap.add_argument('--video-codec', dest='video_codecs', action='append', metavar='CODEC',
                    help=f'Preference order for video codecs (default: {" ".join(DEFAULTS.video_codecs)})')
    ap.add_argument('--audio-codec', dest='audio_codecs', action='append', metavar='CODEC',
                    help=f'Preference order for audio codecs (default: {" ".join(DEFAULTS.audio_codecs)})')
    ap.add_argument('--subtitle-codec', dest='subtitle_codecs', action='append', metavar='CODEC',
                    help=f'Preference order for subtitle codecs '
                         f'(default: {" ".join(DEFAULTS.subtitle_codecs)})')
    ap.add_argument('--video-transcode', metavar='CODEC',
                    help='Codec to transcode video to when not one of --video-codec '
                         '(default: first --video-codec)')
    ap.add_argument('--audio-transcode', metavar='CODEC',
                    help='Codec to transcode audio to when not one of --audio-codec '
                         '(default: first --audio-codec)')
    ap.add_argument('--video-option', dest='video_options', action='append', metavar='OPT',
                    help=f'Additional option to pass to FFmpeg when transcoding video, repeatable; '
                         f'write values starting with a dash as --video-option=-crf '
                         f'(default: {" ".join(DEFAULTS.video_options)})')
    ap.add_argument('--audio-option', dest='audio_options', action='append', metavar='OPT',
                    help='Additional option to pass to FFmpeg when transcoding audio, repeatable')

    # Operation modes
    ap.add_argument('-d', '--dry-run', action='store_true',
                    help='Print the operations that would be performed instead of converting')
    ap.add_argument('--skip-noops', action='store_true',
                    help='Do not process files that would not be changed (all tracks selected)')
    ap.add_argument('--suppress-stderr', action='store_true',
                    help='Discard ffmpeg and ffprobe diagnostic output')
    ap.add_argument('-j', '--jobs', type=int, default=None,
                    help='Number of files to analyze in parallel when INPUT is a directory')
    ap.add_argument('-v', '--verbose', action='store_true', help='Show debug logging')

    # Tools
    ap.add_argument('--ffmpeg', type=Path, default=None, help='Path to ffmpeg executable')
    ap.add_argument('--ffprobe', type=Path, default=None, help='Path to ffprobe executable')

    args = ap.parse_args(argv)

    if args.jobs is not None and args.jobs <= 0:
        ap.error('--jobs must be positive')

    return args


def build_plan_options(args) -> PlanOptions:
    """Turn parsed arguments into planning options"""
    video_codecs = args.video_codecs or DEFAULTS.video_codecs
    audio_codecs = args.audio_codecs or DEFAULTS.audio_codecs
    # The transcode target is always the first preference
    if args.video_transcode:
        video_codecs = prefer_codec(video_codecs, args.video_transcode)
    if args.audio_transcode:
        audio_codecs = prefer_codec(audio_codecs, args.audio_transcode)

    return PlanOptions(
        languages=args.languages or DEFAULTS.languages,
        preserve_no_language=args.no_language,
        include_other_audio=args.include_other_audio,
        video_codecs=video_codecs,
        audio_codecs=audio_codecs,
        subtitle_codecs=args.subtitle_codecs or DEFAULTS.subtitle_codecs,
        video_options=args.video_options if args.video_options is not None else DEFAULTS.video_options,
        audio_options=args.audio_options or DEFAULTS.audio_options,
        subtitle_codec_filter=args.subtitle_filter,
    )


def build_settings(args) -> ProcessingSettings:
    """Turn parsed arguments into tool settings"""
    return ProcessingSettings(
        ffmpeg=args.ffmpeg or default_tool_path('ffmpeg'),
        ffprobe=args.ffprobe or default_tool_path('ffprobe'),
        dry_run=args.dry_run,
        skip_noops=args.skip_noops,
        suppress_stderr=args.suppress_stderr,
        jobs=args.jobs,
    )


def main(argv=None) -> int:
    setup_signal_handlers()

    args = parse_arguments(argv)
    configure_logging(args.verbose)
    options = build_plan_options(args)
    settings = build_settings(args)

    src: Path = args.input
    if not src.exists():
        rich_output.print_error(f'Path does not exist: {src}')
        return EXIT_USAGE

    if src.is_dir():
        stats = ParallelProcessor(settings.jobs).process_batch(src, args.output, options, settings)
        rich_output.print_final_summary(stats)
        return EXIT_FAILURE if stats.error_files else 0

    try:
        process_file(src, args.output, options, settings)
    except SlimmerError as e:
        rich_output.print_error(e.message)
        return EXIT_FAILURE
    except ValueError as e:
        # Malformed ffprobe output or values our models reject
        rich_output.print_error(f'Could not read {src}', str(e))
        return EXIT_FAILURE
    return 0


if __name__ == '__main__':
    sys.exit(main())
