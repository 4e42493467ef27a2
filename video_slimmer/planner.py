"""
Conversion planning: which streams to keep, and whether to copy or transcode them
"""

import logging
from typing import List, Optional, Sequence

from .errors import NoVideoStreamError
from .models import Container, Convert, Copy, Operation, PlanOptions, StreamType
from .selection import (
    best_video_stream, default_audio_stream, matching_subtitle_streams, other_audio_streams,
)

logger = logging.getLogger(__name__)


def resolve_operation(stream, stream_type: StreamType, preferred_codecs: Sequence[str],
                      transcode_codec: Optional[str] = None,
                      conversion_options: Sequence[str] = ()) -> Operation:
    """Copy a stream whose codec is preferred, otherwise convert it to transcode_codec.

    Without a transcode codec there is nothing to convert to, so the stream is copied.
    """
    if transcode_codec is None or stream.codec_name in preferred_codecs:
        kind = Copy()
    else:
        kind = Convert(codec=transcode_codec, arguments=tuple(conversion_options))
    logger.debug("Stream 0:%d (%s, %s): %s", stream.index, stream_type.label, stream.codec_name,
                 "copy" if isinstance(kind, Copy) else f"convert to {kind.codec}")
    return Operation(stream_index=stream.index, stream_type=stream_type, kind=kind)


def _audio_operations(container: Container, language: Optional[str],
                      options: PlanOptions) -> List[Operation]:
    streams = []
    default_stream = default_audio_stream(container, language, options.audio_codecs)
    if default_stream is not None:
        streams.append(default_stream)
    if options.include_other_audio:
        streams.extend(other_audio_streams(container, language, options.audio_codecs))
    if not streams:
        logger.debug("No audio selected for language %s", language or '(none)')
    return [resolve_operation(s, StreamType.AUDIO, options.audio_codecs,
                              options.audio_transcode_codec, options.audio_options)
            for s in streams]


def plan(container: Container, options: Optional[PlanOptions] = None) -> List[Operation]:
    """Build the ordered operation list for a container.

    The order is video, then audio grouped by requested language (default
    stream before others), then untagged audio, then subtitles. It becomes
    the track order of the output file.

    Raises:
        NoVideoStreamError: the container has no video stream.
    """
    options = options or PlanOptions()

    video_stream = best_video_stream(container, options.video_codecs)
    if video_stream is None:
        raise NoVideoStreamError(container.filename)
    if len(container.video_streams) > 1:
        logger.info("%s has %d video streams; keeping stream #%d",
                    container.filename, len(container.video_streams), video_stream.index)

    operations = [resolve_operation(video_stream, StreamType.VIDEO, options.video_codecs,
                                    options.video_transcode_codec, options.video_options)]

    for language in options.languages:
        operations.extend(_audio_operations(container, language, options))
    if options.preserve_no_language:
        operations.extend(_audio_operations(container, None, options))

    for subtitle in matching_subtitle_streams(container, options.languages,
                                              options.preserve_no_language,
                                              options.subtitle_codecs,
                                              options.subtitle_codec_filter):
        # Subtitles are never transcoded
        operations.append(resolve_operation(subtitle, StreamType.SUBTITLE, options.subtitle_codecs))

    return operations


def is_noop(operations: Sequence[Operation], container: Container) -> bool:
    """True when the plan would keep every stream and copy all of them unchanged"""
    if len(operations) != len(container.streams):
        return False
    return all(op.is_copy for op in operations)
