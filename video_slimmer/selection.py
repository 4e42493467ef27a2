"""
Stream selection by language, disposition and codec
"""

from typing import Iterable, List, Optional, Sequence

from .comparators import AudioComparator, SubtitleComparator, VideoComparator
from .models import AudioStream, Container, Disposition, SubtitleStream, VideoStream

# Audio carrying either of these is a primary track for its language
PRIMARY_AUDIO_DISPOSITIONS = frozenset({Disposition.DEFAULT, Disposition.DUB})


def is_primary_audio(stream: AudioStream) -> bool:
    """True for default/dub audio, and for audio with no dispositions at all.

    Some muxers never write dispositions, so an empty set counts as primary.
    """
    if not stream.dispositions:
        return True
    return bool(stream.dispositions & PRIMARY_AUDIO_DISPOSITIONS)


def streams_for_language(streams: Iterable, language: Optional[str]) -> list:
    """Streams whose language tag equals language (None matches untagged streams)"""
    return [s for s in streams if s.language == language]


def best_video_stream(container: Container, preferred_codecs: Sequence[str]) -> Optional[VideoStream]:
    """The single video stream to keep, regardless of language"""
    return VideoComparator(preferred_codecs).best(container.video_streams)


def default_audio_stream(container: Container, language: Optional[str],
                         preferred_codecs: Sequence[str]) -> Optional[AudioStream]:
    """Best primary audio stream for a language, or None if there is none"""
    candidates = [s for s in streams_for_language(container.audio_streams, language)
                  if is_primary_audio(s)]
    return AudioComparator(preferred_codecs).best(candidates)


def other_audio_streams(container: Container, language: Optional[str],
                        preferred_codecs: Sequence[str]) -> List[AudioStream]:
    """Non-primary audio for a language (commentary, descriptive audio, ...), best first"""
    candidates = [s for s in streams_for_language(container.audio_streams, language)
                  if not is_primary_audio(s)]
    return AudioComparator(preferred_codecs).sort(candidates)


def matching_subtitle_streams(container: Container, languages: Sequence[str],
                              preserve_no_language: bool, preferred_codecs: Sequence[str],
                              codec_filter: Optional[Iterable[str]] = None) -> List[SubtitleStream]:
    """Subtitles in the requested languages (and untagged ones if asked), best first"""
    allowed_codecs = set(codec_filter) if codec_filter is not None else None

    def keep(stream: SubtitleStream) -> bool:
        if stream.language is None:
            matched = preserve_no_language
        else:
            matched = stream.language in languages
        if matched and allowed_codecs is not None:
            matched = stream.codec_name in allowed_codecs
        return matched

    return SubtitleComparator(preferred_codecs).sort(
        s for s in container.subtitle_streams if keep(s))
