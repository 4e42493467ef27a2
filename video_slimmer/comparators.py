"""
Best-stream-first orderings for video, audio and subtitle streams

Every comparison step returns -1 (lhs first), 1 (rhs first) or None (no
preference). Steps run in order until one decides; the stream index is the
last step and always decides, so the orderings are total.
"""

from functools import cmp_to_key
from typing import Callable, Iterable, List, Optional, Sequence

from .models import AudioStream, VideoStream

Verdict = Optional[int]


def _prefer_higher(lhs_value, rhs_value) -> Verdict:
    if lhs_value == rhs_value:
        return None
    return -1 if lhs_value > rhs_value else 1


def codec_rank(preferred_codecs: Sequence[str], codec_name: str) -> float:
    """Position of codec_name in the preference list; unlisted codecs rank last"""
    try:
        return preferred_codecs.index(codec_name)
    except ValueError:
        return float('inf')


def compare_codecs(preferred_codecs: Sequence[str], lhs, rhs) -> Verdict:
    lhs_rank = codec_rank(preferred_codecs, lhs.codec_name)
    rhs_rank = codec_rank(preferred_codecs, rhs.codec_name)
    if lhs_rank == rhs_rank:
        return None
    return -1 if lhs_rank < rhs_rank else 1


def compare_bits_per_second(lhs, rhs) -> Verdict:
    """Higher bitrate first; no preference unless both streams carry a BPS tag"""
    lhs_bps, rhs_bps = lhs.bits_per_second, rhs.bits_per_second
    if lhs_bps is None or rhs_bps is None:
        return None
    return _prefer_higher(lhs_bps, rhs_bps)


def compare_index(lhs, rhs) -> int:
    if lhs.index == rhs.index:
        return 0
    return -1 if lhs.index < rhs.index else 1


class StreamComparator:
    """Base class: subclasses list their comparison steps in `steps()`"""

    def __init__(self, preferred_codecs: Iterable[str] = ()):
        self.preferred_codecs = list(preferred_codecs)

    def steps(self) -> List[Callable]:
        raise NotImplementedError

    def compare_codecs(self, lhs, rhs) -> Verdict:
        return compare_codecs(self.preferred_codecs, lhs, rhs)

    def compare(self, lhs, rhs) -> int:
        for step in self.steps():
            verdict = step(lhs, rhs)
            if verdict is not None:
                return verdict
        return compare_index(lhs, rhs)

    def sort(self, streams: Iterable) -> list:
        """Return the streams ordered best first"""
        return sorted(streams, key=cmp_to_key(self.compare))

    def best(self, streams: Iterable):
        ranked = self.sort(streams)
        return ranked[0] if ranked else None


class VideoComparator(StreamComparator):
    """Resolution, then codec preference, then bitrate"""

    def steps(self):
        return [self.compare_resolutions, self.compare_codecs, compare_bits_per_second]

    @staticmethod
    def compare_resolutions(lhs: VideoStream, rhs: VideoStream) -> Verdict:
        return _prefer_higher(lhs.pixel_area, rhs.pixel_area)


class AudioComparator(StreamComparator):
    """Channel count, codec preference, bit depth, sample rate, then bitrate"""

    def steps(self):
        return [
            self.compare_channel_counts,
            self.compare_codecs,
            self.compare_bit_depths,
            self.compare_sample_rates,
            compare_bits_per_second,
        ]

    @staticmethod
    def compare_channel_counts(lhs: AudioStream, rhs: AudioStream) -> Verdict:
        return _prefer_higher(lhs.channel_count, rhs.channel_count)

    @staticmethod
    def compare_bit_depths(lhs: AudioStream, rhs: AudioStream) -> Verdict:
        return _prefer_higher(lhs.bits_per_sample, rhs.bits_per_sample)

    @staticmethod
    def compare_sample_rates(lhs: AudioStream, rhs: AudioStream) -> Verdict:
        return _prefer_higher(lhs.sample_rate, rhs.sample_rate)


class SubtitleComparator(StreamComparator):
    """Codec preference only"""

    def steps(self):
        return [self.compare_codecs]
