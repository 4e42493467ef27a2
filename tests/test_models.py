"""
Test decoding ffprobe reports into stream and container models
"""

import pytest
from pydantic import ValidationError

from conftest import (
    attachment_stream, audio_stream, make_container, probe_report, subtitle_stream, video_stream,
)
from video_slimmer import (
    AttachmentStream, AudioStream, Container, Disposition, FieldOrder, PlanOptions,
    SubtitleStream, UnknownStreamTypeError, VideoStream, prefer_codec,
)


class TestStreamDecoding:
    """Test ffprobe stream records decode into the right variant"""

    def test_each_codec_type_decodes_to_its_variant(self):
        container = make_container(
            video_stream(0), audio_stream(1), subtitle_stream(2), attachment_stream(3))

        assert [type(s) for s in container.streams] == [
            VideoStream, AudioStream, SubtitleStream, AttachmentStream]
        assert [s.index for s in container.streams] == [0, 1, 2, 3]

    def test_typed_views(self):
        container = make_container(
            video_stream(0), audio_stream(1), audio_stream(2), subtitle_stream(3), attachment_stream(4))

        assert [s.index for s in container.video_streams] == [0]
        assert [s.index for s in container.audio_streams] == [1, 2]
        assert [s.index for s in container.subtitle_streams] == [3]
        assert [s.index for s in container.attachment_streams] == [4]

    def test_unknown_stream_type_fails(self):
        record = {'index': 0, 'codec_type': 'data', 'disposition': {}}

        with pytest.raises(UnknownStreamTypeError) as exc_info:
            Container.from_ffprobe(probe_report(record))
        assert exc_info.value.codec_type == 'data'

    def test_video_fields(self):
        stream = make_container(video_stream(0, codec='hevc', width=3840, height=2160)).streams[0]

        assert stream.codec_name == 'hevc'
        assert stream.pixel_area == 3840 * 2160
        assert stream.profile == 'High'
        assert stream.pixel_format == 'yuv420p'
        assert stream.field_order == FieldOrder.PROGRESSIVE

    def test_unknown_field_order_is_dropped(self):
        record = video_stream(0)
        record['field_order'] = 'unknown'

        assert make_container(record).streams[0].field_order is None

    def test_audio_fields(self):
        stream = make_container(
            audio_stream(1, codec='truehd', channels=8, sample_rate=96000, bits_per_sample=24)).streams[0]

        assert stream.codec_name == 'truehd'
        assert stream.channel_count == 8
        assert stream.sample_rate == 96000
        assert stream.bits_per_sample == 24
        assert stream.sample_format == 'fltp'

    def test_bits_per_raw_sample_fallback(self):
        stream = make_container(audio_stream(1, bits_per_sample=0, bits_per_raw_sample=24)).streams[0]

        assert stream.bits_per_sample == 24

    def test_bits_per_sample_wins_over_raw(self):
        stream = make_container(audio_stream(1, bits_per_sample=16, bits_per_raw_sample=24)).streams[0]

        assert stream.bits_per_sample == 16


class TestDispositionsAndTags:
    """Test disposition and tag accessors"""

    def test_only_set_dispositions_are_kept(self):
        record = audio_stream(1, dispositions=())
        record['disposition'] = {'default': 1, 'dub': 0, 'comment': 1, 'forced': 0}

        stream = make_container(record).streams[0]
        assert stream.dispositions == frozenset({Disposition.DEFAULT, Disposition.COMMENT})

    def test_all_zero_dispositions_give_empty_set(self):
        record = audio_stream(1, dispositions=())
        record['disposition'] = {'default': 0, 'dub': 0}

        assert make_container(record).streams[0].dispositions == frozenset()

    def test_unknown_disposition_is_ignored(self):
        record = audio_stream(1, dispositions=('default', 'some_future_flag'))

        assert make_container(record).streams[0].dispositions == frozenset({Disposition.DEFAULT})

    def test_language_and_title(self):
        stream = make_container(audio_stream(1, language='eng', title='Commentary')).streams[0]

        assert stream.language == 'eng'
        assert stream.title == 'Commentary'

    def test_missing_language(self):
        assert make_container(audio_stream(1)).streams[0].language is None

    @pytest.mark.parametrize("tags,expected", [
        ({'BPS': '640000'}, 640000),
        ({}, None),
        ({'BPS': 'n/a'}, None),
    ])
    def test_bits_per_second(self, tags, expected):
        stream = make_container(audio_stream(1, **tags)).streams[0]

        assert stream.bits_per_second == expected


class TestContainer:
    """Test format-level fields"""

    def test_format_fields_are_parsed(self):
        container = make_container(video_stream(0), filename='/movies/a.mkv',
                                   duration='7200.5', size='123456789')

        assert container.filename == '/movies/a.mkv'
        assert container.duration == 7200.5
        assert container.size == 123456789
        assert container.tags == {'title': 'Movie'}

    def test_stream_order_is_preserved(self):
        container = make_container(subtitle_stream(2), video_stream(0), audio_stream(1))

        assert [s.index for s in container.streams] == [2, 0, 1]

    def test_container_is_immutable(self):
        container = make_container(video_stream(0))

        with pytest.raises(ValidationError):
            container.filename = 'other.mkv'


class TestPlanOptions:
    """Test plan option defaults and validation"""

    def test_defaults(self):
        options = PlanOptions()

        assert options.languages == ['eng']
        assert options.video_codecs == ['hevc', 'h264']
        assert options.audio_codecs == ['truehd', 'dts', 'eac3', 'ac3', 'flac', 'aac']
        assert options.subtitle_codecs == ['hdmv_pgs_subtitle', 'subrip']
        assert options.video_options == ['-profile:v', 'veryslow']
        assert options.audio_options == []
        assert options.subtitle_codec_filter is None
        assert options.video_transcode_codec == 'hevc'
        assert options.audio_transcode_codec == 'truehd'

    def test_duplicate_languages_are_removed(self):
        options = PlanOptions(languages=['eng', 'ger', 'eng', 'jpn', 'ger'])

        assert options.languages == ['eng', 'ger', 'jpn']

    def test_empty_codec_list_has_no_transcode_codec(self):
        assert PlanOptions(video_codecs=[]).video_transcode_codec is None

    @pytest.mark.parametrize("codecs,codec,expected", [
        (['hevc', 'h264'], 'av1', ['av1', 'hevc', 'h264']),
        (['hevc', 'h264'], 'h264', ['h264', 'hevc']),
        (['hevc', 'h264'], 'hevc', ['hevc', 'h264']),
        ([], 'aac', ['aac']),
    ])
    def test_prefer_codec(self, codecs, codec, expected):
        assert prefer_codec(codecs, codec) == expected
