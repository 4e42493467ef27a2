"""
Pydantic models for container streams, conversion operations and settings
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Annotated, Any, Dict, FrozenSet, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import UnknownStreamTypeError

logger = logging.getLogger(__name__)


class Disposition(Enum):
    """Stream usage hints, named as ffprobe reports them"""
    DEFAULT = "default"
    DUB = "dub"
    ORIGINAL = "original"
    COMMENT = "comment"
    LYRICS = "lyrics"
    KARAOKE = "karaoke"
    FORCED = "forced"
    HEARING_IMPAIRED = "hearing_impaired"
    VISUAL_IMPAIRED = "visual_impaired"
    CLEAN_EFFECTS = "clean_effects"
    ATTACHED_PIC = "attached_pic"
    TIMED_THUMBNAILS = "timed_thumbnails"
    NON_DIEGETIC = "non_diegetic"
    CAPTIONS = "captions"
    DESCRIPTIONS = "descriptions"
    METADATA = "metadata"
    DEPENDENT = "dependent"
    STILL_IMAGE = "still_image"
    MULTILAYER = "multilayer"


class FieldOrder(Enum):
    """Video field order (progressive or one of the interlaced layouts)"""
    PROGRESSIVE = "progressive"
    TT = "tt"  # top coded first, top displayed first
    BB = "bb"  # bottom coded first, bottom displayed first
    TB = "tb"  # top coded first, bottom displayed first
    BT = "bt"  # bottom coded first, top displayed first


def decode_dispositions(raw: Optional[Dict[str, Any]]) -> FrozenSet[Disposition]:
    """Turn ffprobe's {name: 0|1} disposition map into a set of flags"""
    flags = set()
    for key, value in (raw or {}).items():
        if value != 1:
            continue
        try:
            flags.add(Disposition(key))
        except ValueError:
            logger.debug("Ignoring unknown disposition %r", key)
    return frozenset(flags)


def _to_int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _to_float(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _string_tags(raw: Optional[Dict[str, Any]]) -> Dict[str, str]:
    return {str(key): str(value) for key, value in (raw or {}).items()}


class BaseStream(BaseModel):
    """Fields shared by every stream kind"""
    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0)
    dispositions: FrozenSet[Disposition] = Field(default_factory=frozenset)
    tags: Dict[str, str] = Field(default_factory=dict)

    @property
    def language(self) -> Optional[str]:
        """ISO 639-2 language tag, if the stream has one"""
        return self.tags.get('language')

    @property
    def title(self) -> Optional[str]:
        return self.tags.get('title')

    @property
    def bits_per_second(self) -> Optional[int]:
        """Bitrate from the BPS tag (written by mkvmerge), if present and numeric"""
        bps = self.tags.get('BPS')
        if bps is None:
            return None
        try:
            return int(bps)
        except ValueError:
            return None

    @classmethod
    def _common_fields(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        return {
            'index': _to_int(data.get('index')),
            'dispositions': decode_dispositions(data.get('disposition')),
            'tags': _string_tags(data.get('tags')),
        }


class VideoStream(BaseStream):
    """Video stream information"""
    codec_type: Literal['video'] = 'video'
    codec_name: str
    width: int = Field(default=0, ge=0)
    height: int = Field(default=0, ge=0)
    profile: Optional[str] = None
    pixel_format: Optional[str] = None
    field_order: Optional[FieldOrder] = None

    @property
    def pixel_area(self) -> int:
        return self.width * self.height

    @classmethod
    def from_ffprobe(cls, data: Dict[str, Any]) -> 'VideoStream':
        field_order = data.get('field_order')
        try:
            field_order = FieldOrder(field_order) if field_order else None
        except ValueError:
            # ffprobe reports "unknown" when the decoder could not tell
            field_order = None
        return cls(
            codec_name=data.get('codec_name', ''),
            width=_to_int(data.get('width')),
            height=_to_int(data.get('height')),
            profile=data.get('profile'),
            pixel_format=data.get('pix_fmt'),
            field_order=field_order,
            **cls._common_fields(data),
        )


class AudioStream(BaseStream):
    """Audio stream information"""
    codec_type: Literal['audio'] = 'audio'
    codec_name: str
    sample_rate: int = Field(default=0, ge=0)
    bits_per_sample: int = Field(default=0, ge=0)
    channel_count: int = Field(default=0, ge=0)
    profile: Optional[str] = None
    sample_format: Optional[str] = None

    @classmethod
    def from_ffprobe(cls, data: Dict[str, Any]) -> 'AudioStream':
        bits_per_sample = _to_int(data.get('bits_per_sample'))
        if bits_per_sample == 0:
            bits_per_sample = _to_int(data.get('bits_per_raw_sample'))
        return cls(
            codec_name=data.get('codec_name', ''),
            sample_rate=_to_int(data.get('sample_rate')),
            bits_per_sample=bits_per_sample,
            channel_count=_to_int(data.get('channels')),
            profile=data.get('profile'),
            sample_format=data.get('sample_fmt'),
            **cls._common_fields(data),
        )


class SubtitleStream(BaseStream):
    """Subtitle stream information"""
    codec_type: Literal['subtitle'] = 'subtitle'
    codec_name: str

    @classmethod
    def from_ffprobe(cls, data: Dict[str, Any]) -> 'SubtitleStream':
        return cls(codec_name=data.get('codec_name', ''), **cls._common_fields(data))


class AttachmentStream(BaseStream):
    """Attached file (fonts, cover art); never operated on"""
    codec_type: Literal['attachment'] = 'attachment'

    @classmethod
    def from_ffprobe(cls, data: Dict[str, Any]) -> 'AttachmentStream':
        return cls(**cls._common_fields(data))


CodedStream = Union[VideoStream, AudioStream, SubtitleStream]
Stream = Annotated[
    Union[VideoStream, AudioStream, SubtitleStream, AttachmentStream],
    Field(discriminator='codec_type'),
]

STREAM_TYPES = {
    'video': VideoStream,
    'audio': AudioStream,
    'subtitle': SubtitleStream,
    'attachment': AttachmentStream,
}


def stream_from_ffprobe(data: Dict[str, Any]):
    """Decode one entry of ffprobe's "streams" array into its stream variant"""
    codec_type = data.get('codec_type', '')
    stream_cls = STREAM_TYPES.get(codec_type)
    if stream_cls is None:
        raise UnknownStreamTypeError(codec_type)
    return stream_cls.from_ffprobe(data)


class Container(BaseModel):
    """A media file and the streams it holds"""
    model_config = ConfigDict(frozen=True)

    filename: str
    duration: float = Field(default=0.0, ge=0)
    size: int = Field(default=0, ge=0)
    tags: Dict[str, str] = Field(default_factory=dict)
    streams: List[Stream] = Field(default_factory=list)

    @property
    def video_streams(self) -> List[VideoStream]:
        return [s for s in self.streams if isinstance(s, VideoStream)]

    @property
    def audio_streams(self) -> List[AudioStream]:
        return [s for s in self.streams if isinstance(s, AudioStream)]

    @property
    def subtitle_streams(self) -> List[SubtitleStream]:
        return [s for s in self.streams if isinstance(s, SubtitleStream)]

    @property
    def attachment_streams(self) -> List[AttachmentStream]:
        return [s for s in self.streams if isinstance(s, AttachmentStream)]

    @classmethod
    def from_ffprobe(cls, report: Dict[str, Any]) -> 'Container':
        """Build a container from `ffprobe -show_format -show_streams -print_format json` output"""
        fmt = report.get('format', {})
        return cls(
            filename=fmt.get('filename', ''),
            duration=_to_float(fmt.get('duration')),
            size=_to_int(fmt.get('size')),
            tags=_string_tags(fmt.get('tags')),
            streams=[stream_from_ffprobe(s) for s in report.get('streams', [])],
        )


class StreamType(Enum):
    """Stream kinds that can be operated on, valued by their ffmpeg specifier letter"""
    VIDEO = "v"
    AUDIO = "a"
    SUBTITLE = "s"

    @property
    def label(self) -> str:
        return self.name.lower()


class Copy(BaseModel):
    """Keep the stream's encoded data unchanged"""
    model_config = ConfigDict(frozen=True)

    kind: Literal['copy'] = 'copy'


class Convert(BaseModel):
    """Re-encode the stream to another codec"""
    model_config = ConfigDict(frozen=True)

    kind: Literal['convert'] = 'convert'
    codec: str
    arguments: Tuple[str, ...] = ()


class Operation(BaseModel):
    """What to do with one input stream"""
    model_config = ConfigDict(frozen=True)

    stream_index: int = Field(ge=0)
    stream_type: StreamType
    kind: Annotated[Union[Copy, Convert], Field(discriminator='kind')]

    @property
    def is_copy(self) -> bool:
        return isinstance(self.kind, Copy)


def prefer_codec(codecs: List[str], codec: str) -> List[str]:
    """Move codec to the front of a preference list, adding it if missing"""
    return [codec] + [c for c in codecs if c != codec]


class PlanOptions(BaseModel):
    """Selection and codec preferences for planning a conversion"""
    model_config = ConfigDict(frozen=True)

    languages: List[str] = Field(default_factory=lambda: ['eng'])
    preserve_no_language: bool = False
    include_other_audio: bool = False

    video_codecs: List[str] = Field(default_factory=lambda: ['hevc', 'h264'])
    audio_codecs: List[str] = Field(
        default_factory=lambda: ['truehd', 'dts', 'eac3', 'ac3', 'flac', 'aac'])
    subtitle_codecs: List[str] = Field(default_factory=lambda: ['hdmv_pgs_subtitle', 'subrip'])

    video_options: List[str] = Field(default_factory=lambda: ['-profile:v', 'veryslow'])
    audio_options: List[str] = Field(default_factory=list)

    # Optional allow-list; subtitles with other codecs are dropped when set
    subtitle_codec_filter: Optional[List[str]] = None

    @field_validator('languages')
    @classmethod
    def dedupe_languages(cls, v):
        languages = []
        for lang in v:
            if lang not in languages:
                languages.append(lang)
        return languages

    @property
    def video_transcode_codec(self) -> Optional[str]:
        return self.video_codecs[0] if self.video_codecs else None

    @property
    def audio_transcode_codec(self) -> Optional[str]:
        return self.audio_codecs[0] if self.audio_codecs else None


class ProcessingSettings(BaseModel):
    """How the external tools are invoked for a run"""
    ffmpeg: Path = Path('ffmpeg')
    ffprobe: Path = Path('ffprobe')
    dry_run: bool = False
    skip_noops: bool = False
    suppress_stderr: bool = False
    jobs: Optional[int] = None

    @field_validator('jobs')
    @classmethod
    def validate_jobs(cls, v):
        if v is not None and v <= 0:
            raise ValueError('Jobs must be positive')
        return v


class ProcessingResult(BaseModel):
    """Result of processing one file"""
    source_path: Path
    target_path: Optional[Path] = None
    status: str
    operations: List[Operation] = Field(default_factory=list)
    error_message: Optional[str] = None


class BatchProcessingStats(BaseModel):
    """Statistics for a batch run"""
    total_files: int = 0
    processed_files: int = 0
    planned_files: int = 0
    skipped_files: int = 0
    error_files: int = 0

    def add_result(self, result: ProcessingResult):
        """Add a processing result to the statistics"""
        if result.status == 'processed':
            self.processed_files += 1
        elif result.status == 'planned':
            self.planned_files += 1
        elif result.status == 'skipped':
            self.skipped_files += 1
        else:
            self.error_files += 1
