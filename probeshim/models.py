"""Data models for the probeshim package."""
from dataclasses import dataclass, field, replace
from enum import Enum

# Field metadata flag: drop the key from the report when the value is 0 or "".
OMIT_EMPTY = {"omitempty": True}


class Category(Enum):
    """Template category a filename is classified into."""
    TV_SHOW = "tv_show"
    MOVIE = "movie"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ParsedHint:
    """Attributes guessed from a release filename.

    Missing values are ``0`` or ``""``.  ``episode == 0`` means no
    episode was detected.
    """
    title: str = ""
    season: int = 0
    episode: int = 0
    year: int = 0
    quality: str = ""
    codec: str = ""
    group: str = ""
    container: str = ""
    audio_codec: str = ""
    audio_channels: str = ""
    source: str = ""

    @property
    def has_episode(self) -> bool:
        return self.episode != 0


@dataclass
class Disposition:
    """Stream disposition flags as ffprobe prints them."""
    default: int = 0
    dub: int = 0
    original: int = 0
    comment: int = 0
    lyrics: int = 0
    karaoke: int = 0
    forced: int = 0
    hearing_impaired: int = 0
    visual_impaired: int = 0
    clean_effects: int = 0
    attached_pic: int = 0
    timed_thumbnails: int = 0


@dataclass
class StreamTags:
    language: str | None = None
    handler_name: str | None = None


@dataclass
class FormatTags:
    title: str | None = None
    encoder: str | None = None
    creation_time: str | None = None


@dataclass
class Stream:
    """One entry of the ``streams`` array.

    Field order follows ffprobe's JSON writer.  ``None`` fields are left
    out of the report.
    """
    index: int
    codec_name: str = ""
    codec_long_name: str | None = None
    codec_type: str = "video"
    width: int = field(default=0, metadata=OMIT_EMPTY)
    height: int = field(default=0, metadata=OMIT_EMPTY)
    pix_fmt: str | None = None
    color_range: str | None = None
    color_space: str | None = None
    sample_fmt: str | None = None
    sample_rate: str = field(default="", metadata=OMIT_EMPTY)
    channels: int = field(default=0, metadata=OMIT_EMPTY)
    channel_layout: str | None = None
    r_frame_rate: str | None = None
    avg_frame_rate: str | None = None
    time_base: str | None = None
    start_time: str | None = None
    duration: str = ""
    bit_rate: str = ""
    disposition: Disposition | None = None
    tags: StreamTags | None = None

    @property
    def is_video(self) -> bool:
        return self.codec_type == "video"

    @property
    def is_audio(self) -> bool:
        return self.codec_type == "audio"

    def clone(self) -> "Stream":
        return replace(
            self,
            disposition=replace(self.disposition) if self.disposition else None,
            tags=replace(self.tags) if self.tags else None,
        )


@dataclass
class Format:
    """The ``format`` section of a report."""
    filename: str = ""
    nb_streams: int = 0
    nb_programs: int | None = None
    format_name: str = ""
    format_long_name: str = ""
    start_time: str | None = None
    duration: str = ""
    size: str = ""
    bit_rate: str = ""
    probe_score: int | None = None
    tags: FormatTags | None = None

    def clone(self) -> "Format":
        return replace(self, tags=replace(self.tags) if self.tags else None)


@dataclass
class MediaReport:
    """A synthesized ffprobe report: ordered streams plus one format."""
    streams: list[Stream] = field(default_factory=list)
    format: Format = field(default_factory=Format)

    def clone(self) -> "MediaReport":
        """Return a structural copy that shares no mutable state."""
        return MediaReport(
            streams=[stream.clone() for stream in self.streams],
            format=self.format.clone(),
        )

    def video_streams(self) -> list[Stream]:
        return [s for s in self.streams if s.is_video]

    def audio_streams(self) -> list[Stream]:
        return [s for s in self.streams if s.is_audio]
