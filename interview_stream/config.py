"""Application configuration. Loads from env vars."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings. Override via environment variables."""

    # Audio: PCM 16-bit mono, 16kHz (binary WebSocket frames, used for silence tracking only)
    SAMPLE_RATE: int = 16000
    SAMPLE_WIDTH: int = 2  # 16-bit
    CHANNELS: int = 1

    # Frame: 20ms @ 16kHz = 320 samples = 640 bytes
    FRAME_MS: int = 20
    FRAME_BYTES: int = 640  # 320 * 2

    # Silence: mean absolute amplitude below threshold for at least SILENCE_MIN_MS
    SILENCE_LEVEL_THRESHOLD: float = 0.01
    SILENCE_MIN_MS: int = 1000

    # Segmentation: boundaries of one finalized segment
    SEGMENT_MAX_SENTENCES: int = 8
    SEGMENT_MIN_DURATION: float = 15.0  # seconds; informational, gates no rule
    SEGMENT_MAX_DURATION: float = 60.0  # hard ceiling
    SEGMENT_PAUSE_THRESHOLD: float = 5.0  # min segment age for a silence-based finalize
    SEGMENT_END_MARKERS: str = ". ! ? 。 ！ ？"  # whitespace separated
    SEGMENT_MAX_WORDS: int = 120

    # Degenerate transcription (looping / hallucinated filler)
    SEGMENT_EMERGENCY_MIN_CHARS: int = 500
    SEGMENT_MAX_REPETITION_RATIO: float = 0.4
    SEGMENT_MAX_CONSECUTIVE_REPEATS: int = 3

    # Merge of overlapping transcription updates
    MERGE_REPETITION_THRESHOLD: float = 0.5
    MERGE_MAX_OVERLAP_TOKENS: int = 15
    MERGE_RUNAWAY_CHARS: int = 2000

    # Upstream filter: drop likely hallucinations before they reach the buffer
    UPDATE_FILTER_ENABLED: bool = True
    MIN_CONFIDENCE_SCORE: float = 0.6
    NOISE_WORDS: str = "thank you, bye, you, um, uh, yeah"  # comma separated
    NOISE_MAX_CHARS: int = 10

    # Logging: level (DEBUG, INFO, WARNING, ERROR); file path empty = console only.
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = ""
    LOG_MAX_BYTES: int = 10 * 1024 * 1024
    LOG_BACKUP_COUNT: int = 5

    # Finalized sessions are dropped from memory this long after they stop; 0 keeps them forever.
    SESSION_RETENTION_SECONDS: int = 3600

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def sentence_end_markers(self) -> tuple[str, ...]:
        return tuple(self.SEGMENT_END_MARKERS.split())

    @property
    def noise_words(self) -> tuple[str, ...]:
        return tuple(w.strip().lower() for w in self.NOISE_WORDS.split(",") if w.strip())


def get_settings() -> Settings:
    return Settings()
