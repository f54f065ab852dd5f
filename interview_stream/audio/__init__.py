"""Audio side channel: PCM framing and silence tracking."""
from .receiver import AudioReceiver
from .silence import SilenceTracker, audio_level, pcm_bytes_to_float32

__all__ = [
    "AudioReceiver",
    "SilenceTracker",
    "audio_level",
    "pcm_bytes_to_float32",
]
