"""
Default configuration values for videodigest.

Note: Every value here can be overridden via config/loader.py, which supports
environment variables (VIDEODIGEST_*), project config, and user config.
"""

# Frame sampling. MAX_FRAMES stays under the vision model's image ceiling.
MAX_FRAMES = 12
MIN_FRAMES = 3
FRAME_INTERVAL = 5.0

# Byte-size duration heuristic (seconds of video per MiB, with a floor)
SECONDS_PER_MEGABYTE = 10.0
MIN_ESTIMATED_DURATION = 10.0

# Images per vision request (OpenAI limit)
BATCH_SIZE = 10

# Used when ffprobe cannot tell us the duration
FALLBACK_DURATION = 120.0

# Audio transcode format for transcription (mono 16kHz s16le)
SAMPLE_RATE = 16000
CHANNELS = 1
BYTES_PER_SAMPLE = 2

# Fixed heuristic confidence reported on every result
CONFIDENCE = 0.9
AUDIO_CONFIDENCE = 0.95

# Timeouts (seconds)
FRAME_TIMEOUT = 60.0
AUDIO_TIMEOUT = 300.0
PROBE_TIMEOUT = 30.0

# Models
DEFAULT_VISION_MODEL = "gpt-4o"
DEFAULT_SUMMARY_MODEL = "gpt-4o"
DEFAULT_TRANSCRIPTION_MODEL = "whisper-1"
DEFAULT_LANGUAGE = "en"

# Response token limits
VISION_MAX_TOKENS = 800
SUMMARY_MAX_TOKENS = 400
