"""
System constants that should never change.

These are ffmpeg flag defaults and installer protocol values, not user
preferences. User-configurable values belong in config.yaml instead.
"""

# Logging
VERBOSE_LOGGING_THRESHOLD = 2  # -vv switches to DEBUG with logger names

# Raw PCM input (pcm_to_mp3)
PCM_INPUT_FORMAT = "s16le"
PCM_DEFAULT_SAMPLE_RATE = 48000
PCM_OUTPUT_SAMPLE_RATE = 48000
PCM_OUTPUT_CHANNELS = 2

# Audio defaults (Hz, channel count, kbps)
DEFAULT_SAMPLE_RATE = 44100
DEFAULT_CHANNELS = 2
DEFAULT_MP3_BITRATE = 192
DEFAULT_AAC_BITRATE = 128
DEFAULT_OGG_BITRATE = 128

# Video defaults
H264_PRESET = "fast"
MP4_DEFAULT_CRF = 23
MP4_DEFAULT_PRESET = "medium"

# Encoder listing
ENCODERS_LIST_MINIMUM_PARTS = 2

# Installer
DEFAULT_RELEASE_API_URL = "https://api.github.com/repos/BtbN/FFmpeg-Builds/releases/tags/latest"
DEFAULT_USER_AGENT = "ffmpeg-binaries-installer"
DEFAULT_MAX_REDIRECTS = 5
DEFAULT_DOWNLOAD_TIMEOUT = 60
DEFAULT_CHUNK_SIZE = 64 * 1024
HTTP_OK = 200
BINARY_MODE = 0o755
