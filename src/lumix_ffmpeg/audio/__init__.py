"""Audio conversions."""

from .convert import (
    audio_to_aac,
    audio_to_flac,
    audio_to_ogg,
    audio_to_wav,
    build_audio_to_aac_args,
    build_audio_to_flac_args,
    build_audio_to_ogg_args,
    build_audio_to_wav_args,
    build_extract_audio_to_mp3_args,
    build_pcm_to_mp3_args,
    extract_audio_to_mp3,
    pcm_to_mp3,
)

__all__ = [
    "audio_to_aac",
    "audio_to_flac",
    "audio_to_ogg",
    "audio_to_wav",
    "build_audio_to_aac_args",
    "build_audio_to_flac_args",
    "build_audio_to_ogg_args",
    "build_audio_to_wav_args",
    "build_extract_audio_to_mp3_args",
    "build_pcm_to_mp3_args",
    "extract_audio_to_mp3",
    "pcm_to_mp3",
]
