"""Video conversions."""

from .convert import (
    build_extract_frames_args,
    build_remux_args,
    build_to_mp4_args,
    build_video_to_h264_mp4_args,
    build_video_to_vp9_webm_args,
    extract_frames,
    remux,
    to_mp4,
    video_to_h264_mp4,
    video_to_vp9_webm,
)

__all__ = [
    "build_extract_frames_args",
    "build_remux_args",
    "build_to_mp4_args",
    "build_video_to_h264_mp4_args",
    "build_video_to_vp9_webm_args",
    "extract_frames",
    "remux",
    "to_mp4",
    "video_to_h264_mp4",
    "video_to_vp9_webm",
]
