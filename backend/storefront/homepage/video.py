# storefront/homepage/video.py
import re
from typing import Optional

YOUTUBE_ID_RE = re.compile(r"^.*(youtu\.be/|v/|u/\w/|embed/|watch\?v=|&v=)([^#&?]*).*")
VIMEO_ID_RE = re.compile(r"vimeo\.com/(\d+)")
VIDEO_FILE_RE = re.compile(r"\.(mp4|webm|ogg|mov|avi|wmv|m4v|flv)$", re.IGNORECASE)


def extract_youtube_id(url: Optional[str]) -> Optional[str]:
    match = YOUTUBE_ID_RE.match(url or "")
    if match and len(match.group(2)) == 11:
        return match.group(2)
    return None


def extract_vimeo_id(url: Optional[str]) -> Optional[str]:
    match = VIMEO_ID_RE.search(url or "")
    return match.group(1) if match else None


def detect_video_type(url: Optional[str]) -> Optional[str]:
    if not url:
        return None
    if "youtube.com/watch" in url or "youtu.be/" in url or "youtube.com/embed" in url:
        return "youtube"
    if "vimeo.com/" in url:
        return "vimeo"
    if VIDEO_FILE_RE.search(url):
        return "direct"
    if "/video/upload" in url or "resource_type=video" in url:
        return "file"
    return None


def is_video_file(url: Optional[str]) -> bool:
    return bool(url) and ("/video/upload" in url or bool(VIDEO_FILE_RE.search(url)))


def _flag(value) -> int:
    return 1 if value else 0


def youtube_embed_url(video_id: str, *, autoplay=True, muted=True, loop=True, controls=False) -> str:
    return (
        f"https://www.youtube.com/embed/{video_id}"
        f"?autoplay={_flag(autoplay)}&mute={_flag(muted)}&loop={_flag(loop)}"
        f"&playlist={video_id}&controls={_flag(controls)}&rel=0&modestbranding=1&playsinline=1"
    )


def vimeo_embed_url(video_id: str, *, autoplay=True, muted=True, loop=True, background=True) -> str:
    url = (
        f"https://player.vimeo.com/video/{video_id}"
        f"?autoplay={_flag(autoplay)}&muted={_flag(muted)}&loop={_flag(loop)}"
    )
    return url + "&background=1" if background else url
