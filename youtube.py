"""
Thin wrapper around yt-dlp.

yt-dlp does the page parsing, signature deciphering and format discovery.
This module only checks URLs, picks formats and turns the resolved media
URL into a chunk iterator for the HTTP layer.
"""

import logging
import re
from urllib.parse import parse_qs, urlparse

import requests
import yt_dlp
from yt_dlp.utils import YoutubeDLError

import config

logger = logging.getLogger(__name__)

VIDEO_ID_RE = re.compile(r"^[A-Za-z0-9_-]{11}$")

QUERY_HOSTS = {
    "youtube.com",
    "www.youtube.com",
    "m.youtube.com",
    "music.youtube.com",
    "gaming.youtube.com",
}
PATH_HOSTS = {"youtube.com", "www.youtube.com"}
PATH_PREFIXES = ("embed", "v", "shorts", "live")


class ExtractionError(Exception):
    """yt-dlp could not resolve the video or the requested format."""


class StreamError(Exception):
    """The resolved media URL could not be opened."""


def get_video_id(url):
    """Return the 11 character video id of a YouTube URL, or None."""
    if not isinstance(url, str) or not url.strip():
        return None

    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return None

    if parsed.scheme not in ("http", "https"):
        return None

    host = (parsed.hostname or "").lower()
    video_id = parse_qs(parsed.query).get("v", [None])[0]

    if video_id:
        if host not in QUERY_HOSTS:
            return None
    else:
        parts = parsed.path.split("/")
        if host == "youtu.be" and len(parts) > 1:
            video_id = parts[1]
        elif host in PATH_HOSTS and len(parts) > 2 and parts[1] in PATH_PREFIXES:
            video_id = parts[2]

    if not video_id:
        return None

    video_id = video_id[:11]
    return video_id if VIDEO_ID_RE.match(video_id) else None


def validate_url(url):
    return get_video_id(url) is not None


def _ydl_opts(format_spec=None):
    opts = {
        "quiet": True,
        "no_warnings": True,
        "noplaylist": True,
        "skip_download": True,
    }
    if format_spec:
        opts["format"] = format_spec
    if config.YTDL_PROXY:
        opts["proxy"] = config.YTDL_PROXY
    if config.YTDL_COOKIEFILE:
        opts["cookiefile"] = config.YTDL_COOKIEFILE
    return opts


def _error_message(exc):
    # yt-dlp prefixes its messages with "ERROR: "
    message = str(exc).strip()
    if message.startswith("ERROR: "):
        message = message[len("ERROR: "):]
    return message or exc.__class__.__name__


def fetch_info(url, format_spec=None):
    """
    Run yt-dlp metadata extraction for a single video.

    With ``format_spec`` set, yt-dlp also resolves the format selector and
    the chosen format's fields (url, ext, format_id, http_headers) are
    merged into the returned dict.
    """
    try:
        with yt_dlp.YoutubeDL(_ydl_opts(format_spec)) as ydl:
            info = ydl.extract_info(url, download=False)
    except YoutubeDLError as e:
        raise ExtractionError(_error_message(e)) from e

    if not info:
        raise ExtractionError("No video information returned")
    return info


def video_selector(itag=None):
    if itag is not None:
        return str(itag)
    return "best[vcodec!=none][acodec!=none]"


def audio_selector(quality):
    return f"bestaudio[vcodec=none][abr<={int(quality)}]/bestaudio[vcodec=none]/bestaudio"


def _has_codec(value):
    return value not in (None, "none")


def _format_size(fmt):
    size = fmt.get("filesize") or fmt.get("filesize_approx")
    if not size:
        return "Unknown size"
    return f"{size / (1024 * 1024):.2f} MB"


def _quality_label(fmt):
    if fmt.get("format_note"):
        return fmt["format_note"]
    if fmt.get("height"):
        return f"{fmt['height']}p"
    return "Unknown"


def _itag(format_id):
    if isinstance(format_id, str) and format_id.isdigit():
        return int(format_id)
    return format_id


def list_formats(info, limit):
    """Muxed (audio and video) formats, best first, at most ``limit`` of them."""
    muxed = [
        f for f in info.get("formats") or []
        if _has_codec(f.get("vcodec")) and _has_codec(f.get("acodec"))
    ]
    # yt-dlp orders formats worst to best
    muxed.reverse()

    return [
        {
            "quality": _quality_label(f),
            "itag": _itag(f.get("format_id")),
            "container": f.get("ext"),
            "codecs": f"{f.get('vcodec')}, {f.get('acodec')}",
            "size": _format_size(f),
        }
        for f in muxed[:limit]
    ]


def _thumbnail(info):
    thumbnails = [t for t in info.get("thumbnails") or [] if t.get("url")]
    if thumbnails:
        return thumbnails[-1]["url"]
    return info.get("thumbnail") or ""


def video_details(info, formats, description_length):
    duration = info.get("duration")
    view_count = info.get("view_count")

    return {
        "success": True,
        "title": info.get("title"),
        "duration": str(int(duration)) if duration is not None else "0",
        "thumbnail": _thumbnail(info),
        "author": info.get("uploader") or info.get("channel") or "",
        "videoId": info.get("id"),
        "description": (info.get("description") or "")[:description_length],
        "viewCount": str(view_count) if view_count is not None else "0",
        "formats": formats,
    }


def safe_filename(title, ext):
    stem = re.sub(r"[^\w\s]", "", title or "", flags=re.ASCII)
    stem = re.sub(r"\s+", "_", stem, flags=re.ASCII)
    return f"{stem or 'video'}.{ext}"


def _iter_chunks(upstream, chunk_size):
    try:
        for chunk in upstream.iter_content(chunk_size=chunk_size):
            if chunk:
                yield chunk
    except requests.RequestException as e:
        logger.error(f"Stream interrupted: {e}")
        raise
    finally:
        upstream.close()


def open_stream(info, chunk_size, timeout):
    """
    Open the media URL yt-dlp resolved for ``info``.

    Returns ``(chunks, headers)``. Failures to connect raise StreamError
    before anything is sent to the client; the upstream response is closed
    once ``chunks`` is exhausted or closed.
    """
    url = info.get("url")
    if not url:
        raise StreamError("Selected format has no direct media URL")

    proxies = None
    if config.YTDL_PROXY:
        proxies = {"http": config.YTDL_PROXY, "https": config.YTDL_PROXY}

    try:
        upstream = requests.get(
            url,
            headers=info.get("http_headers") or {},
            stream=True,
            timeout=timeout,
            proxies=proxies,
        )
    except requests.RequestException as e:
        raise StreamError(str(e)) from e

    if not upstream.ok:
        upstream.close()
        raise StreamError(f"Upstream responded with HTTP {upstream.status_code}")

    headers = {}
    if upstream.headers.get("Content-Length"):
        headers["Content-Length"] = upstream.headers["Content-Length"]

    logger.debug(f"Streaming format {info.get('format_id')} ({info.get('ext')})")
    return _iter_chunks(upstream, chunk_size), headers
