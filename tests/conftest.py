import pytest

from app import app as flask_app


VIDEO_URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"


@pytest.fixture
def client():
    flask_app.config["TESTING"] = True
    with flask_app.test_client() as client:
        yield client


@pytest.fixture
def sample_info():
    """A trimmed yt-dlp info dict, formats ordered worst to best as yt-dlp returns them."""
    return {
        "id": "dQw4w9WgXcQ",
        "title": "Rick Astley - Never Gonna Give You Up (Official Video)",
        "duration": 212,
        "uploader": "Rick Astley",
        "channel": "Rick Astley",
        "view_count": 1500000000,
        "description": "x" * 500,
        "thumbnail": "https://i.ytimg.com/vi/dQw4w9WgXcQ/maxresdefault.jpg",
        "thumbnails": [
            {"url": "https://i.ytimg.com/vi/dQw4w9WgXcQ/default.jpg"},
            {"url": "https://i.ytimg.com/vi/dQw4w9WgXcQ/hqdefault.jpg"},
            {"url": "https://i.ytimg.com/vi/dQw4w9WgXcQ/maxresdefault.jpg"},
        ],
        "formats": [
            {"format_id": "139", "ext": "m4a", "vcodec": "none", "acodec": "mp4a.40.5", "abr": 48},
            {"format_id": "17", "ext": "3gp", "vcodec": "mp4v.20.3", "acodec": "mp4a.40.2",
             "format_note": "144p", "filesize": 1048576},
            {"format_id": "160", "ext": "mp4", "vcodec": "avc1.4d400c", "acodec": "none",
             "format_note": "144p"},
            {"format_id": "18", "ext": "mp4", "vcodec": "avc1.42001E", "acodec": "mp4a.40.2",
             "format_note": "360p", "filesize_approx": 15938355},
            {"format_id": "22", "ext": "mp4", "vcodec": "avc1.64001F", "acodec": "mp4a.40.2",
             "height": 720},
        ],
    }
