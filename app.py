import logging
from datetime import datetime, timezone

from flask import Flask, Response, request, jsonify
from flask_cors import CORS

import config
import youtube

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = Flask(__name__)
CORS(app, origins=config.CORS_ORIGINS)


def error_response(status, error, message=None):
    body = {"success": False, "error": error}
    if message:
        body["message"] = message
    return jsonify(body), status


def positive_int(value):
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


def attachment(chunks, headers, filename, mimetype):
    headers = dict(headers)
    headers["Content-Disposition"] = f'attachment; filename="{filename}"'
    return Response(chunks, mimetype=mimetype, headers=headers)


# Root route (for browser check)
@app.route('/')
def home():
    return jsonify({
        "status": "MediaVault Pro API is running!",
        "endpoints": {
            "info": "POST /api/info",
            "download": "GET /api/download",
            "audio": "GET /api/audio",
            "health": "GET /health",
        },
    })


@app.route('/health')
def health():
    timestamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
    return jsonify({
        "status": "healthy",
        "timestamp": timestamp.replace("+00:00", "Z"),
    })


@app.route('/api/info', methods=['POST'])
def video_info():
    data = request.get_json(silent=True) or {}
    url = data.get("url") if isinstance(data, dict) else None

    logger.info(f"Fetching info for: {url}")

    if not youtube.validate_url(url):
        return error_response(400, "Invalid YouTube URL")

    try:
        info = youtube.fetch_info(url)
        formats = youtube.list_formats(info, config.MAX_FORMATS)
        return jsonify(youtube.video_details(info, formats, config.DESCRIPTION_LENGTH))
    except Exception as e:
        logger.error(f"Error fetching video info for {url}: {e}")
        return error_response(500, "Failed to fetch video information", str(e))


@app.route('/api/download')
def download_video():
    url = request.args.get("url")
    raw_itag = request.args.get("itag")

    logger.info(f"Download request: url={url} itag={raw_itag}")

    if not youtube.validate_url(url):
        return error_response(400, "Invalid YouTube URL")

    itag = None
    if raw_itag:
        itag = positive_int(raw_itag)
        if itag is None:
            return error_response(400, "Invalid itag")

    try:
        info = youtube.fetch_info(url, youtube.video_selector(itag))
        chunks, headers = youtube.open_stream(info, config.CHUNK_SIZE, config.STREAM_TIMEOUT)
    except Exception as e:
        logger.error(f"Download error for {url}: {e}")
        return error_response(500, "Download failed", str(e))

    filename = youtube.safe_filename(info.get("title"), "mp4")
    logger.info(f"Streaming format {info.get('format_id')} as {filename}")
    return attachment(chunks, headers, filename, "video/mp4")


@app.route('/api/audio')
def download_audio():
    url = request.args.get("url")
    raw_quality = request.args.get("quality")

    logger.info(f"Audio extraction request: url={url} quality={raw_quality}")

    if not youtube.validate_url(url):
        return error_response(400, "Invalid YouTube URL")

    quality = config.DEFAULT_AUDIO_QUALITY
    if raw_quality:
        quality = positive_int(raw_quality)
        if quality is None:
            return error_response(400, "Invalid quality")

    try:
        info = youtube.fetch_info(url, youtube.audio_selector(quality))
        chunks, headers = youtube.open_stream(info, config.CHUNK_SIZE, config.STREAM_TIMEOUT)
    except Exception as e:
        logger.error(f"Audio extraction error for {url}: {e}")
        return error_response(500, "Audio extraction failed", str(e))

    filename = youtube.safe_filename(info.get("title"), "mp3")
    logger.info(f"Streaming audio format {info.get('format_id')} as {filename}")
    return attachment(chunks, headers, filename, "audio/mpeg")


@app.errorhandler(404)
def not_found(e):
    return error_response(404, "Not found")


@app.errorhandler(405)
def method_not_allowed(e):
    return error_response(405, "Method not allowed")


@app.errorhandler(500)
def internal_error(e):
    cause = getattr(e, "original_exception", None) or e
    logger.error(f"Unhandled error on {request.path}: {cause}")
    return error_response(500, "Internal server error")


if __name__ == "__main__":
    logger.info(f"MediaVault Pro server running on http://{config.HOST}:{config.PORT}")
    app.run(host=config.HOST, port=config.PORT, debug=config.DEBUG, threaded=True)
