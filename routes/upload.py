# routes/upload.py
import logging
import os

from flask import Blueprint, Response, current_app, render_template_string, request
from werkzeug.datastructures import FileStorage

from config import UPLOAD_FIELD
from netinfo import list_local_ipv4_addresses
from storage import FileConflict, StorageError, store_upload
from utils import InvalidFilename

logger = logging.getLogger(__name__)

bp = Blueprint("upload", __name__)

UPLOAD_HTML = """<!DOCTYPE html>
<html>
	<head>
		<title>fileserver - upload</title>
	</head>
	<body>
		<form enctype="multipart/form-data" action="http://{{ target }}/upload" method="post">
			<input type="file" name="{{ field }}" />
			<input type="submit" value="upload" />
		</form>
	</body>
</html>
"""


def render_error(message: str, status: int) -> Response:
    """Plain text error body sent with the status the caller asked for."""
    return Response(message, status=status, mimetype="text/plain")


def form_target(port: int) -> str:
    """host:port the upload form posts to; the request's own Host when no LAN address is known."""
    try:
        addrs = list_local_ipv4_addresses()
    except OSError as e:
        logger.warning("address discovery failed, using request host: %s", e)
        addrs = []
    if addrs:
        return f"{addrs[0]}:{port}"
    return request.host


def _payload_size(upload: FileStorage) -> int:
    # parts are spooled by werkzeug, so seeking costs nothing and reads no data
    stream = upload.stream
    pos = stream.tell()
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(pos)
    return size


@bp.get("/upload")
def upload_form():
    config = current_app.config["SERVER_CONFIG"]
    return render_template_string(UPLOAD_HTML, target=form_target(config.port), field=UPLOAD_FIELD)


@bp.post("/upload")
def upload_file():
    config = current_app.config["SERVER_CONFIG"]

    if request.mimetype != "multipart/form-data":
        logger.warning("upload rejected: content type %r", request.content_type)
        return render_error("CANT_PARSE_FORM", 400)

    # touching request.files parses the body; oversize bodies raise 413 here
    upload = request.files.get(UPLOAD_FIELD)
    if upload is None or not upload.filename:
        return render_error("INVALID_FILE", 400)

    try:
        size = _payload_size(upload)
    except OSError:
        return render_error("INVALID_FILE", 400)
    if size > config.max_upload_size:
        logger.warning("upload rejected: %s is %d bytes (limit %d)",
                       upload.filename, size, config.max_upload_size)
        return render_error("FILE_TOO_BIG", 400)

    try:
        payload = upload.read()
    except OSError:
        return render_error("INVALID_FILE", 400)
    finally:
        upload.close()

    try:
        path = store_upload(config.root, upload.filename, payload, config.on_conflict)
    except InvalidFilename as e:
        logger.warning("upload rejected: %s", e)
        return render_error("INVALID_FILENAME", 400)
    except FileConflict as e:
        logger.warning("upload rejected: %s", e)
        return render_error("FILE_EXISTS", 409)
    except StorageError:
        logger.exception("cannot store upload %r", upload.filename)
        return render_error("CANT_WRITE_FILE", 500)

    logger.info("stored %s (%d bytes) at %s", path.name, len(payload), path)
    return Response(f"{path.name} upload success", mimetype="text/plain")
