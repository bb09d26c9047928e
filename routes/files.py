# routes/files.py
from html import escape
from pathlib import Path
from urllib.parse import quote

from flask import Blueprint, Response, abort, current_app, redirect, request, send_from_directory
from werkzeug.security import safe_join

bp = Blueprint("files", __name__)

INDEX_NAME = "index.html"


def directory_listing(path) -> str:
    """Minimal HTML listing: one link per entry, sorted, directories marked with '/'."""
    lines = ["<pre>"]
    for entry in sorted(path.iterdir(), key=lambda p: p.name):
        name = entry.name + ("/" if entry.is_dir() else "")
        lines.append(f'<a href="{quote(name)}">{escape(name)}</a>')
    lines.append("</pre>")
    return "\n".join(lines) + "\n"


@bp.get("/", defaults={"subpath": ""})
@bp.get("/<path:subpath>")
def serve(subpath: str):
    root = current_app.config["SERVER_CONFIG"].root.resolve()
    joined = safe_join(str(root), subpath) if subpath else str(root)
    if joined is None:
        abort(404)

    target = Path(joined)
    if target.is_dir():
        if subpath and not request.path.endswith("/"):
            return redirect(request.path + "/", code=301)
        if (target / INDEX_NAME).is_file():
            return send_from_directory(target, INDEX_NAME)
        try:
            body = directory_listing(target)
        except OSError:
            abort(404)
        return Response(body, mimetype="text/html")

    # send_from_directory re-checks the join and answers 404 for missing files
    return send_from_directory(root, subpath)
