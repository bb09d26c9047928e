# routes/__init__.py
from .upload import bp as upload_bp
from .files import bp as files_bp

def register_routes(app):
    # /upload must be registered before the catch-all file route
    app.register_blueprint(upload_bp)
    app.register_blueprint(files_bp)
