# app.py
import logging
import sys

from flask import Flask
from werkzeug.exceptions import RequestEntityTooLarge
from werkzeug.serving import make_server

from config import APP_TITLE, FORM_OVERHEAD, ConfigurationError, ServerConfig, parse_args
from netinfo import list_local_ipv4_addresses
from routes import register_routes
from routes.upload import render_error

logger = logging.getLogger(__name__)


def create_app(config: ServerConfig) -> Flask:
    # every path belongs to the served root, so no built-in /static
    app = Flask(__name__, static_folder=None)
    # allow some header overhead beyond the file cap
    app.config.update(
        SERVER_CONFIG=config,
        MAX_CONTENT_LENGTH=config.max_upload_size + FORM_OVERHEAD,
    )

    @app.errorhandler(RequestEntityTooLarge)
    def too_large(e):
        return render_error("FILE_TOO_BIG", 413)

    register_routes(app)
    return app


def main(argv=None) -> int:
    config, args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config.validate()
        addrs = list_local_ipv4_addresses()
    except (ConfigurationError, OSError) as e:
        logger.error("%s", e)
        return 1

    logger.info("The root path is %s", config.root.resolve())
    app = create_app(config)

    print(f"* Starting {APP_TITLE} on port {config.port}")
    try:
        # werkzeug reports a failed bind by printing the reason and raising SystemExit
        server = make_server("0.0.0.0", config.port, app, threaded=True)
    except (OSError, SystemExit):
        logger.error("cannot listen on 0.0.0.0:%d", config.port)
        print("Exited")
        return 1

    logger.info(
        "Service listen on port %d, and server ip addresses are %s"
        ", use /upload for uploading files and / for downloading",
        config.port, ", ".join(addrs) or "(none)",
    )
    status = 0
    try:
        server.serve_forever()
    except OSError as e:
        logger.error("server failed: %s", e)
        status = 1
    finally:
        server.server_close()
    print("Exited")
    return status


if __name__ == "__main__":
    sys.exit(main())
