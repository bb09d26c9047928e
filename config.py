# config.py
import argparse
from dataclasses import dataclass, field
from pathlib import Path

APP_TITLE = "LAN File Server"

DEFAULT_PORT = 8000
DEFAULT_ROOT = "."

MAX_UPLOAD_SIZE = 20 * 1024 * 1024  # 20 MiB
FORM_OVERHEAD = 1024 * 1024         # multipart headers allowed beyond the file cap
UPLOAD_FIELD = "uploadFile"

CONFLICT_OVERWRITE = "overwrite"
CONFLICT_REJECT = "reject"
CONFLICT_RENAME = "rename"
CONFLICT_POLICIES = (CONFLICT_OVERWRITE, CONFLICT_REJECT, CONFLICT_RENAME)


class ConfigurationError(Exception):
    """Startup configuration that the server cannot run with."""


@dataclass(frozen=True)
class ServerConfig:
    port: int = DEFAULT_PORT
    root: Path = field(default_factory=lambda: Path(DEFAULT_ROOT))
    max_upload_size: int = MAX_UPLOAD_SIZE
    on_conflict: str = CONFLICT_OVERWRITE

    def __post_init__(self):
        # accept plain strings for root, normalise once
        object.__setattr__(self, "root", Path(self.root))
        if self.on_conflict not in CONFLICT_POLICIES:
            raise ConfigurationError(f"unknown conflict policy: {self.on_conflict!r}")

    def validate(self) -> "ServerConfig":
        """Check the root is a usable directory; returns self for chaining."""
        if not self.root.is_dir():
            raise ConfigurationError(f"root path is not a directory: {self.root}")
        return self


def _port(value: str) -> int:
    try:
        port = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid port: {value!r}")
    if not 0 <= port <= 65535:
        raise argparse.ArgumentTypeError(f"port out of range: {port}")
    return port


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Serve a directory over HTTP and accept uploads at /upload.",
    )
    parser.add_argument("-port", "--port", type=_port, default=DEFAULT_PORT,
                        help="The port to listen (default: %(default)s)")
    parser.add_argument("-path", "--path", default=DEFAULT_ROOT,
                        help="The path of the files (default: %(default)s)")
    parser.add_argument("-on-conflict", "--on-conflict", choices=CONFLICT_POLICIES,
                        default=CONFLICT_OVERWRITE,
                        help="What to do when an uploaded name already exists (default: %(default)s)")
    parser.add_argument("-log-level", "--log-level", default="INFO",
                        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
                        help="Logging verbosity (default: %(default)s)")
    return parser


def parse_args(argv=None):
    """Return (ServerConfig, argparse.Namespace) built from command line flags."""
    args = build_parser().parse_args(argv)
    # port 0 means "not set", same as leaving the flag out
    port = args.port or DEFAULT_PORT
    config = ServerConfig(port=port, root=Path(args.path), on_conflict=args.on_conflict)
    return config, args
