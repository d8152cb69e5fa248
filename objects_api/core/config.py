"""
Application Configuration.

Loads YAML settings from config/settings/ under the project root.
The project root is the nearest directory holding a .project_root marker.

Files:
    application.yaml - API base URL, timeout and default headers
    logging.yaml     - log level, format and handlers
"""

import sys
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

PROJECT_ROOT_MARKER = ".project_root"
SETTINGS_DIR = Path("config") / "settings"


def find_project_root() -> Path:
    """
    Locate the project root by walking up to the .project_root marker.

    Searches from the working directory first, then from this package's
    location so an editable install works from any directory.

    Raises:
        FileNotFoundError: If no marker is found
    """
    starts = [Path.cwd(), Path(__file__).resolve().parent]
    for start in starts:
        for candidate in (start, *start.parents):
            if (candidate / PROJECT_ROOT_MARKER).exists():
                return candidate
    raise FileNotFoundError(
        f"Could not find {PROJECT_ROOT_MARKER} in {Path.cwd()} or any parent directory"
    )


def validate_project_root() -> Path:
    """
    Ensure the current working directory is the project root.

    Entry points call this before loading configuration.

    Returns:
        Path to the project root

    Raises:
        SystemExit: If the .project_root marker is missing
    """
    cwd = Path.cwd()
    if not (cwd / PROJECT_ROOT_MARKER).exists():
        print(
            f"Error: {PROJECT_ROOT_MARKER} not found in {cwd}. "
            "Run this command from the project root.",
            file=sys.stderr,
        )
        sys.exit(1)
    return cwd


def load_yaml_settings(filename: str, root: Path | None = None) -> dict[str, Any]:
    """
    Read one YAML settings file.

    Args:
        filename: File name inside config/settings/
        root: Project root; discovered when omitted

    Raises:
        FileNotFoundError: If the file does not exist
    """
    path = (root or find_project_root()) / SETTINGS_DIR / filename
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")
    with path.open(encoding="utf-8") as fh:
        return yaml.safe_load(fh) or {}


class AppConfig:
    """Parsed YAML configuration, one attribute per settings file."""

    def __init__(self, root: Path | None = None):
        root = root or find_project_root()
        self.application = load_yaml_settings("application.yaml", root)
        self.logging = load_yaml_settings("logging.yaml", root)

    @property
    def api(self) -> dict[str, Any]:
        return self.application.get("api", {})


@lru_cache
def get_app_config() -> AppConfig:
    """Get the cached application configuration."""
    return AppConfig()


def get_server_base_url() -> tuple[str, float]:
    """
    Get the remote API base URL and request timeout.

    Returns:
        Tuple of (base_url, timeout_seconds)
    """
    api = get_app_config().api
    return api["base_url"].rstrip("/"), float(api.get("timeout", 30))


def get_default_headers() -> dict[str, str]:
    """Headers sent with every request."""
    headers = get_app_config().api.get("headers") or {}
    return {str(k): str(v) for k, v in headers.items()}
