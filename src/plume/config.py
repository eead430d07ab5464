"""Application configuration.

AppConfig is a frozen dataclass, built once and passed to App().
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(debug=True, port=3000, template_dir="views")
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False

    # Templates
    template_dir: str | Path = "templates"
    layout: str = "layout.html"  # Shared page shell every view is wrapped in
    view_suffix: str = ".html"  # Appended to view names ("article/index" -> "article/index.html")
    autoescape: bool = True
    trim_blocks: bool = True
    lstrip_blocks: bool = True

    # Logging
    log_level: str = "info"
