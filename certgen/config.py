from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass

PACKAGE_ROOT = os.path.dirname(os.path.abspath(__file__))
DEFAULT_ASSETS_DIR = os.path.join(PACKAGE_ROOT, "assets")

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUTHY


@dataclass(frozen=True)
class Settings:
    assets_dir: str = DEFAULT_ASSETS_DIR
    title_font: str = "Fonts/oldenglish.ttf"
    institution_font: str = "Fonts/CinzelDecorative-Bold.ttf"
    invariant: bool = True
    output_dir: str = "."
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            assets_dir=os.getenv("CERTGEN_ASSETS_DIR", DEFAULT_ASSETS_DIR),
            title_font=os.getenv("CERTGEN_TITLE_FONT", cls.title_font),
            institution_font=os.getenv(
                "CERTGEN_INSTITUTION_FONT", cls.institution_font
            ),
            invariant=_env_flag("CERTGEN_INVARIANT", True),
            output_dir=os.getenv("CERTGEN_OUTPUT_DIR", "."),
            log_level=os.getenv("CERTGEN_LOG_LEVEL", "INFO").upper(),
        )


def configure_logging(settings: Settings) -> logging.Logger:
    """Attach a stdout handler to the ``certgen`` logger once."""
    logger = logging.getLogger("certgen")
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s %(message)s"))
        logger.addHandler(handler)
    level = logging.getLevelName(settings.log_level)
    logger.setLevel(level if isinstance(level, int) else logging.INFO)
    return logger
