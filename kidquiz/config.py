"""
config.py
=========

Centralised settings for the app.
The Gemini API key, model names, batch size, audience and log level are all
read through AppConfig.

Sources, in order of precedence:
- environment variables (GEMINI_API_KEY, LOG_LEVEL)
- .env in the repository root (GEMINI_API_KEY only)
- config.toml in the repository root
- the defaults below
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import toml

log = logging.getLogger(__name__)


# ------------------------------------------------------------
# base paths
# ------------------------------------------------------------

ROOT_DIR = Path(__file__).resolve().parent.parent
CONFIG_PATH = ROOT_DIR / "config.toml"
ENV_PATH = ROOT_DIR / ".env"


# ------------------------------------------------------------
# AppConfig
# ------------------------------------------------------------

@dataclass
class AppConfig:
    """
    Application settings.

    - API key lookup
    - question / image model names
    - how many questions one session asks for
    - who the questions are written for
    """

    # ---------- app ----------
    app_name: str = "KidQuiz Adventure"
    audience: str = "3rd-grade students (8-9 years old)"

    # ---------- API ----------
    gemini_api_key: str = ""
    question_model: str = "gemini-1.5-flash"
    image_model: str = "gemini-2.5-flash-image"
    batch_size: int = 8

    # ---------- logging ----------
    log_level: str = "INFO"

    # ============================================================
    # construction
    # ============================================================

    def __post_init__(self):
        if not self.gemini_api_key:
            self.gemini_api_key = self._load_api_key()

        env_level = os.environ.get("LOG_LEVEL")
        if env_level:
            self.log_level = env_level.upper()

        if self.batch_size < 1:
            self.batch_size = 1

    @property
    def has_api_key(self) -> bool:
        return bool(self.gemini_api_key)

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "AppConfig":
        """
        Build an AppConfig from config.toml.
        A missing or unreadable file falls back to the defaults.
        """
        cfg = read_toml(path or CONFIG_PATH)

        app = _section(cfg, "app")
        gemini = _section(cfg, "gemini")
        logging_cfg = _section(cfg, "logging")

        kwargs: Dict[str, Any] = {}
        if isinstance(app.get("name"), str):
            kwargs["app_name"] = app["name"]
        if isinstance(app.get("audience"), str):
            kwargs["audience"] = app["audience"]
        if isinstance(gemini.get("question_model"), str):
            kwargs["question_model"] = gemini["question_model"]
        if isinstance(gemini.get("image_model"), str):
            kwargs["image_model"] = gemini["image_model"]
        try:
            if "batch_size" in gemini:
                kwargs["batch_size"] = int(gemini["batch_size"])
        except (TypeError, ValueError):
            log.warning("ignoring invalid gemini.batch_size: %r", gemini.get("batch_size"))
        if isinstance(logging_cfg.get("level"), str):
            kwargs["log_level"] = logging_cfg["level"].upper()

        return cls(**kwargs)

    # ============================================================
    # internals
    # ============================================================

    def _load_api_key(self) -> str:
        """
        Make GEMINI_API_KEY work on Streamlit Cloud, CI and locally.
        """

        key = os.environ.get("GEMINI_API_KEY")
        if key:
            return key

        # local development with a .env file
        if ENV_PATH.exists():
            for line in ENV_PATH.read_text(encoding="utf-8").splitlines():
                if line.startswith("GEMINI_API_KEY="):
                    return line.split("=", 1)[1].strip().strip('"')

        return ""  # no key -> every provider call degrades to its failure value


# ------------------------------------------------------------
# toml helpers
# ------------------------------------------------------------

def read_toml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        return toml.load(path)
    except (OSError, toml.TomlDecodeError) as e:
        log.warning("could not read %s, using defaults: %s", path, e)
        return {}


def _section(cfg: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = cfg.get(name)
    return value if isinstance(value, dict) else {}
