"""Runtime settings read from the environment (and a local .env file)."""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from models import Language
from scene import FONT_FAMILY

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-3-flash-preview"
DEFAULT_WIDTH = 1200
DEFAULT_HEIGHT = 800


@dataclass(frozen=True)
class Settings:
    api_key: str | None = None
    model: str = DEFAULT_MODEL
    export_dir: Path = Path(".")
    language: Language = Language.HINDI
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    font_family: tuple[str, ...] = FONT_FAMILY
    log_level: str = "INFO"


def _int_setting(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer, using %d", key, raw, default)
        return default


def _language_setting(env: Mapping[str, str]) -> Language:
    raw = env.get("VAMSHA_LANGUAGE", "").strip()
    if not raw:
        return Language.HINDI
    for language in Language:
        if language.value.lower() == raw.lower():
            return language
    logger.warning("Unknown language %r, using %s", raw, Language.HINDI.value)
    return Language.HINDI


def load_settings(env: Mapping[str, str] | None = None, use_dotenv: bool = True) -> Settings:
    """
    Build Settings from environment variables.

    A missing API key is not an error: translation and story generation then
    fall back to their offline results.
    """
    if env is None:
        if use_dotenv:
            load_dotenv()
        env = os.environ

    fonts = tuple(f.strip() for f in env.get("VAMSHA_FONTS", "").split(",") if f.strip())

    return Settings(
        api_key=env.get("GEMINI_API_KEY") or env.get("API_KEY") or None,
        model=env.get("VAMSHA_MODEL") or DEFAULT_MODEL,
        export_dir=Path(env.get("VAMSHA_EXPORT_DIR") or "."),
        language=_language_setting(env),
        width=_int_setting(env, "VAMSHA_WIDTH", DEFAULT_WIDTH),
        height=_int_setting(env, "VAMSHA_HEIGHT", DEFAULT_HEIGHT),
        font_family=fonts or FONT_FAMILY,
        log_level=(env.get("VAMSHA_LOG_LEVEL") or "INFO").upper(),
    )
