"""Helper-Funktionen, um statische und dynamische Konfiguration zu trennen.

Die Grundeinstellungen stehen in ``config.ini`` neben diesem Modul. Vom
Benutzer geänderte Werte (z. B. die gewählte Korpusversion) landen in
``config.runtime.ini``; so bleiben Kommentare in der Hauptdatei erhalten.
Umgebungsvariablen (auch aus einer ``.env``-Datei) haben Vorrang vor beiden.
"""

from __future__ import annotations

import configparser
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from dotenv import load_dotenv

from .models import CORPUS_VERSIONS, DEFAULT_CORPUS_VERSION, WORD_TAGS
from .presentation import PREVIEW_MAX_EMOJI_COUNT
from .scorer import DEFAULT_WEIGHTS, Weights

logger = logging.getLogger(__name__)

CONFIG_MAIN_PATH = Path(__file__).resolve().parent / "config.ini"
DEFAULT_RUNTIME_PATH = Path.home() / ".config" / "gitemoji" / "config.runtime.ini"

ENV_VERSION = "GITEMOJI_CONTEXTUAL_DATA_VERSION"
ENV_DATASET = "GITEMOJI_DATASET"
ENV_RUNTIME_CONFIG = "GITEMOJI_RUNTIME_CONFIG"


def runtime_config_path() -> Path:
    override = os.getenv(ENV_RUNTIME_CONFIG)
    return Path(override) if override else DEFAULT_RUNTIME_PATH


def load_base_config() -> configparser.ConfigParser:
    """Lädt ausschließlich die statische Grundkonfiguration."""
    cfg = configparser.ConfigParser()
    cfg.read(CONFIG_MAIN_PATH, encoding="utf-8-sig")
    return cfg


def load_runtime_config() -> configparser.ConfigParser:
    """Lädt nur die dynamische Laufzeitkonfiguration."""
    cfg = configparser.ConfigParser()
    path = runtime_config_path()
    if path.exists():
        cfg.read(path, encoding="utf-8-sig")
    return cfg


def load_merged_config() -> configparser.ConfigParser:
    """Kombiniert statische und dynamische Konfiguration."""
    base = load_base_config()
    runtime = load_runtime_config()
    for section in runtime.sections():
        if not base.has_section(section):
            base.add_section(section)
        for key, value in runtime.items(section):
            base.set(section, key, value)
    return base


def save_runtime_config(cfg: configparser.ConfigParser) -> None:
    """Persistiert die Laufzeitdaten in ``config.runtime.ini``."""
    path = runtime_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        cfg.write(fh)


def update_runtime_section(section: str, updates: Dict[str, str]) -> None:
    """Aktualisiert gezielt ein Konfigurations-Teilsegment."""
    cfg = load_runtime_config()
    if not cfg.has_section(section):
        cfg.add_section(section)
    for key, value in updates.items():
        cfg.set(section, key, value)
    save_runtime_config(cfg)


@dataclass
class LoggingSettings:
    console_level: str = "WARNING"
    file_enabled: bool = False
    file_path: str = ""
    file_max_bytes: int = 1048576
    file_backup_count: int = 5
    file_level: str = ""


@dataclass
class Settings:
    contextual_data_version: str = DEFAULT_CORPUS_VERSION
    dataset_path: Optional[Path] = None
    weights: Weights = DEFAULT_WEIGHTS
    preview_max_emoji: int = PREVIEW_MAX_EMOJI_COUNT
    logging: LoggingSettings = field(default_factory=LoggingSettings)
    host: str = "127.0.0.1"
    port: int = 8000


def _get_int(cfg: configparser.ConfigParser, section: str, option: str, default: int) -> int:
    try:
        return cfg.getint(section, option, fallback=default)
    except ValueError:
        logger.warning(
            "Ignoriere ungueltigen Wert fuer %s.%s: %s",
            section,
            option,
            cfg.get(section, option, fallback=""),
        )
        return default


def _get_bool(cfg: configparser.ConfigParser, section: str, option: str, default: bool) -> bool:
    try:
        return cfg.getboolean(section, option, fallback=default)
    except ValueError:
        logger.warning("Ignoriere ungueltigen Wert fuer %s.%s", section, option)
        return default


def resolve_version(value: Optional[str]) -> str:
    version = (value or "").strip().lower()
    if version in CORPUS_VERSIONS:
        return version
    if version:
        logger.warning(
            "Unbekannte Korpusversion %r, verwende %s", value, DEFAULT_CORPUS_VERSION
        )
    return DEFAULT_CORPUS_VERSION


def _load_weights(cfg: configparser.ConfigParser) -> Weights:
    section = "SUGGESTION"
    by_tag = {
        tag: _get_int(cfg, section, f"weight_tag_{tag}", DEFAULT_WEIGHTS.by_tag.get(tag, 0))
        for tag in WORD_TAGS
    }
    return Weights(
        substring=_get_int(cfg, section, "weight_substring", DEFAULT_WEIGHTS.substring),
        whole_word_default=_get_int(
            cfg, section, "weight_whole_word", DEFAULT_WEIGHTS.whole_word_default
        ),
        by_tag=by_tag,
    )


def load_settings(cfg: Optional[configparser.ConfigParser] = None) -> Settings:
    """Return :class:`Settings` from ``cfg`` (merged config files by default)."""

    load_dotenv()
    if cfg is None:
        cfg = load_merged_config()

    version = os.getenv(ENV_VERSION) or cfg.get(
        "DATASET", "contextual_data_version", fallback=DEFAULT_CORPUS_VERSION
    )
    dataset_path = os.getenv(ENV_DATASET) or cfg.get("DATASET", "path", fallback="")

    console_level = cfg.get("LOGGING", "console_level", fallback="WARNING").upper()
    log_settings = LoggingSettings(
        console_level=console_level,
        file_enabled=_get_bool(cfg, "LOGGING", "file_enabled", False),
        file_path=cfg.get("LOGGING", "file_path", fallback=""),
        file_max_bytes=max(0, _get_int(cfg, "LOGGING", "file_max_bytes", 1048576)),
        file_backup_count=max(0, _get_int(cfg, "LOGGING", "file_backup_count", 5)),
        file_level=cfg.get("LOGGING", "file_level", fallback=console_level).upper(),
    )

    return Settings(
        contextual_data_version=resolve_version(version),
        dataset_path=Path(dataset_path) if dataset_path.strip() else None,
        weights=_load_weights(cfg),
        preview_max_emoji=max(1, _get_int(cfg, "SUGGESTION", "preview_max_emoji", PREVIEW_MAX_EMOJI_COUNT)),
        logging=log_settings,
        host=cfg.get("SERVER", "host", fallback="127.0.0.1"),
        port=_get_int(cfg, "SERVER", "port", 8000),
    )
