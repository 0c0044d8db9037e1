"""Flask-Blueprint mit den Emoji-Endpunkten.

Die Endpunkte bedienen Editor-Integrationen, die Vorschläge live anzeigen
möchten, ohne den Datensatz selbst zu laden. Der Index-Cache gehört der App
(``app.extensions["gitemoji"]``); jede Korpusversion wird beim ersten Zugriff
einmal aufgebaut.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from flask import Blueprint, Flask, current_app, jsonify, request
from flask_compress import Compress

from .cache import IndexCache
from .config import Settings, load_settings
from .models import CORPUS_VERSIONS
from .presentation import ConcatStyle, combine, list_emojis, preview_title
from .scorer import score_message
from .storage import load_dataset

logger = logging.getLogger(__name__)

bp = Blueprint("gitemoji", __name__, url_prefix="/api/emoji")


def _state() -> tuple[Settings, IndexCache]:
    state = current_app.extensions["gitemoji"]
    return state["settings"], state["cache"]


def _error(message: str, status: int = 400) -> Any:
    return jsonify({"error": message}), status


def _version(value: Optional[str], settings: Settings) -> Optional[str]:
    if not value:
        return settings.contextual_data_version
    return value if value in CORPUS_VERSIONS else None


def _missing_corpus(version: str, cache: IndexCache) -> Any:
    if version in cache.dataset.contexts:
        return None
    return _error(f"Dataset has no context corpus {version!r}")


@bp.route("/", methods=["GET"])
def root() -> Any:
    """Einfacher Bereitschaftsendpunkt."""
    settings, _ = _state()
    return jsonify({
        "status": "ok",
        "versions": list(CORPUS_VERSIONS),
        "default_version": settings.contextual_data_version,
    })


@bp.route("/suggest", methods=["POST"])
def suggest() -> Any:
    """Liefert die bewerteten Emoji-Vorschläge für eine Nachricht."""
    if not request.is_json:
        return _error("Request must be JSON")
    data = request.get_json(silent=True) or {}
    message = data.get("message", "")
    if not isinstance(message, str):
        return _error("message must be a string")

    settings, cache = _state()
    version = _version(data.get("version"), settings)
    if version is None:
        return _error(f"Unknown version: {data.get('version')!r}")
    limit = data.get("limit")
    if limit is not None and (not isinstance(limit, int) or limit < 0):
        return _error("limit must be a non-negative integer")
    missing = _missing_corpus(version, cache)
    if missing is not None:
        return missing

    ranked = score_message(message, cache.get(version), settings.weights)
    emojis = [emoji for emoji, _ in ranked]
    if limit is not None:
        ranked = ranked[:limit]
    return jsonify({
        "version": version,
        "emoji": [{"id": e.id, "s": e.s, "score": score} for e, score in ranked],
        "preview": preview_title(emojis, settings.preview_max_emoji),
    })


@bp.route("/list", methods=["GET"])
def list_all() -> Any:
    """Gibt alle Emoji samt Stichwörtern zurück."""
    settings, cache = _state()
    version = _version(request.args.get("version"), settings)
    if version is None:
        return _error(f"Unknown version: {request.args.get('version')!r}")
    missing = _missing_corpus(version, cache)
    if missing is not None:
        return missing
    return jsonify([
        {
            "id": item.emoji.id,
            "s": item.label,
            "description": item.description,
            "keywords": item.detail,
        }
        for item in list_emojis(cache.get(version))
    ])


@bp.route("/combine", methods=["POST"])
def combine_message() -> Any:
    """Verbindet gewählte Emoji und Nachricht im gewünschten Stil."""
    if not request.is_json:
        return _error("Request must be JSON")
    data = request.get_json(silent=True) or {}
    message = data.get("message", "")
    ids = data.get("emoji") or []
    if not isinstance(message, str) or not isinstance(ids, list):
        return _error("message must be a string and emoji a list of ids")
    try:
        style = ConcatStyle(data.get("style") or ConcatStyle.EMOJI_FIRST.value)
    except ValueError:
        return _error(f"Unknown style: {data.get('style')!r}")

    _, cache = _state()
    emojis = []
    for emoji_id in ids:
        emoji = cache.dataset.lookup_emoji(str(emoji_id))
        if emoji is None:
            return _error(f"Unknown emoji: {emoji_id!r}")
        emojis.append(emoji)
    return jsonify({"text": combine(emojis, message, style)})


def create_app(settings: Optional[Settings] = None, cache: Optional[IndexCache] = None) -> Flask:
    """Return a Flask app serving :data:`bp`."""

    settings = settings or load_settings()
    if cache is None:
        if settings.dataset_path is not None:
            path = settings.dataset_path
            cache = IndexCache(lambda: load_dataset(path))
        else:
            cache = IndexCache()

    app = Flask(__name__)
    app.json.ensure_ascii = False
    app.extensions["gitemoji"] = {"settings": settings, "cache": cache}
    app.register_blueprint(bp)
    Compress(app)
    logger.info("gitemoji API bereit (Standardversion %s)", settings.contextual_data_version)
    return app
