import argparse
import logging
import sys
from pathlib import Path
from typing import List

from . import config, storage
from .cache import IndexCache
from .emit import Destination, Emitter, EmitError
from .logging_setup import configure_logging
from .models import CORPUS_VERSIONS
from .presentation import ConcatStyle, combine, list_emojis, preview_title
from .scorer import score_message

logger = logging.getLogger(__name__)


def _cache(args: argparse.Namespace) -> IndexCache:
    path = args.dataset or args.settings.dataset_path
    if path:
        return IndexCache(lambda: storage.load_dataset(path))
    return IndexCache()


def _version(args: argparse.Namespace) -> str:
    return args.version or args.settings.contextual_data_version


def suggest(args: argparse.Namespace) -> None:
    """Print emoji suggestions for a message."""

    index = _cache(args).get(_version(args))
    ranked = score_message(args.message, index, args.settings.weights)
    if not ranked:
        logger.info("No emoji found for %r", args.message)
        return
    if args.limit:
        ranked = ranked[: args.limit]
    if args.scores:
        for emoji, score in ranked:
            print(f"{emoji.s}  {score:>4}  :{emoji.id}:")
    else:
        print(preview_title([e for e, _ in ranked], args.settings.preview_max_emoji))


def list_all(args: argparse.Namespace) -> None:
    """List every emoji with its keywords."""

    index = _cache(args).get(_version(args))
    for item in list_emojis(index):
        print(f"{item.label}  {item.description}  {item.detail}")


def compose(args: argparse.Namespace) -> None:
    """Combine the message with the chosen emoji and emit the result."""

    cache = _cache(args)
    emojis = []
    for emoji_id in args.emoji:
        emoji = cache.dataset.lookup_emoji(emoji_id.strip(":"))
        if emoji is None:
            raise SystemExit(f"unknown emoji: {emoji_id}")
        emojis.append(emoji)

    text = combine(emojis, args.message, args.style)
    emitter = Emitter.default(message_file=args.message_file, output_dir=args.output_dir)
    try:
        emitter.emit(Destination(args.emit), text)
    except EmitError as e:
        raise SystemExit(f"emit failed: {e}")


def validate(args: argparse.Namespace) -> None:
    """Validate a dataset file."""

    path = args.input or args.dataset or args.settings.dataset_path
    try:
        dataset = storage.load_dataset(path) if path else storage.load_default_dataset()
    except storage.DatasetError as e:
        raise SystemExit(f"invalid dataset: {e}")

    print(f"Dataset '{path or 'builtin'}' OK ({len(dataset.emoji)} emoji)")


def stats(args: argparse.Namespace) -> None:
    """Show statistics about the dataset."""

    path = args.input or args.dataset or args.settings.dataset_path
    dataset = storage.load_dataset(path) if path else storage.load_default_dataset()
    for key, value in storage.dataset_stats(dataset).items():
        print(f"{key}: {value}")


def show_config(args: argparse.Namespace) -> None:
    settings = args.settings
    print(f"contextual_data_version: {settings.contextual_data_version}")
    print(f"dataset: {settings.dataset_path or 'builtin'}")
    print(f"runtime config: {config.runtime_config_path()}")


def set_version(args: argparse.Namespace) -> None:
    config.update_runtime_section("DATASET", {"contextual_data_version": args.value})
    print(f"contextual_data_version set to {args.value}")


def serve(args: argparse.Namespace) -> None:
    """Run the HTTP API."""

    from .api import create_app

    settings = args.settings
    if args.dataset:
        settings.dataset_path = args.dataset
    app = create_app(settings)
    app.run(host=args.host or settings.host, port=args.port or settings.port)


def main(argv: List[str] | None = None) -> None:
    """Entry point of the ``gitemoji`` command."""

    parser = argparse.ArgumentParser(description="Suggest emoji for commit messages")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("suggest", help="suggest emoji for a message")
    p.add_argument("message")
    p.add_argument("--version", choices=CORPUS_VERSIONS, default=None, help="corpus version")
    p.add_argument("--limit", type=int, default=0, help="show at most this many emoji")
    p.add_argument("--scores", action="store_true", help="print one emoji per line with its score")
    p.set_defaults(func=suggest)

    p = sub.add_parser("list", help="list all emoji with their keywords")
    p.add_argument("--version", choices=CORPUS_VERSIONS, default=None, help="corpus version")
    p.set_defaults(func=list_all)

    p = sub.add_parser("compose", help="combine emoji and message and emit the result")
    p.add_argument("message")
    p.add_argument("emoji", nargs="+", help="emoji ids in the desired order")
    p.add_argument(
        "--style",
        choices=[s.value for s in ConcatStyle],
        default=ConcatStyle.EMOJI_FIRST.value,
    )
    p.add_argument(
        "--emit",
        choices=[d.value for d in Destination],
        default=Destination.TERMINAL.value,
        help="where to deliver the message",
    )
    p.add_argument(
        "--message-file",
        type=Path,
        default=None,
        help="commit message file for --emit git-message (as passed to prepare-commit-msg)",
    )
    p.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="directory for --emit new-document",
    )
    p.set_defaults(func=compose)

    p = sub.add_parser("validate", help="validate a dataset file")
    p.add_argument("input", type=Path, nargs="?", default=None)
    p.set_defaults(func=validate)

    p = sub.add_parser("stats", help="show dataset statistics")
    p.add_argument("input", type=Path, nargs="?", default=None)
    p.set_defaults(func=stats)

    p = sub.add_parser("config", help="show or change settings")
    config_sub = p.add_subparsers(dest="config_command", required=True)
    c = config_sub.add_parser("show", help="print effective settings")
    c.set_defaults(func=show_config)
    c = config_sub.add_parser("set-version", help="persist the corpus version")
    c.add_argument("value", choices=CORPUS_VERSIONS)
    c.set_defaults(func=set_version)

    p = sub.add_parser("serve", help="run the HTTP API")
    p.add_argument("--host", default=None)
    p.add_argument("--port", type=int, default=None)
    p.set_defaults(func=serve)

    parser.add_argument("-v", "--verbose", action="count", default=0, help="increase verbosity")
    parser.add_argument("--log-file", type=Path, default=None, help="write logs to this file")
    parser.add_argument("--dataset", type=Path, default=None, help="dataset JSON file")

    if argv is None and hasattr(sys.stdout, "reconfigure"):
        # emoji glyphs on consoles with a legacy code page
        getattr(sys.stdout, "reconfigure")(encoding="utf-8")

    args = parser.parse_args(argv)
    args.settings = config.load_settings()

    configure_logging(args.settings.logging, args.verbose, args.log_file)

    try:
        args.func(args)
    except storage.DatasetError as e:
        raise SystemExit(f"dataset error: {e}")


if __name__ == "__main__":
    main()
