# src/album_meta/scraper/cli.py

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from album_meta.config import get_settings
from album_meta.domain.models import Album, BuildError
from album_meta.editor.console import ConsoleReader
from album_meta.editor.session import EditCancelled, edit
from album_meta.extractors.dispatch import dispatch
from album_meta.scraper.client import FetchClient
from album_meta.scraper.errors import AlbumFileError, ExtractionError
from album_meta.scraper.storage import load_album, write_album, write_artwork

logger = logging.getLogger(__name__)

# Matches the exit status of readline-based tools on ^C.
EXIT_INTERRUPTED = 130


def main(argv: list[str] | None = None) -> None:
    """Entry point for the album-meta CLI."""
    settings = get_settings()
    args = _build_arg_parser(default_output=settings.output_dir).parse_args(argv)

    _configure_logging(verbose=args.verbose)

    output_dir = Path(args.output)

    try:
        if args.command == "extract":
            _cmd_extract(
                artist_id=args.artist_id,
                url=args.url,
                output_dir=output_dir,
                interactive=not args.no_edit,
                with_artwork=not args.no_artwork,
            )
        elif args.command == "edit":
            _cmd_edit(
                artist_id=args.artist_id,
                path=Path(args.path),
                output_dir=output_dir,
            )
        else:
            msg = f"Unknown command: {args.command}"
            raise ValueError(msg)
    except (EditCancelled, KeyboardInterrupt):
        logger.warning("Interrupted by user. Exiting.")
        sys.exit(EXIT_INTERRUPTED)
    except (ExtractionError, BuildError, AlbumFileError) as exc:
        logger.error("%s: %s", type(exc).__name__, exc)
        sys.exit(1)


def _build_arg_parser(*, default_output: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="album-meta",
        description="Scrape a release page into canonical album JSON files.",
    )

    parser.add_argument(
        "-o",
        "--output",
        default=default_output,
        help="Output directory (default: %(default)s).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging.",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        help="Sub-command to run.",
    )

    # extract: fetch a release page, review it, write it
    extract_parser = subparsers.add_parser(
        "extract",
        help="Extract an album from a release page URL.",
    )
    extract_parser.add_argument("artist_id", help="The local artist ID.")
    extract_parser.add_argument("url", help="The release page URL to scrape.")
    extract_parser.add_argument(
        "--no-edit",
        action="store_true",
        help="Write the extracted album without the interactive review.",
    )
    extract_parser.add_argument(
        "--no-artwork",
        action="store_true",
        help="Do not download the album artwork.",
    )

    # edit: review an album file written earlier
    edit_parser = subparsers.add_parser(
        "edit",
        help="Review and rewrite a previously written album file.",
    )
    edit_parser.add_argument("artist_id", help="The local artist ID.")
    edit_parser.add_argument("path", help="Path to an album JSON file.")

    return parser


def _configure_logging(*, verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def _cmd_extract(
    *,
    artist_id: str,
    url: str,
    output_dir: Path,
    interactive: bool,
    with_artwork: bool,
) -> None:
    with FetchClient() as client:
        extractor = dispatch(url, client=client)
        logger.info("Extracting %s with %s.", url, type(extractor).__name__)

        album = extractor.extract()
        if interactive:
            album = edit(album, ConsoleReader())

        write_album(output_dir, artist_id, album)

        if with_artwork:
            _write_artwork(client, output_dir, artist_id, album)


def _cmd_edit(*, artist_id: str, path: Path, output_dir: Path) -> None:
    album = load_album(path)
    edited = edit(album, ConsoleReader())

    if edited.id != album.id:
        logger.info(
            "Album id changed from %s to %s; %s is left in place.",
            album.id,
            edited.id,
            path,
        )

    write_album(output_dir, artist_id, edited)


def _write_artwork(client: FetchClient, output_dir: Path, artist_id: str, album: Album) -> None:
    try:
        path = write_artwork(client, output_dir, artist_id, album)
    except ExtractionError as exc:
        logger.warning("Failed to download artwork (%s).", exc)
        return

    if path is None:
        logger.info("Album %s has no artwork.", album.id)


if __name__ == "__main__":
    # python -m album_meta.scraper.cli -v extract iu "https://www.melon.com/album/detail.htm?albumId=10123637"
    main()
