# ABOUTME: CLI entry point for notion-typewriter.
# ABOUTME: Provides 'render', 'watch' and 'serve' commands.

import argparse
import logging
from logging.handlers import RotatingFileHandler
import sys
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from .config import load_config, ConfigError, Config
from .content import fetch_page_content
from .notion import NotionClient, NotionFetchError
from .scheduler import ContentWatcher, run_scheduler

DEFAULT_CONFIG_PATH = Path("config.yaml")


def setup_logging(log_path: Path | None = None, verbose: bool = False) -> None:
    """Configure logging for the application.

    Args:
        log_path: Optional path for log file. If provided, enables rotating file logging.
        verbose: Log at DEBUG instead of INFO.
    """
    log_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    # Console handler (stderr keeps stdout free for rendered Markdown)
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter(log_format, date_format))
    root_logger.addHandler(console_handler)

    # File handler with rotation (if log_path provided)
    if log_path:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(log_format, date_format))
        root_logger.addHandler(file_handler)

    # Suppress noisy third-party loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def _load(args: argparse.Namespace) -> tuple[Config, NotionClient]:
    """Load config and build a client, exiting on configuration errors."""
    logger = logging.getLogger(__name__)

    try:
        config = load_config(args.config, required=args.config_given)
        token = config.get_token()
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    return config, NotionClient(token)


def _page_ref(args: argparse.Namespace, config: Config) -> str:
    logger = logging.getLogger(__name__)

    page_ref = getattr(args, "page", None) or config.page
    if not page_ref:
        logger.error("No page given (use --page, 'page' in config, or NOTION_PAGE_URL / NOTION_PAGE_ID)")
        sys.exit(1)
    return page_ref


def cmd_render(args: argparse.Namespace) -> None:
    """Fetch and render the page once."""
    logger = logging.getLogger(__name__)

    config, client = _load(args)
    page_ref = _page_ref(args, config)

    try:
        content = fetch_page_content(client, page_ref)
    except NotionFetchError as e:
        logger.error(f"Failed to render page: {e}")
        sys.exit(1)

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(content.markdown, encoding="utf-8")
        logger.info(f"Wrote {args.output}")
    else:
        sys.stdout.write(content.markdown + "\n")

    if args.hash:
        print(content.content_hash)


def cmd_watch(args: argparse.Namespace) -> None:
    """Poll the page and publish Markdown whenever it changes."""
    config, client = _load(args)
    page_ref = _page_ref(args, config)

    watcher = ContentWatcher(client, page_ref, args.output or config.output_path)
    run_scheduler(config, watcher.poll)


def cmd_serve(args: argparse.Namespace) -> None:
    """Run the HTTP API for the typewriter front-end."""
    import uvicorn

    from .server import create_app

    logger = logging.getLogger(__name__)

    config, client = _load(args)
    host = args.host or config.server.host
    port = args.port or config.server.port

    logger.info(f"Serving on http://{host}:{port}")
    uvicorn.run(create_app(config, client), host=host, port=port, log_config=None)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="notion-typewriter",
        description="Render a Notion page as Markdown for a typewriter display",
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help=f"Path to config file (default: {DEFAULT_CONFIG_PATH}, optional)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        help="Also write logs to this file (rotated at 10 MB)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # render command
    render_parser = subparsers.add_parser(
        "render",
        help="Fetch the page once and print its Markdown",
    )
    render_parser.add_argument("--page", "-p", help="Notion page URL or ID")
    render_parser.add_argument("--output", "-o", type=Path, help="Write Markdown to this file")
    render_parser.add_argument("--hash", action="store_true", help="Also print the content hash")

    # watch command
    watch_parser = subparsers.add_parser(
        "watch",
        help="Poll the page and write Markdown when it changes",
    )
    watch_parser.add_argument("--page", "-p", help="Notion page URL or ID")
    watch_parser.add_argument("--output", "-o", type=Path, help="Write Markdown to this file")

    # serve command
    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP API and static file server",
    )
    serve_parser.add_argument("--host", help="Bind address")
    serve_parser.add_argument("--port", type=int, help="Port to listen on")

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    args.config_given = args.config is not None
    if args.config is None:
        args.config = DEFAULT_CONFIG_PATH

    setup_logging(args.log_file, args.verbose)

    # Values already in the environment win over .env
    load_dotenv(find_dotenv(usecwd=True))

    if args.command == "render":
        cmd_render(args)
    elif args.command == "watch":
        cmd_watch(args)
    elif args.command == "serve":
        cmd_serve(args)


if __name__ == "__main__":
    main()
