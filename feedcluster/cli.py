import argparse
import logging
from datetime import datetime, timezone

from .clustering import validate_threshold
from .config import load_config
from .consolidate import process
from .fetchers.rss import fetch_documents
from .report import format_console, render_html, write_csv


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="feedcluster: repeated-story digest from RSS/Atom feeds")
    parser.add_argument("--once", action="store_true", help="Run one fetch and print a summary")
    parser.add_argument("--report", type=str, default=None, help="Write an HTML report to the given path")
    parser.add_argument("--csv", type=str, default=None, help="Write result rows as CSV to the given path")
    parser.add_argument("--config", type=str, default=None, help="Path to config.yaml")
    parser.add_argument("--threshold", type=float, default=None, help="Similarity threshold in percent (0-100)")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not args.once and not args.report and not args.csv:
        print("Use --once, --report, or --csv.")
        return 0

    try:
        config = load_config(args.config)
        threshold = args.threshold if args.threshold is not None else config["clustering"]["threshold"]
        threshold = validate_threshold(threshold)
    except (FileNotFoundError, ValueError) as e:
        parser.error(str(e))

    opts = config.get("options", {}) or {}
    rss_urls = config.get("sources", {}).get("rss_urls", [])
    if not rss_urls:
        print("No rss_urls configured; nothing to fetch.")

    documents = fetch_documents(
        rss_urls,
        timeout=int(opts.get("fetch_timeout_sec", 15)),
        max_workers=int(opts.get("max_workers", 4)),
    )
    output = process(
        documents,
        threshold=threshold,
        now=datetime.now(timezone.utc),
        include_keywords=config.get("filters", {}).get("include_keywords", []),
        exclude_domains=config.get("filters", {}).get("exclude_domains", []),
        max_items_per_feed=int(opts.get("rss_max_per_feed", 0)),
    )

    if args.once:
        print(f"Found {len(output.repeated)} repeated and {len(output.unique)} unique stories")
        listing = format_console(output, limit=int(opts.get("max_items", 30)))
        if listing:
            print(listing)

    if args.report:
        page = render_html(
            output,
            tier_colors=config.get("render", {}).get("tier_colors"),
            max_items=int(opts.get("max_items", 0)),
        )
        with open(args.report, "w", encoding="utf-8") as f:
            f.write(page)
        print(f"Wrote report to {args.report}")

    if args.csv:
        count = write_csv(output, args.csv)
        print(f"Wrote {count} rows to {args.csv}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
