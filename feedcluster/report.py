from __future__ import annotations
from typing import Dict, List, Optional
import csv
import html

from .news_types import RankedEntry, RankedOutput, Tier

DEFAULT_TIER_COLORS: Dict[str, str] = {
    "HIGH": "#b71c1c",
    "MEDIUM": "#ef9a9a",
    "LOW": "#ffebee",
}

CSV_COLUMNS = ["title", "description", "link", "published", "repeat_count", "tier", "other_links"]


def _escape(s: str | None) -> str:
    return html.escape(s or "")


def _tier_name(entry: RankedEntry) -> str:
    return entry.tier.name if entry.tier else ""


def format_console(output: RankedOutput, limit: int = 10) -> str:
    lines: List[str] = []
    for i, entry in enumerate(output.all_entries[:limit], start=1):
        badge = f"[{_tier_name(entry)} x{entry.repeat_count}] " if entry.is_repeated else ""
        lines.append(f"{i}. {badge}{entry.title} ({entry.time_label}) -> {entry.link}")
    return "\n".join(lines)


def _row_style(entry: RankedEntry, tier_colors: Dict[str, str]) -> str:
    if entry.tier is None:
        return ""
    color = tier_colors.get(entry.tier.name)
    if not color:
        return ""
    fg = "#ffffff" if entry.tier is Tier.HIGH else "#222222"
    return f' style="background-color:{_escape(color)};color:{fg};"'


def _entry_html(entry: RankedEntry, tier_colors: Dict[str, str]) -> str:
    parts = [
        f"<li{_row_style(entry, tier_colors)}>",
        f"<a href=\"{_escape(entry.link)}\">{_escape(entry.title)}</a> <small>{_escape(entry.time_label)}</small>",
    ]
    if entry.is_repeated:
        parts.append(f" <strong>x{entry.repeat_count}</strong>")
    parts.append(f"<p>{_escape(entry.description)}</p>")
    if entry.other_links:
        links = ", ".join(f"<a href=\"{_escape(u)}\">{_escape(u)}</a>" for u in entry.other_links)
        parts.append(f"<p><small>Also reported by: {links}</small></p>")
    parts.append("</li>")
    return "".join(parts)


def render_html(output: RankedOutput, tier_colors: Optional[Dict[str, str]] = None, max_items: int = 0) -> str:
    """Standalone HTML page: repeated stories first, then the rest."""
    colors = dict(DEFAULT_TIER_COLORS)
    colors.update({str(k).upper(): v for k, v in (tier_colors or {}).items()})
    repeated = output.repeated[:max_items] if max_items else output.repeated
    unique = output.unique[:max_items] if max_items else output.unique

    sections = []
    if repeated:
        sections.append("<h2>Repeated stories</h2><ul>" + "\n".join(_entry_html(e, colors) for e in repeated) + "</ul>")
    if unique:
        sections.append("<h2>Latest</h2><ul>" + "\n".join(_entry_html(e, colors) for e in unique) + "</ul>")
    if not sections:
        sections.append("<p>No news items found.</p>")
    return (
        "<!DOCTYPE html>\n<html><head><meta charset=\"utf-8\"><title>News Report</title></head>"
        "<body style=\"font-family:system-ui,sans-serif;\">\n"
        + "\n".join(sections)
        + "\n</body></html>\n"
    )


def result_rows(output: RankedOutput) -> List[Dict[str, str]]:
    rows = []
    for entry in output.all_entries:
        rows.append({
            "title": entry.title,
            "description": entry.description,
            "link": entry.link,
            "published": entry.time_label,
            "repeat_count": str(entry.repeat_count),
            "tier": _tier_name(entry),
            "other_links": " ".join(entry.other_links),
        })
    return rows


def write_csv(output: RankedOutput, path: str) -> int:
    # Rows are built before the file is opened so the sink is replaced in one go.
    rows = result_rows(output)
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=CSV_COLUMNS)
        writer.writeheader()
        writer.writerows(rows)
    return len(rows)
