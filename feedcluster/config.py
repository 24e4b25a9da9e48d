import os
from typing import Any, Dict
import yaml

from .news_types import DEFAULT_THRESHOLD


def load_config(config_path: str = None) -> Dict[str, Any]:
    root = os.path.dirname(os.path.dirname(__file__))
    if config_path is None:
        config_path = os.path.join(root, "config.yaml")
        if not os.path.isfile(config_path):
            # Fall back to example to help initial run
            config_path = os.path.join(root, "config.example.yaml")
        if not os.path.isfile(config_path):
            data: Dict[str, Any] = {}
            return _apply_defaults(data)
    elif not os.path.isfile(config_path):
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping at the top level")

    return _apply_defaults(data)


def _apply_defaults(data: Dict[str, Any]) -> Dict[str, Any]:
    data.setdefault("sources", {})
    data["sources"].setdefault("rss_urls", [])

    data.setdefault("clustering", {})
    data["clustering"].setdefault("threshold", DEFAULT_THRESHOLD)
    env_threshold = os.getenv("FEEDCLUSTER_THRESHOLD")
    if env_threshold:
        try:
            data["clustering"]["threshold"] = float(env_threshold)
        except ValueError:
            raise ValueError(f"FEEDCLUSTER_THRESHOLD must be a number, got {env_threshold!r}")

    data.setdefault("filters", {})
    data["filters"].setdefault("include_keywords", [])
    data["filters"].setdefault("exclude_domains", [])

    data.setdefault("options", {})
    data["options"].setdefault("max_items", 30)
    data["options"].setdefault("fetch_timeout_sec", 15)
    data["options"].setdefault("rss_max_per_feed", 0)
    data["options"].setdefault("max_workers", 4)

    data.setdefault("render", {})
    data["render"].setdefault("tier_colors", {
        "HIGH": "#b71c1c",
        "MEDIUM": "#ef9a9a",
        "LOW": "#ffebee",
    })

    return data
