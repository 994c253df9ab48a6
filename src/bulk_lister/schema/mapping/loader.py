from functools import lru_cache
from typing import Any, Dict

import yaml
from pathlib import Path

MAPPING_DIR = Path(__file__).resolve().parent


def load_mapping(name: str) -> dict:
    p = MAPPING_DIR / f"{name.lower()}.yaml"
    if not p.exists():
        available = [x.name for x in MAPPING_DIR.glob("*.yaml")]
        raise FileNotFoundError(
            f"No mapping found for '{name}' at {p}. "
            f"Available: {available}"
        )
    return yaml.safe_load(p.read_text()) or {}


@lru_cache(maxsize=None)
def template_columns() -> Dict[str, Dict[str, Any]]:
    """Normalized template column name -> {field, default, type} rule."""
    rules = {}
    for column, rule in load_mapping("marketplace").items():
        if isinstance(rule, str):
            rule = {"field": rule}
        rules[str(column).strip().lower()] = dict(rule)
    return rules


def normalize_column(name: Any) -> str:
    if name is None:
        return ""
    return str(name).strip().lower()


def is_known_column(name: Any) -> bool:
    return normalize_column(name) in template_columns()


def field_for_column(name: Any):
    rule = template_columns().get(normalize_column(name))
    return rule["field"] if rule else None
