"""Session configuration: colours, layout dimensions and key bindings."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, fields, replace
from pathlib import Path

logger = logging.getLogger(__name__)

GLOBAL_CONFIG = Path.home() / ".md84.json"


@dataclass(frozen=True)
class Theme:
    header_color: str = "#00afff"
    modal_border: str = "#5f5fff"
    modal_background: str = "#262626"
    menu_background: str = "#303030"
    menu_foreground: str = "#d0d0d0"
    code_theme: str = "monokai"


@dataclass(frozen=True)
class Layout:
    modal_width: int = 60
    modal_height: int = 20
    editor_width: int = 80
    editor_height: int = 20
    menu_rows: int = 2  # given to the editor while the menu is hidden
    query_width: int = 50


@dataclass(frozen=True)
class KeyMap:
    """Textual key names bound to each editor action.

    ``ctrl+i`` and ``ctrl+m`` arrive as ``tab`` and ``enter`` on most
    terminals, so italic and inline code default to ``ctrl+e`` and ``ctrl+g``.
    """

    help: str = "f1"
    save: str = "f2"
    search: str = "f3"
    menu: str = "f4"
    preview: str = "f5"
    quit: tuple[str, ...] = ("escape", "f10")
    cancel: str = "escape"
    commit: str = "enter"
    header: str = "ctrl+h"
    list_item: str = "ctrl+l"
    bold: str = "ctrl+b"
    italic: str = "ctrl+e"
    link: str = "ctrl+k"
    code: str = "ctrl+g"


@dataclass(frozen=True)
class EditorConfig:
    theme: Theme = field(default_factory=Theme)
    layout: Layout = field(default_factory=Layout)
    keys: KeyMap = field(default_factory=KeyMap)
    placeholder: str = "Start typing your Markdown..."
    search_char_limit: int = 80
    menu_visible: bool = True


def _overlay(base, section: object, name: str):
    """Return *base* with the matching keys of *section* replaced."""
    if not isinstance(section, dict):
        logger.warning("config section %r is not an object; ignored", name)
        return base
    known = {f.name: f for f in fields(base)}
    changes = {}
    for key, value in section.items():
        if key not in known:
            logger.warning("unknown config key %s.%s", name, key)
            continue
        current = getattr(base, key)
        if isinstance(current, tuple):
            value = (value,) if isinstance(value, str) else value
            if not isinstance(value, list | tuple) or not all(
                isinstance(v, str) for v in value
            ):
                logger.warning("config key %s.%s must be a list of keys", name, key)
                continue
            value = tuple(value)
        elif type(value) is not type(current):
            logger.warning(
                "config key %s.%s must be %s", name, key, type(current).__name__
            )
            continue
        changes[key] = value
    return replace(base, **changes)


def config_from_dict(payload: dict) -> EditorConfig:
    """Build an EditorConfig from parsed JSON, keeping defaults for the rest."""
    config = EditorConfig()
    sections = {
        "theme": config.theme,
        "layout": config.layout,
        "keys": config.keys,
    }
    updated = {}
    scalars = {}
    for key, value in payload.items():
        if key in sections:
            updated[key] = _overlay(sections[key], value, key)
        else:
            scalars[key] = value
    config = replace(config, **updated)
    return _overlay(config, scalars, "config") if scalars else config


def load_config(path: Path | str | None = None) -> EditorConfig:
    """Load configuration from *path* (default ``~/.md84.json``).

    A missing or unreadable file yields the defaults.
    """
    target = Path(path) if path else GLOBAL_CONFIG
    if not target.exists():
        if path:
            logger.warning("config file %s not found; using defaults", target)
        return EditorConfig()
    try:
        payload = json.loads(target.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning("cannot read config %s: %s", target, exc)
        return EditorConfig()
    if not isinstance(payload, dict):
        logger.warning("config %s is not a JSON object; using defaults", target)
        return EditorConfig()
    return config_from_dict(payload)
