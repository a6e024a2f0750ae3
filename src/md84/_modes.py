"""Mode state machine routing keys between the buffer, overlays and search."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from md84.config import KeyMap


class EditorMode(Enum):
    NORMAL = auto()
    PREVIEW = auto()
    HELP = auto()
    SEARCH = auto()


class Action(Enum):
    """Side effect the editor performs after a key was routed."""

    NONE = auto()  # key swallowed
    PASSTHROUGH = auto()  # ordinary typing / navigation
    QUERY_INPUT = auto()  # key belongs to the search field
    QUIT = auto()
    SAVE_AND_QUIT = auto()
    TOGGLE_MENU = auto()
    OPEN_HELP = auto()
    CLOSE_HELP = auto()
    OPEN_PREVIEW = auto()
    CLOSE_PREVIEW = auto()
    OPEN_SEARCH = auto()
    CANCEL_SEARCH = auto()
    COMMIT_SEARCH = auto()
    HEADER = auto()
    LIST_ITEM = auto()
    BOLD = auto()
    ITALIC = auto()
    LINK = auto()
    CODE = auto()


@dataclass(frozen=True)
class Transition:
    mode: EditorMode
    action: Action


class ModeMachine:
    """Explicit state machine with one key handler per mode.

    ``feed`` returns the next mode together with the action to perform and
    makes the new mode current.
    """

    def __init__(self, keys: KeyMap | None = None) -> None:
        self.keys = keys or KeyMap()
        self.mode = EditorMode.NORMAL
        self._handlers = {
            EditorMode.NORMAL: self._on_normal,
            EditorMode.PREVIEW: self._on_preview,
            EditorMode.HELP: self._on_help,
            EditorMode.SEARCH: self._on_search,
        }
        k = self.keys
        self._normal_actions: dict[str, Transition] = {
            k.help: Transition(EditorMode.HELP, Action.OPEN_HELP),
            k.save: Transition(EditorMode.NORMAL, Action.SAVE_AND_QUIT),
            k.search: Transition(EditorMode.SEARCH, Action.OPEN_SEARCH),
            k.menu: Transition(EditorMode.NORMAL, Action.TOGGLE_MENU),
            k.preview: Transition(EditorMode.PREVIEW, Action.OPEN_PREVIEW),
            k.header: Transition(EditorMode.NORMAL, Action.HEADER),
            k.list_item: Transition(EditorMode.NORMAL, Action.LIST_ITEM),
            k.bold: Transition(EditorMode.NORMAL, Action.BOLD),
            k.italic: Transition(EditorMode.NORMAL, Action.ITALIC),
            k.link: Transition(EditorMode.NORMAL, Action.LINK),
            k.code: Transition(EditorMode.NORMAL, Action.CODE),
        }
        for key in k.quit:
            self._normal_actions[key] = Transition(EditorMode.NORMAL, Action.QUIT)

    def feed(self, key: str) -> Transition:
        transition = self._handlers[self.mode](key)
        self.mode = transition.mode
        return transition

    def accepts_pointer(self) -> bool:
        return self.mode is EditorMode.NORMAL

    # -- Per-mode handlers -------------------------------------------------

    def _on_normal(self, key: str) -> Transition:
        return self._normal_actions.get(
            key, Transition(EditorMode.NORMAL, Action.PASSTHROUGH)
        )

    def _on_help(self, key: str) -> Transition:
        if key in (self.keys.help, self.keys.cancel):
            return Transition(EditorMode.NORMAL, Action.CLOSE_HELP)
        return Transition(EditorMode.HELP, Action.NONE)

    def _on_preview(self, key: str) -> Transition:
        if key in (self.keys.preview, self.keys.cancel):
            return Transition(EditorMode.NORMAL, Action.CLOSE_PREVIEW)
        return Transition(EditorMode.PREVIEW, Action.NONE)

    def _on_search(self, key: str) -> Transition:
        if key == self.keys.cancel:
            return Transition(EditorMode.NORMAL, Action.CANCEL_SEARCH)
        if key == self.keys.commit:
            return Transition(EditorMode.NORMAL, Action.COMMIT_SEARCH)
        return Transition(EditorMode.SEARCH, Action.QUERY_INPUT)
