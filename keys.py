import curses
import logging

log = logging.getLogger(__name__)


DEFAULT_BINDINGS = {
    "quit": ["q", "ctrl+c"],
    "switch_focus": ["tab"],
    "focus_right": ["right"],
    "focus_left": ["left"],
    "confirm": ["enter"],
    "open_query": ["ctrl+e"],
    "refresh": ["ctrl+r"],
    "next_page": ["]"],
    "prev_page": ["["],
    "open_filter": ["f"],
    "cancel": ["esc"],
    "scroll_up": ["up", "k"],
    "scroll_down": ["down", "j"],
    "page_up": ["pgup"],
    "page_down": ["pgdn"],
    "top": ["home", "g"],
    "bottom": ["end", "G"],
    "search": ["/"],
    "run_query": ["ctrl+r"],
}

# key shown in the status bar hints for each action
HELP_LABELS = {
    "focus_right": "←→/tab",
    "confirm": "enter",
    "open_filter": "f",
    "next_page": "[/]",
    "open_query": "ctrl+e",
    "refresh": "ctrl+r",
    "cancel": "esc",
    "quit": "q",
}

_NAMED = {
    "enter": (10, 13, curses.KEY_ENTER),
    "esc": (27,),
    "tab": (9,),
    "space": (32,),
    "backspace": (curses.KEY_BACKSPACE, 127, 8),
    "up": (curses.KEY_UP,),
    "down": (curses.KEY_DOWN,),
    "left": (curses.KEY_LEFT,),
    "right": (curses.KEY_RIGHT,),
    "pgup": (curses.KEY_PPAGE,),
    "pgdn": (curses.KEY_NPAGE,),
    "home": (curses.KEY_HOME,),
    "end": (curses.KEY_END,),
}


def key_codes(name: str) -> tuple[int, ...]:
    """Translate a key name like "ctrl+r", "esc" or "]" into getch codes."""
    if not isinstance(name, str) or not name:
        raise ValueError(f"invalid key name: {name!r}")
    lowered = name.lower()
    if lowered in _NAMED:
        return _NAMED[lowered]
    if lowered.startswith("ctrl+") and len(lowered) == 6 and lowered[5].isalpha():
        return (ord(lowered[5]) - ord("a") + 1,)
    if len(name) == 1 and 32 <= ord(name) <= 126:
        return (ord(name),)
    raise ValueError(f"invalid key name: {name!r}")


class KeyMap:
    def __init__(self, bindings=None):
        self.bindings: dict[str, list[str]] = {
            action: list(names) for action, names in DEFAULT_BINDINGS.items()
        }
        self._codes: dict[str, frozenset[int]] = {}
        for action, names in (bindings or {}).items():
            if action not in self.bindings:
                log.warning("ignoring binding for unknown action %r", action)
                continue
            self.bindings[action] = list(names)
        for action, names in self.bindings.items():
            codes = set()
            for name in names:
                try:
                    codes.update(key_codes(name))
                except ValueError:
                    log.warning("ignoring invalid key %r for %s", name, action)
            self._codes[action] = frozenset(codes)

    def matches(self, ch: int, action: str) -> bool:
        return ch in self._codes.get(action, ())

    def hint(self, action: str) -> str:
        if action in HELP_LABELS and self.bindings[action] == DEFAULT_BINDINGS[action]:
            return HELP_LABELS[action]
        names = self.bindings.get(action) or ["?"]
        return names[0]
