import sys
import os
import curses
import json
import logging
import threading
from urllib.request import urlopen, Request
from urllib.error import URLError, HTTPError

# Make ESC snappy
os.environ.setdefault("ESCDELAY", "25")

from app_controller import RootController
from config_paths import LOG_PATH, ensure_config_dirs, load_config
from keys import KeyMap
from log_setup import setup_logging
from orchestrator import Orchestrator
from task_runner import TaskRunner

try:
    from _version import __version__
except Exception:
    __version__ = "0.0.0"

log = logging.getLogger(__name__)

USAGE = (
    "sqlpeek - terminal browser for SQLite databases\n\n"
    "Usage:\n  sqlpeek [path]\n  sqlpeek -v\n  sqlpeek -h\n"
)


def _version_tuple(version: str) -> tuple[int, ...]:
    if not version:
        return (0,)
    version = version.strip()
    if version.startswith("v"):
        version = version[1:]
    parts: list[int] = []
    for segment in version.split("."):
        digits = ""
        for ch in segment:
            if ch.isdigit():
                digits += ch
            else:
                break
        if digits == "":
            break
        parts.append(int(digits))
    return tuple(parts) if parts else (0,)


def _is_version_newer(candidate: str, current: str) -> bool:
    cand_tuple = _version_tuple(candidate)
    curr_tuple = _version_tuple(current)
    # pad tuples to same length for comparison
    length = max(len(cand_tuple), len(curr_tuple))
    cand_tuple += (0,) * (length - len(cand_tuple))
    curr_tuple += (0,) * (length - len(curr_tuple))
    return cand_tuple > curr_tuple


def _parse_latest_version(data: str) -> str | None:
    try:
        payload = json.loads(data)
    except json.JSONDecodeError:
        return None
    if not isinstance(payload, dict):
        return None
    tag = payload.get("tag_name") or payload.get("name")
    if isinstance(tag, str) and tag.strip():
        return tag.strip()
    return None


def _get_latest_version(url: str, timeout: float = 5.0) -> str | None:
    try:
        request = Request(url, headers={"User-Agent": "sqlpeek-update-check"})
        with urlopen(request, timeout=timeout) as resp:
            data = resp.read().decode("utf-8", errors="replace")
    except (URLError, HTTPError, TimeoutError, ValueError, OSError) as exc:
        log.debug("update check failed: %s", exc)
        return None
    return _parse_latest_version(data)


class UpdateCheck:
    """Looks up the latest release in the background; never raises."""

    def __init__(self, url: str | None, current: str = __version__):
        self.url = url
        self.current = current
        self.latest: str | None = None
        self._thread = None

    def start(self):
        if not self.url:
            return
        self._thread = threading.Thread(target=self._run, name="update-check", daemon=True)
        self._thread.start()

    def _run(self):
        self.latest = _get_latest_version(self.url)

    def notice(self) -> str | None:
        if self.latest and _is_version_newer(self.latest, self.current):
            return f"sqlpeek {self.latest} is available (running {self.current})."
        return None


def main():
    args = sys.argv[1:]

    if "-v" in args or "-V" in args:
        print(__version__)
        return

    if "-h" in args:
        print(USAGE)
        return

    if len(args) > 1:
        print(USAGE, file=sys.stderr)
        sys.exit(2)

    path = args[0] if args else None

    ensure_config_dirs()
    cfg = load_config()
    setup_logging(LOG_PATH, cfg["LOG_LEVEL"])
    keys = KeyMap(cfg["KEYS"])

    update = UpdateCheck(cfg["UPDATE_CHECK_URL"])
    update.start()

    def curses_main(stdscr):
        controller = RootController(
            keys,
            TaskRunner(),
            initial_path=path,
            page_size=cfg["PAGE_SIZE"],
        )
        Orchestrator(stdscr, controller).run()

    curses.wrapper(curses_main)

    notice = update.notice()
    if notice:
        print(notice)


if __name__ == "__main__":
    main()
