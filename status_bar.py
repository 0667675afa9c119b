import os
import time


def render_status(context, width):
    """
    context keys: status_msg, status_until, error, file_path, view, hints
    """
    now = time.time()
    if context.get("status_msg") and now < context.get("status_until", 0):
        text = f" {context['status_msg']}"
    elif context.get("error"):
        text = f" Error: {context['error']}"
    else:
        parts = []
        fname = context.get("file_path") or ""
        if fname:
            parts.append(os.path.basename(fname))
        view = context.get("view") or ""
        if view:
            parts.append(view)
        text = " " + " | ".join(parts) if parts else ""

    hints = context.get("hints") or []
    hint_text = "  ".join(f"{key}:{label}" for key, label in hints)
    if hint_text and len(text) + len(hint_text) + 2 <= width:
        text = text.ljust(width - len(hint_text) - 1) + hint_text

    return text.ljust(width)[:width]
