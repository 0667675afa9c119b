import os


class FileTypeHandler:
    EXTENSIONS = (".db", ".sqlite", ".sqlite3")

    def __init__(self, path: str):
        self.path = path
        _, ext = os.path.splitext(path)
        self.ext = ext.lower()

    @classmethod
    def is_supported_name(cls, name: str) -> bool:
        return os.path.splitext(name)[1].lower() in cls.EXTENSIONS

    def validate(self) -> str | None:
        """Return an error message if the path cannot be opened, else None."""
        if not os.path.exists(self.path):
            return f"file not found: {self.path}"
        if os.path.isdir(self.path):
            return f"path is a directory, not a file: {self.path}"
        if self.ext not in self.EXTENSIONS:
            expected = ", ".join(self.EXTENSIONS[:-1]) + f", or {self.EXTENSIONS[-1]}"
            shown = self.ext or "(none)"
            return f"unsupported file extension {shown} (expected {expected})"
        return None

    @classmethod
    def discover(cls, directory: str = ".") -> list[str]:
        try:
            names = os.listdir(directory)
        except OSError:
            return []
        found = []
        for name in names:
            if os.path.isdir(os.path.join(directory, name)):
                continue
            if cls.is_supported_name(name):
                found.append(name if directory in ("", ".") else os.path.join(directory, name))
        return sorted(found)
