class Paginator:
    def __init__(self, total_rows: int = 0, page_size: int = 100):
        self.page_size = max(1, page_size)
        self.page_index = 0
        self.total_rows = max(0, total_rows)
        self._clamp()

    def _clamp(self):
        max_page = self.page_count - 1
        self.page_index = max(0, min(self.page_index, max_page))

    def update_total_rows(self, total_rows: int):
        self.total_rows = max(0, total_rows)
        self._clamp()

    def set_page(self, index: int):
        self.page_index = index
        self._clamp()

    def set_page_size(self, page_size: int) -> int:
        """Change the page size, keeping the first row of the page in view."""
        first = self.page_start
        self.page_size = max(1, page_size)
        self.page_index = first // self.page_size
        self._clamp()
        return self.page_index

    def has_next(self, index: int | None = None) -> bool:
        idx = self.page_index if index is None else index
        return idx + 1 < self.page_count

    def has_prev(self, index: int | None = None) -> bool:
        idx = self.page_index if index is None else index
        return idx > 0

    @property
    def page_start(self) -> int:
        return self.page_index * self.page_size

    @property
    def page_count(self) -> int:
        if self.total_rows == 0:
            return 1
        return (self.total_rows - 1) // self.page_size + 1
