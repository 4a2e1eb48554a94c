"""Image gallery navigation state for the property detail view."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass
class GalleryState:
    """Selected image index shared by the inline gallery and the lightbox."""

    image_count: int
    index: int = 0
    lightbox_open: bool = False

    def __post_init__(self) -> None:
        if self.image_count < 1:
            raise ValueError("A gallery needs at least one image")
        if not 0 <= self.index < self.image_count:
            self.index = 0

    @property
    def position(self) -> str:
        """Human-readable counter such as ``3 / 6``."""

        return f"{self.index + 1} / {self.image_count}"

    def next(self) -> int:
        self.index = 0 if self.index == self.image_count - 1 else self.index + 1
        return self.index

    def previous(self) -> int:
        self.index = self.image_count - 1 if self.index == 0 else self.index - 1
        return self.index

    def peek_next(self) -> int:
        return (self.index + 1) % self.image_count

    def peek_previous(self) -> int:
        return (self.index - 1) % self.image_count

    def select(self, index: int) -> int:
        """Jump to a thumbnail; out-of-range indexes are ignored."""

        if 0 <= index < self.image_count:
            self.index = index
        return self.index

    def open_lightbox(self) -> None:
        self.lightbox_open = True

    def close_lightbox(self) -> None:
        self.lightbox_open = False

    def handle_key(self, key: str) -> None:
        """Apply the arrow/escape keyboard shortcuts."""

        if key == "ArrowRight":
            self.next()
        elif key == "ArrowLeft":
            self.previous()
        elif key == "Escape":
            self.close_lightbox()
