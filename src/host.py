"""Interfaces of the note-taking application hosting the extension."""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from .models import Block, Page


class DocumentHost(ABC):
    """Outline store of the host application.

    Blocks returned by these methods are snapshots; callers re-read the
    tree instead of holding on to them across mutations.
    """

    @abstractmethod
    def get_current_block(self) -> Block | None:
        """Block being edited, if any."""

    @abstractmethod
    def get_current_page(self) -> Page | None:
        """Page being viewed, if any."""

    @abstractmethod
    def prepend_block_in_page(self, page_uuid: str, content: str) -> Block:
        """Insert a top-level block at the start of a page."""

    @abstractmethod
    def insert_block(
        self,
        target_uuid: str,
        content: str,
        sibling: bool = False,
        properties: dict[str, Any] | None = None,
    ) -> Block:
        """Insert after ``target_uuid`` (sibling) or as its last child."""

    @abstractmethod
    def insert_at_cursor(self, content: str) -> Block:
        """Insert at the raw editing cursor."""

    @abstractmethod
    def update_block(self, uuid: str, content: str) -> None:
        """Replace the content of a block."""

    @abstractmethod
    def delete_block(self, uuid: str) -> None:
        """Remove a block and its subtree."""

    @abstractmethod
    def get_page_blocks_tree(self, page_name: str) -> list[Block]:
        """Full recursive block tree of a page."""


class HostUI(ABC):
    """User-facing surface of the host application."""

    @abstractmethod
    def show_msg(self, message: str, status: str = "info") -> None:
        """Show a toast; ``status`` is info, warning, error or success."""

    @abstractmethod
    def register_slash_command(self, name: str, handler: Callable[[], None]) -> None:
        """Expose ``handler`` as ``/name`` in the editor."""

    @abstractmethod
    def register_toolbar_button(
        self, key: str, label: str, handler: Callable[[], None]
    ) -> None:
        """Add a toolbar button that runs ``handler``."""

    @abstractmethod
    def prompt_for_url(self, title: str, placeholder: str) -> str | None:
        """Ask the user for a URL; ``None`` when the dialog is cancelled."""
