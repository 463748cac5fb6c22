"""In-memory outline document implementing the host interface.

Pages are stored as trees of blocks and can be read from and written to
Logseq-style markdown::

    - [Example Feed](https://example.com/feed.xml) <span data-rss-url="...">⏳ 2024-03-07</span>
    	- [First entry](https://example.com/1)
    	  pubDate:: Thu, 07 Mar 2024 10:00:00 GMT
    -
"""

import copy
import re
import uuid
from typing import Any

from .errors import HostOperationError
from .host import DocumentHost
from .logging_config import create_execution_logger
from .models import Block, Page

_BULLET = re.compile(r"^(?P<indent>[\t ]*)-(?: (?P<content>.*))?$")
_PROPERTY = re.compile(r"^(?P<key>[A-Za-z][\w-]*):: ?(?P<value>.*)$")


class OutlineHost(DocumentHost):
    """Block store held in memory, one block tree per page."""

    def __init__(self, execution_id: str | None = None):
        self.pages: dict[str, Page] = {}
        self.preambles: dict[str, list[str]] = {}
        self._trees: dict[str, list[Block]] = {}
        self.current_page_name: str | None = None
        self.current_block_uuid: str | None = None
        self.cursor_enabled = True
        self.logger = create_execution_logger("outline", execution_id)

    # Page management

    def add_page(self, name: str) -> Page:
        """Create an empty page, or return the existing one."""
        if name not in self.pages:
            self.pages[name] = Page(uuid=str(uuid.uuid4()), name=name)
            self._trees[name] = []
            self.preambles[name] = []
        return self.pages[name]

    def open_page(self, name: str, block_uuid: str | None = None) -> Page:
        """Make ``name`` the current page, optionally editing one of its blocks."""
        page = self.add_page(name)
        if block_uuid is not None:
            self._locate(block_uuid)
        self.current_page_name = name
        self.current_block_uuid = block_uuid
        return page

    def close_page(self) -> None:
        self.current_page_name = None
        self.current_block_uuid = None

    # DocumentHost

    def get_current_block(self) -> Block | None:
        if self.current_block_uuid is None:
            return None
        block, _ = self._locate(self.current_block_uuid)
        return copy.deepcopy(block)

    def get_current_page(self) -> Page | None:
        if self.current_page_name is None:
            return None
        return copy.copy(self.pages[self.current_page_name])

    def prepend_block_in_page(self, page_uuid: str, content: str) -> Block:
        page = self._page_by_uuid(page_uuid)
        block = self._new_block(content, page.name)
        self._trees[page.name].insert(0, block)
        return copy.deepcopy(block)

    def insert_block(
        self,
        target_uuid: str,
        content: str,
        sibling: bool = False,
        properties: dict[str, Any] | None = None,
    ) -> Block:
        target, siblings = self._locate(target_uuid)
        block = self._new_block(content, target.page, properties)
        if sibling:
            siblings.insert(_index_of(siblings, target_uuid) + 1, block)
        else:
            target.children.append(block)
        return copy.deepcopy(block)

    def insert_at_cursor(self, content: str) -> Block:
        if not self.cursor_enabled:
            raise HostOperationError("No editing cursor")
        if self.current_block_uuid is not None:
            return self.insert_block(self.current_block_uuid, content, sibling=True)
        if self.current_page_name is not None:
            block = self._new_block(content, self.current_page_name)
            self._trees[self.current_page_name].append(block)
            return copy.deepcopy(block)
        raise HostOperationError("No editing cursor")

    def update_block(self, uuid: str, content: str) -> None:
        block, _ = self._locate(uuid)
        block.content = content

    def delete_block(self, uuid: str) -> None:
        _, siblings = self._locate(uuid)
        del siblings[_index_of(siblings, uuid)]
        if self.current_block_uuid == uuid:
            self.current_block_uuid = None

    def get_page_blocks_tree(self, page_name: str) -> list[Block]:
        if page_name not in self._trees:
            raise HostOperationError(f"Page not found: {page_name}")
        return copy.deepcopy(self._trees[page_name])

    # Markdown

    def load_markdown(self, page_name: str, text: str) -> Page:
        """Replace a page's blocks with the outline in ``text``."""
        page = self.add_page(page_name)
        roots: list[Block] = []
        preamble: list[str] = []
        # (depth, block) of the current ancestry chain
        stack: list[tuple[int, Block]] = []

        for line in text.splitlines():
            bullet = _BULLET.match(line)
            if bullet:
                depth = _depth(bullet.group("indent"))
                block = self._new_block((bullet.group("content") or "").rstrip(), page_name)
                while stack and stack[-1][0] >= depth:
                    stack.pop()
                (stack[-1][1].children if stack else roots).append(block)
                stack.append((depth, block))
                continue

            if not stack:
                preamble.append(line)
                continue

            body = line.strip()
            block = stack[-1][1]
            prop = _PROPERTY.match(body)
            if prop:
                block.properties[prop.group("key")] = prop.group("value").strip()
            elif body:
                block.content = f"{block.content}\n{body}" if block.content else body

        self._trees[page_name] = roots
        self.preambles[page_name] = preamble
        self.logger.debug(
            "Loaded page from markdown", page=page_name, block_count=len(roots)
        )
        return page

    def dump_markdown(self, page_name: str) -> str:
        """Render a page as a markdown outline."""
        lines = list(self.preambles.get(page_name, []))
        for block in self._trees.get(page_name, []):
            _render(block, 0, lines)
        return "\n".join(lines) + "\n"

    # Internals

    def _new_block(
        self, content: str, page_name: str | None, properties: dict | None = None
    ) -> Block:
        return Block(
            uuid=str(uuid.uuid4()),
            content=content,
            properties=dict(properties or {}),
            page=page_name,
        )

    def _page_by_uuid(self, page_uuid: str) -> Page:
        for page in self.pages.values():
            if page.uuid == page_uuid:
                return page
        raise HostOperationError(f"Page not found: {page_uuid}")

    def _locate(self, block_uuid: str) -> tuple[Block, list[Block]]:
        """Find a block and the list that holds it."""
        for roots in self._trees.values():
            found = _search(roots, block_uuid)
            if found:
                return found
        raise HostOperationError(f"Block not found: {block_uuid}")


def _search(blocks: list[Block], block_uuid: str) -> tuple[Block, list[Block]] | None:
    for block in blocks:
        if block.uuid == block_uuid:
            return block, blocks
        found = _search(block.children, block_uuid)
        if found:
            return found
    return None


def _index_of(blocks: list[Block], block_uuid: str) -> int:
    return next(i for i, block in enumerate(blocks) if block.uuid == block_uuid)


def _depth(indent: str) -> int:
    return indent.count("\t") + indent.count(" ") // 2


def _render(block: Block, depth: int, lines: list[str]) -> None:
    indent = "\t" * depth
    first, *rest = (block.content or "").split("\n")
    lines.append(f"{indent}- {first}".rstrip())
    for extra in rest:
        lines.append(f"{indent}  {extra}")
    for key, value in block.properties.items():
        if value is not None:
            lines.append(f"{indent}  {key}:: {value}")
    for child in block.children:
        _render(child, depth + 1, lines)
