"""Unit tests for the in-memory outline host."""

import pytest

from src.errors import HostOperationError
from src.outline import OutlineHost

PAGE = """title:: Reading list

- [Example](https://example.com/feed.xml) <span data-rss-url="https://example.com/feed.xml">⏳ 2024-03-07</span>
\t- [A](http://a)
\t  pubDate:: Thu, 07 Mar 2024 10:00:00 GMT
\t- [B](http://b)
-
- Notes
  second line
  - nested with spaces
"""


class TestOutlineHostUnit:
    """Unit tests for OutlineHost."""

    def test_markdown_round_trip(self):
        host = OutlineHost()
        host.load_markdown("Reading", PAGE)

        tree = host.get_page_blocks_tree("Reading")

        assert len(tree) == 3
        feed, empty, notes = tree
        assert feed.content.startswith("[Example](")
        assert [c.content for c in feed.children] == ["[A](http://a)", "[B](http://b)"]
        assert feed.children[0].properties == {"pubDate": "Thu, 07 Mar 2024 10:00:00 GMT"}
        assert empty.content == ""
        assert notes.content == "Notes\nsecond line"
        assert notes.children[0].content == "nested with spaces"

        rendered = host.dump_markdown("Reading")
        assert rendered.startswith("title:: Reading list\n")
        assert "\t- [A](http://a)\n\t  pubDate:: Thu, 07 Mar 2024 10:00:00 GMT\n" in rendered

        reloaded = OutlineHost()
        reloaded.load_markdown("Reading", rendered)
        assert [b.content for b in reloaded.get_page_blocks_tree("Reading")] == [
            b.content for b in tree
        ]

    def test_insert_sibling_and_child(self):
        host = OutlineHost()
        page = host.open_page("Feeds")
        first = host.prepend_block_in_page(page.uuid, "first")
        last = host.insert_block(first.uuid, "last", sibling=True)
        middle = host.insert_block(first.uuid, "between", sibling=True)
        child_a = host.insert_block(first.uuid, "child a", properties={"k": "v"})
        host.insert_block(first.uuid, "child b")

        tree = host.get_page_blocks_tree("Feeds")

        assert [b.uuid for b in tree] == [first.uuid, middle.uuid, last.uuid]
        assert [c.content for c in tree[0].children] == ["child a", "child b"]
        assert tree[0].children[0].uuid == child_a.uuid
        assert tree[0].children[0].properties == {"k": "v"}

    def test_tree_is_a_snapshot(self):
        host = OutlineHost()
        page = host.open_page("Feeds")
        block = host.prepend_block_in_page(page.uuid, "original")

        snapshot = host.get_page_blocks_tree("Feeds")
        snapshot[0].content = "changed"
        host.update_block(block.uuid, "updated")

        assert snapshot[0].content == "changed"
        assert host.get_page_blocks_tree("Feeds")[0].content == "updated"

    def test_delete_removes_subtree(self):
        host = OutlineHost()
        page = host.open_page("Feeds")
        root = host.prepend_block_in_page(page.uuid, "root")
        child = host.insert_block(root.uuid, "child")

        host.delete_block(root.uuid)

        assert host.get_page_blocks_tree("Feeds") == []
        with pytest.raises(HostOperationError):
            host.update_block(child.uuid, "gone")

    def test_current_block_and_page(self):
        host = OutlineHost()
        assert host.get_current_page() is None
        assert host.get_current_block() is None

        page = host.open_page("Feeds")
        block = host.prepend_block_in_page(page.uuid, "editing")
        host.open_page("Feeds", block.uuid)

        assert host.get_current_page().name == "Feeds"
        assert host.get_current_block().uuid == block.uuid

        host.close_page()
        assert host.get_current_page() is None

    def test_insert_at_cursor(self):
        host = OutlineHost()
        with pytest.raises(HostOperationError):
            host.insert_at_cursor("nowhere")

        host.open_page("Feeds")
        host.insert_at_cursor("one")
        host.insert_at_cursor("two")

        assert [b.content for b in host.get_page_blocks_tree("Feeds")] == ["one", "two"]

    def test_unknown_targets_raise(self):
        host = OutlineHost()
        with pytest.raises(HostOperationError):
            host.insert_block("missing", "text")
        with pytest.raises(HostOperationError):
            host.delete_block("missing")
        with pytest.raises(HostOperationError):
            host.prepend_block_in_page("missing", "text")
        with pytest.raises(HostOperationError):
            host.get_page_blocks_tree("Missing")
