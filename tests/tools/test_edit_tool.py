#!/usr/bin/env python3
"""
Unit тесты для edit_tool.py
"""

import json

import pytest

from uigen_mcp.tools.base_file_editor import FILE_TREE_ARG
from uigen_mcp.tools.edit_tool import TextEditorTool
from uigen_mcp.vfs.file_tree import FileTree


class TestEditTool:
    """Тесты для TextEditorTool"""

    @pytest.fixture
    def edit_tool(self):
        """Создает экземпляр TextEditorTool"""
        return TextEditorTool()

    @pytest.fixture
    def file_tree(self):
        """Создает дерево с двумя файлами"""
        return FileTree({
            "/App.jsx": "import Card from '@/components/Card';\nexport default function App() {}\n",
            "/components/Card.jsx": "export default function Card() {}",
        })

    async def run(self, tool, tree, **arguments):
        return await tool.execute({**arguments, FILE_TREE_ARG: tree})

    @pytest.mark.asyncio
    async def test_create_view_after_replace(self, edit_tool):
        """Сценарий: create -> str_replace -> view"""
        tree = FileTree()

        created = await self.run(edit_tool, tree, command="create", path="/App.jsx", file_text="a")
        replaced = await self.run(edit_tool, tree, command="str_replace", path="/App.jsx", old_str="a", new_str="b")
        viewed = await self.run(edit_tool, tree, command="view", path="/App.jsx")

        assert created.ok and replaced.ok and viewed.ok
        assert tree.get("/App.jsx") == "b"
        assert "     1\tb" in viewed.output

    @pytest.mark.asyncio
    async def test_create_overwrites_existing_file(self, edit_tool, file_tree):
        """create перезаписывает существующий файл"""
        result = await self.run(edit_tool, file_tree, command="create", path="/App.jsx", file_text="new")

        assert result.ok
        assert "overwritten" in result.output
        assert file_tree.get("/App.jsx") == "new"

    @pytest.mark.asyncio
    async def test_create_normalizes_path(self, edit_tool):
        tree = FileTree()

        result = await self.run(edit_tool, tree, command="create", path="components//Button.jsx", file_text="x")

        assert result.ok
        assert tree.paths() == ["/components/Button.jsx"]

    @pytest.mark.asyncio
    async def test_create_over_directory_is_conflict(self, edit_tool, file_tree):
        result = await self.run(edit_tool, file_tree, command="create", path="/components", file_text="x")

        assert result.error_kind == "conflict"
        assert file_tree.is_directory("/components")

    @pytest.mark.asyncio
    async def test_create_without_text_creates_empty_file(self, edit_tool):
        tree = FileTree()

        result = await self.run(edit_tool, tree, command="create", path="/empty.css")

        assert result.ok
        assert tree.get("/empty.css") == ""

    @pytest.mark.asyncio
    async def test_str_replace_leaves_other_files_untouched(self, edit_tool, file_tree):
        """str_replace меняет только целевой файл"""
        before = file_tree.serialize()

        result = await self.run(
            edit_tool, file_tree,
            command="str_replace", path="/components/Card.jsx",
            old_str="function Card()", new_str="function Card({ title })",
        )

        assert result.ok
        assert file_tree.get("/components/Card.jsx") == "export default function Card({ title }) {}"
        assert file_tree.get("/App.jsx") == before["/App.jsx"]
        assert "has been edited" in result.output

    @pytest.mark.asyncio
    async def test_str_replace_ambiguous_match(self, edit_tool):
        """Несколько вхождений old_str: ошибка, содержимое не меняется"""
        tree = FileTree({"/styles.css": "color: red;\nbackground: red;"})

        result = await self.run(edit_tool, tree, command="str_replace", path="/styles.css", old_str="red", new_str="blue")

        assert not result.ok
        assert result.error_kind == "ambiguous_match"
        assert "[1, 2]" in result.error
        assert tree.get("/styles.css") == "color: red;\nbackground: red;"

    @pytest.mark.asyncio
    async def test_str_replace_overlapping_matches_are_ambiguous(self, edit_tool):
        """Перекрывающиеся вхождения old_str тоже считаются неоднозначными"""
        tree = FileTree({"/App.jsx": "  }\n}\n}"})

        result = await self.run(edit_tool, tree, command="str_replace", path="/App.jsx", old_str="}\n}", new_str="}")

        assert result.error_kind == "ambiguous_match"
        assert "[1, 2]" in result.error
        assert tree.get("/App.jsx") == "  }\n}\n}"

    @pytest.mark.asyncio
    async def test_str_replace_no_match(self, edit_tool, file_tree):
        result = await self.run(edit_tool, file_tree, command="str_replace", path="/App.jsx", old_str="missing", new_str="x")

        assert result.error_kind == "no_match"
        assert "did not appear verbatim" in result.error

    @pytest.mark.asyncio
    async def test_str_replace_is_not_whitespace_tolerant(self, edit_tool):
        tree = FileTree({"/a.js": "if (x) {\n\treturn 1;\n}"})

        result = await self.run(edit_tool, tree, command="str_replace", path="/a.js", old_str="    return 1;", new_str="")

        assert result.error_kind == "no_match"

    @pytest.mark.asyncio
    async def test_str_replace_missing_file(self, edit_tool):
        result = await self.run(edit_tool, FileTree(), command="str_replace", path="/App.jsx", old_str="a", new_str="b")

        assert result.error_kind == "not_found"
        assert result.command == "str_replace"
        assert result.path == "/App.jsx"

    @pytest.mark.asyncio
    async def test_str_replace_requires_old_str(self, edit_tool, file_tree):
        result = await self.run(edit_tool, file_tree, command="str_replace", path="/App.jsx", old_str="")

        assert result.error_kind == "invalid_arguments"

    @pytest.mark.asyncio
    async def test_str_replace_without_new_str_deletes_text(self, edit_tool):
        tree = FileTree({"/a.js": "keep remove keep"})

        result = await self.run(edit_tool, tree, command="str_replace", path="/a.js", old_str=" remove")

        assert result.ok
        assert tree.get("/a.js") == "keep keep"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "insert_line, expected",
        [
            (0, "x\na\nb"),
            (1, "a\nx\nb"),
            (2, "a\nb\nx"),
        ],
    )
    async def test_insert(self, edit_tool, insert_line, expected):
        """insert вставляет строку по индексу"""
        tree = FileTree({"/a.txt": "a\nb"})

        result = await self.run(edit_tool, tree, command="insert", path="/a.txt", insert_line=insert_line, new_str="x")

        assert result.ok
        assert tree.get("/a.txt") == expected

    @pytest.mark.asyncio
    @pytest.mark.parametrize("insert_line", [-1, 3])
    async def test_insert_out_of_range(self, edit_tool, insert_line):
        tree = FileTree({"/a.txt": "a\nb"})

        result = await self.run(edit_tool, tree, command="insert", path="/a.txt", insert_line=insert_line, new_str="x")

        assert result.error_kind == "out_of_range"
        assert tree.get("/a.txt") == "a\nb"

    @pytest.mark.asyncio
    async def test_insert_accepts_numeric_string(self, edit_tool):
        tree = FileTree({"/a.txt": "a"})

        result = await self.run(edit_tool, tree, command="insert", path="/a.txt", insert_line="1", new_str="b")

        assert result.ok
        assert tree.get("/a.txt") == "a\nb"

    @pytest.mark.asyncio
    async def test_insert_missing_file(self, edit_tool):
        result = await self.run(edit_tool, FileTree(), command="insert", path="/a.txt", insert_line=0, new_str="x")

        assert result.error_kind == "not_found"

    @pytest.mark.asyncio
    async def test_view_range(self, edit_tool):
        tree = FileTree({"/a.txt": "one\ntwo\nthree\nfour"})

        result = await self.run(edit_tool, tree, command="view", path="/a.txt", view_range=[2, 3])

        assert "     2\ttwo" in result.output
        assert "     3\tthree" in result.output
        assert "one" not in result.output
        assert "four" not in result.output

    @pytest.mark.asyncio
    async def test_view_range_to_end(self, edit_tool):
        tree = FileTree({"/a.txt": "one\ntwo\nthree"})

        result = await self.run(edit_tool, tree, command="view", path="/a.txt", view_range=[2, -1])

        assert "     3\tthree" in result.output
        assert "one" not in result.output

    @pytest.mark.asyncio
    async def test_view_range_out_of_bounds(self, edit_tool):
        tree = FileTree({"/a.txt": "one"})

        result = await self.run(edit_tool, tree, command="view", path="/a.txt", view_range=[1, 5])

        assert result.error_kind == "out_of_range"

    @pytest.mark.asyncio
    async def test_view_directory_lists_children(self, edit_tool, file_tree):
        result = await self.run(edit_tool, file_tree, command="view", path="/")

        listing = json.loads(result.output)
        assert listing["count"] == 2
        assert [entry["path"] for entry in listing["files"]] == ["/components", "/App.jsx"]
        assert listing["files"][0]["type"] == "directory"

    @pytest.mark.asyncio
    async def test_view_missing_file(self, edit_tool):
        result = await self.run(edit_tool, FileTree(), command="view", path="/nope.jsx")

        assert result.error_kind == "not_found"

    @pytest.mark.asyncio
    async def test_view_truncates_long_output(self):
        tool = TextEditorTool(max_response_len=10)
        tree = FileTree({"/big.txt": "x" * 100})

        result = await tool.execute({"command": "view", "path": "/big.txt", FILE_TREE_ARG: tree})

        assert "<response clipped>" in result.output

    @pytest.mark.asyncio
    async def test_unknown_command(self, edit_tool, file_tree):
        result = await self.run(edit_tool, file_tree, command="undo_edit", path="/App.jsx")

        assert result.error_kind == "unknown_command"

    @pytest.mark.asyncio
    async def test_missing_file_tree(self, edit_tool):
        result = await edit_tool.execute({"command": "view", "path": "/App.jsx"})

        assert not result.ok
        assert "FileTree not found" in result.error
