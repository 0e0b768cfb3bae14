"""Tests for the indentation-aware line buffer."""

from glslwrap.compiler.code_block import CodeBlock


class TestCodeBlock:
    """Test suite for CodeBlock."""

    def test_nested_blocks(self):
        code = CodeBlock()
        with code.block("class A"):
            with code.block("def f(self)"):
                code.add_line("return 1")

        assert code.render() == "class A:\n    def f(self):\n        return 1\n"

    def test_empty_block_gets_pass(self):
        code = CodeBlock()
        with code.block("def f()"):
            code.add_line()

        assert code.render() == "def f():\n    pass\n"

    def test_blank_lines_are_not_doubled(self):
        code = CodeBlock()
        code.add_line("a = 1")
        code.add_line()
        code.add_line()
        code.separate(1)
        code.add_line("b = 2")

        assert code.render() == "a = 1\n\nb = 2\n"

    def test_separate(self):
        code = CodeBlock()
        code.separate(2)
        code.add_line("a = 1")
        code.add_line()
        code.separate(2)
        code.add_line("b = 2")

        assert code.lines == ["a = 1", "", "", "b = 2"]

    def test_render_strips_trailing_blank_lines(self):
        code = CodeBlock()
        code.add_lines(["a = 1", "b = 2"])
        code.separate(2)

        assert code.render() == "a = 1\nb = 2\n"
