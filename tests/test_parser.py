"""Tests for the recursive descent parser and the AST it produces."""

import pytest

from pseudotex import parse
from pseudotex.errors import ErrorKind, LexicalError, ParseError
from pseudotex.nodes import (
    Algorithm,
    Algorithmic,
    Block,
    Bool,
    Call,
    Caption,
    Command,
    Comment,
    Font,
    Function,
    If,
    Loop,
    Math,
    Ordinary,
    Size,
    Special,
    Text,
)


def _algorithmic(body: str) -> str:
    return "\\begin{algorithmic} " + body + " \\end{algorithmic}"


def _block(body: str) -> Block:
    """Parse ``body`` inside one algorithmic environment and return its block."""
    root = parse(_algorithmic(body))
    (env,) = root.children
    assert isinstance(env, Algorithmic)
    (block,) = env.children
    assert isinstance(block, Block)
    return block


class TestEnvironments:
    """Top-level and nested environment structure."""

    def test_empty_source(self) -> None:
        assert parse("").children == ()
        assert parse("  \n ").children == ()

    def test_environment_count(self) -> None:
        source = (
            "\\begin{algorithm}\\end{algorithm}\n"
            "\\begin{algorithmic}\\end{algorithmic}\n"
            "\\begin{algorithmic}\\STATE x\\end{algorithmic}"
        )
        root = parse(source)
        assert len(root.children) == 3
        assert [c.node_type for c in root.children] == ["algorithm", "algorithmic", "algorithmic"]

    def test_algorithm_with_caption_and_algorithmic(self) -> None:
        source = (
            "\\begin{algorithm}\n"
            "\\caption{Quicksort}\n"
            "\\begin{algorithmic}\n"
            "\\STATE x\n"
            "\\end{algorithmic}\n"
            "\\end{algorithm}"
        )
        (algorithm,) = parse(source).children
        assert isinstance(algorithm, Algorithm)
        assert isinstance(algorithm.children[0], Caption)
        assert isinstance(algorithm.children[1], Algorithmic)
        assert algorithm.caption is not None
        assert algorithm.caption.text.plain == "Quicksort"

    def test_last_caption_wins(self) -> None:
        (algorithm,) = parse("\\begin{algorithm}\\caption{A}\\caption{B}\\end{algorithm}").children
        assert algorithm.caption is not None
        assert algorithm.caption.text.plain == "B"

    def test_preconditions_before_block(self) -> None:
        root = parse(_algorithmic("\\REQUIRE $n \\geq 0$ \\ENSURE $y = x^n$ \\STATE y"))
        env = root.children[0]
        assert [type(c) for c in env.children] == [Command, Command, Block]
        assert env.children[0].name == "REQUIRE"
        assert env.children[1].name == "ENSURE"
        (math,) = env.children[0].text.children
        assert isinstance(math, Math)
        assert math.source == "n \\geq 0"

    def test_mismatched_environment_names(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            parse("\\begin{algorithm}\\end{algorithmic}")
        assert exc_info.value.message == "Expected `algorithm` but received `algorithmic`"

    def test_nested_algorithmic_closes_with_its_own_name(self) -> None:
        source = "\\begin{algorithm}\\begin{algorithmic}\\end{algorithmic}\\end{algorithm}"
        (algorithm,) = parse(source).children
        assert isinstance(algorithm.children[0], Algorithmic)

    def test_unknown_environment(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            parse("\\begin{figure}\\end{figure}")
        assert exc_info.value.message == "Unexpected environment `figure`"
        assert exc_info.value.offset == 0

    def test_unknown_environment_inside_algorithm(self) -> None:
        source = "\\begin{algorithm}\\begin{algorithm}\\end{algorithm}\\end{algorithm}"
        with pytest.raises(ParseError) as exc_info:
            parse(source)
        assert "inside algorithm" in exc_info.value.message
        assert exc_info.value.offset == len("\\begin{algorithm}")

    def test_trailing_content_after_environments(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            parse("\\begin{algorithmic}\\end{algorithmic} extra")
        assert exc_info.value.message == "Expected a symbol of type EOF but received ORDINARY"

    def test_stray_text_in_algorithmic(self) -> None:
        with pytest.raises(ParseError):
            parse(_algorithmic("stray"))


class TestConditionals:
    """IF / ELIF / ELSE branch structure."""

    def test_simple_if(self) -> None:
        block = _block("\\IF{$x>0$} \\STATE{positive} \\ENDIF")
        (node,) = block.children
        assert isinstance(node, If)
        assert node.num_elif == 0
        assert node.has_else is False
        assert node.else_body is None

        cond = node.branches[0].cond
        assert len(cond.children) == 1
        assert isinstance(cond.children[0], Math)
        assert cond.children[0].source == "x>0"

        body = node.branches[0].body
        assert body is not None
        (command,) = body.children
        assert isinstance(command, Command)
        assert command.name == "STATE"
        assert command.text.plain == "positive"

    def test_elif_chain_with_else(self) -> None:
        block = _block(
            "\\IF{a} \\STATE x \\ELIF{b} \\STATE y \\ELIF{c} \\STATE z \\ELSE \\STATE w \\ENDIF"
        )
        (node,) = block.children
        assert node.num_elif == 2
        assert node.has_else is True
        assert [b.cond.plain for b in node.branches] == ["a", "b", "c"]
        assert [b.body.children[0].text.plain for b in node.branches] == ["x ", "y ", "z "]
        assert node.else_body is not None
        assert node.else_body.children[0].text.plain == "w "

    def test_empty_bodies(self) -> None:
        (node,) = _block("\\IF{a} \\ELIF{b} \\ELSE \\ENDIF").children
        assert node.branches[0].body is None
        assert node.branches[1].body is None
        assert node.has_else is True
        assert node.else_body is None

    def test_missing_endif(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            parse(_algorithmic("\\IF{a} \\STATE x"))
        assert exc_info.value.message == "Expected `ENDIF` but received `end`"

    def test_missing_condition_braces(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            parse(_algorithmic("\\IF a \\ENDIF"))
        assert exc_info.value.message == "Expected a symbol of type OPEN but received ORDINARY"


class TestLoopsAndFunctions:
    """FOR / WHILE loops and FUNCTION / PROCEDURE definitions."""

    @pytest.mark.parametrize("keyword", ["FOR", "WHILE"])
    def test_loop(self, keyword: str) -> None:
        (node,) = _block(f"\\{keyword}{{$i < n$}} \\STATE x \\END{keyword}").children
        assert isinstance(node, Loop)
        assert node.keyword == keyword
        assert node.cond.children[0].source == "i < n"
        assert node.body is not None

    def test_for_closed_by_endwhile(self) -> None:
        source = _algorithmic("\\FOR{i} \\STATE x \\ENDWHILE")
        with pytest.raises(ParseError) as exc_info:
            parse(source)
        err = exc_info.value
        assert "ENDFOR" in err.message
        assert err.kind is ErrorKind.SYNTACTIC
        assert err.offset == source.index("\\ENDWHILE")

    def test_stray_end_keyword(self) -> None:
        source = _algorithmic("\\STATE a \\ENDWHILE")
        with pytest.raises(ParseError) as exc_info:
            parse(source)
        assert exc_info.value.message == "Expected `end` but received `ENDWHILE`"
        assert exc_info.value.offset == source.index("\\ENDWHILE")

    def test_function(self) -> None:
        (node,) = _block("\\FUNCTION{Sum}{$a, b$} \\RETURN $a+b$ \\ENDFUNCTION").children
        assert isinstance(node, Function)
        assert node.kind == "FUNCTION"
        assert node.name == "Sum"
        assert node.params.children[0].source == "a, b"
        (ret,) = node.body.children
        assert ret.name == "RETURN"

    def test_procedure_with_empty_params_and_body(self) -> None:
        (node,) = _block("\\PROCEDURE{Init}{} \\ENDPROCEDURE").children
        assert node.kind == "PROCEDURE"
        assert node.params.children == ()
        assert node.body is None

    def test_procedure_closed_by_endfunction(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            parse(_algorithmic("\\PROCEDURE{P}{} \\ENDFUNCTION"))
        assert exc_info.value.message == "Expected `ENDPROCEDURE` but received `ENDFUNCTION`"

    def test_nested_control(self) -> None:
        (outer,) = _block("\\WHILE{a} \\IF{b} \\STATE x \\ENDIF \\ENDWHILE").children
        (inner,) = outer.body.children
        assert isinstance(inner, If)


class TestStatements:
    """Commands, comments and calls."""

    @pytest.mark.parametrize("name", ["STATE", "PRINT", "RETURN"])
    def test_statement_commands(self, name: str) -> None:
        (node,) = _block(f"\\{name} value").children
        assert isinstance(node, Command)
        assert node.name == name
        assert node.text.plain == "value "

    def test_command_with_empty_text(self) -> None:
        (node,) = _block("\\STATE").children
        assert node.text.children == ()

    def test_call_is_a_block_statement(self) -> None:
        block = _block("\\STATE \\CALL{Sort}{$A$}")
        assert [type(c) for c in block.children] == [Command, Call]
        call = block.children[1]
        assert call.name == "Sort"
        assert call.args.children[0].source == "A"

    def test_comment_after_statement(self) -> None:
        block = _block("\\STATE x \\COMMENT{note}")
        assert [type(c) for c in block.children] == [Command, Comment]
        assert block.children[1].text.plain == "note"

    def test_require_inside_block_is_rejected(self) -> None:
        with pytest.raises(ParseError):
            parse(_algorithmic("\\IF{a} \\REQUIRE x \\ENDIF"))


class TestText:
    """Text symbols and brace groups."""

    def test_symbol_kinds(self) -> None:
        (command,) = _block("\\STATE \\TRUE \\AND \\NOT \\large x \\bf y \\$ $z$").children
        children = command.text.children
        assert [type(c) for c in children] == [
            Bool,
            Bool,
            Bool,
            Size,
            Ordinary,
            Font,
            Ordinary,
            Special,
            Math,
        ]
        assert children[0].keyword == "TRUE"
        assert children[3].name == "large"
        assert children[5].name == "bf"
        assert children[7].escape == "\\$"
        assert children[8].source == "z"

    def test_brace_groups_nest(self) -> None:
        (command,) = _block("\\STATE a {b {c}} d").children
        text = command.text
        assert isinstance(text.children[1], Text)
        assert isinstance(text.children[1].children[1], Text)
        assert text.plain == "a b cd "

    def test_plain_text_of_specials(self) -> None:
        (command,) = _block("\\STATE a\\_b \\\\ c").children
        assert command.text.plain == "a_b \nc "

    def test_unbalanced_brace(self) -> None:
        with pytest.raises(ParseError):
            parse(_algorithmic("\\STATE {x"))

    def test_unknown_command_ends_text(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            parse(_algorithmic("\\STATE x \\frac{1}{2}"))
        assert exc_info.value.message == "Expected `end` but received `frac`"


class TestLocations:
    """Every node records where it came from."""

    def test_if_location(self) -> None:
        source = "\\begin{algorithmic}\n  \\IF{a}\n  \\ENDIF\n\\end{algorithmic}"
        (node,) = parse(source).children[0].children[0].children
        assert node.location.lineno == 2
        assert node.location.col_offset == 3
        assert node.location.offset == source.index("\\IF")
        assert node.location.end_offset == source.index("\\ENDIF") + len("\\ENDIF")

    def test_math_location(self) -> None:
        source = _algorithmic("\\STATE $x$")
        (command,) = parse(source).children[0].children[0].children
        math = command.text.children[0]
        assert math.location.offset == source.index("$x$")
        assert math.location.end_offset == source.index("$x$") + 3


class TestLexicalErrorsThroughParser:
    """Lexical failures propagate unchanged."""

    def test_percent_sign(self) -> None:
        source = _algorithmic("\\STATE 50% done")
        with pytest.raises(LexicalError) as exc_info:
            parse(source)
        assert exc_info.value.offset == source.index("%")

    def test_unterminated_math(self) -> None:
        source = _algorithmic("\\STATE $x")
        with pytest.raises(LexicalError) as exc_info:
            parse(source)
        assert exc_info.value.offset == source.index("$")


class TestMismatchedNames:
    """Both directions of an algorithm/algorithmic mix-up fail."""

    def test_algorithmic_closed_as_algorithm(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            parse("\\begin{algorithmic} \\STATE x \\end{algorithm}")
        assert exc_info.value.message == "Expected `algorithmic` but received `algorithm`"
