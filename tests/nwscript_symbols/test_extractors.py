"""Tests for the engine structure, function and constant extractors."""

import dataclasses
import re

import pytest

from nwscript_symbols.extractors import (
    extract_constants,
    extract_engine_structures,
    extract_functions,
    extract_parameters,
)
from nwscript_symbols.grammar import Grammar, get_grammar


class TestEngineStructureExtraction:
    """Test extraction of engine structure declarations."""

    def test_extracts_engine_structures(self, sample_script: str) -> None:
        """Test that every ENGINE_STRUCTURE define is captured in order."""
        structures = extract_engine_structures(sample_script)

        assert [s["name"] for s in structures] == ["effect", "event"]

    def test_ignores_other_defines(self) -> None:
        """Test that only ENGINE_STRUCTURE defines are engine structures."""
        text = (
            "#define OTHER_MACRO 1\n"
            "   #define ENGINE_STRUCTURE_12 talent\n"
            "#define ENGINE_STRUCTURE location\n"
        )

        structures = extract_engine_structures(text)

        assert [s["name"] for s in structures] == ["talent"]


class TestFunctionExtraction:
    """Test extraction of function prototypes."""

    def test_extracts_prototypes(self, sample_script: str) -> None:
        """Test that prototypes are captured with type and raw parameters."""
        functions = extract_functions(sample_script)

        assert [(f["type"], f["name"]) for f in functions] == [
            ("object", "GetFirstPC"),
            ("void", "ApplyEffect"),
            ("vector", "Vec"),
        ]
        assert functions[0]["parameters_string"] == "int bExploreMode = TRUE"

    def test_parameters_keep_declaration_order(self, sample_script: str) -> None:
        """Test that parameters are reported left to right with defaults."""
        apply_effect = extract_functions(sample_script)[1]

        assert apply_effect["parameters"] == [
            {"type": "effect", "name": "eEffect", "default_value": ""},
            {"type": "object", "name": "oTarget", "default_value": "OBJECT_SELF"},
            {"type": "float", "name": "fDuration", "default_value": "0.0f"},
        ]

    @pytest.mark.parametrize(
        "text",
        [
            "void main()\n{\n}\n",
            "int Add(int a, int b) { return a + b; }\n",
            "int Add(int a, int b)\n// comment\n{\n    return a + b;\n}\n",
        ],
        ids=["main", "inline_body", "body_after_comment"],
    )
    def test_definitions_are_not_declarations(self, text: str) -> None:
        """Test that functions with a body produce no records."""
        assert extract_functions(text) == []

    @pytest.mark.parametrize(
        "text",
        [
            "return GetModule(oPC);\n",
            "else DoNothing(oPC);\n",
            "if DoNothing(oPC);\n",
            "switch Branch(nValue);\n",
        ],
        ids=["return", "else", "if", "switch"],
    )
    def test_control_keywords_are_not_types(self, text: str) -> None:
        """Test that statement heads resembling prototypes are ignored."""
        assert extract_functions(text) == []

    def test_indented_statements_are_ignored(self) -> None:
        """Test that only declarations starting a line are recognised."""
        assert extract_functions("    object GetArea(object oTarget);\n") == []

    def test_nested_vector_default_is_kept_whole(self) -> None:
        """Test that nested commas and brackets stay inside the default value."""
        text = "void SetPath(vector vPoints = [[1, 2], [3, [4, 5]]], int nCount = 0);\n"

        function = extract_functions(text)[0]

        assert function["parameters"] == [
            {"type": "vector", "name": "vPoints", "default_value": "[[1, 2], [3, [4, 5]]]"},
            {"type": "int", "name": "nCount", "default_value": "0"},
        ]

    def test_object_default_value(self) -> None:
        """Test that brace delimited defaults are captured whole."""
        text = 'void SetData(int nData = {1, "a,b", [2]});\n'

        function = extract_functions(text)[0]

        assert function["parameters"][0]["default_value"] == '{1, "a,b", [2]}'

    def test_comments_inside_parameter_list(self) -> None:
        """Test that comments between parameters are skipped."""
        text = 'void Bar(int a /* first */, // trailing\n    string s = "x");\n'

        function = extract_functions(text)[0]

        assert [(p["type"], p["name"], p["default_value"]) for p in function["parameters"]] == [
            ("int", "a", ""),
            ("string", "s", '"x"'),
        ]

    def test_multiline_block_comment_before_declaration(self) -> None:
        """Test that a leading block comment on the same line is skipped."""
        text = "/* Returns the area\n   of the target */ object GetArea(object oTarget);\n"

        functions = extract_functions(text)

        assert [f["name"] for f in functions] == ["GetArea"]

    def test_comment_only_line_before_declaration(self) -> None:
        """Test that a comment line does not hide the next declaration."""
        text = "// helper\nint GetAge(object oCreature);\n"

        assert [f["name"] for f in extract_functions(text)] == ["GetAge"]

    def test_empty_parameter_list(self) -> None:
        """Test that prototypes without parameters are recognised."""
        function = extract_functions("int StartingConditional( );\n")[0]

        assert function["name"] == "StartingConditional"
        assert function["parameters"] == []

    def test_malformed_declaration_is_skipped(self) -> None:
        """Test that one bad prototype does not stop the rest of the file."""
        text = (
            "void Broken(int a = );\n"
            "void Unclosed(int a;\n"
            "int Valid(int a);\n"
        )

        assert [f["name"] for f in extract_functions(text)] == ["Valid"]

    def test_multiline_prototype(self) -> None:
        """Test that a parameter list may span several lines."""
        text = "void Spread(int a,\n           int b = 2);\n"

        function = extract_functions(text)[0]

        assert [p["name"] for p in function["parameters"]] == ["a", "b"]


class TestParameterExtraction:
    """Test the parameter sub-extractor on isolated parameter strings."""

    def test_extracts_parameters(self) -> None:
        """Test that parameters and defaults are captured in order."""
        parameters = extract_parameters("int a, float b = 1.0, string c = \"\"")

        assert parameters == [
            {"type": "int", "name": "a", "default_value": ""},
            {"type": "float", "name": "b", "default_value": "1.0"},
            {"type": "string", "name": "c", "default_value": '""'},
        ]

    def test_empty_string(self) -> None:
        """Test that an empty parameter string has no parameters."""
        assert extract_parameters("") == []
        assert extract_parameters("   ") == []

    def test_stops_at_malformed_tail(self) -> None:
        """Test that scanning stops at the first non-parameter."""
        assert [p["name"] for p in extract_parameters("int a, ???")] == ["a"]


class TestConstantExtraction:
    """Test extraction of initialised declarations."""

    def test_extracts_constants(self, sample_script: str) -> None:
        """Test that top-level initialised declarations are constants."""
        constants = extract_constants(sample_script)

        assert constants == [
            {"type": "int", "name": "TRUE", "value": "1"},
            {"type": "int", "name": "FALSE", "value": "0"},
            {"type": "float", "name": "PI", "value": "3.141592"},
            {"type": "string", "name": "HELLO", "value": '"Hello, world;"'},
            {"type": "int", "name": "MAX_LEVEL", "value": "40"},
        ]

    def test_missing_initialiser_is_not_a_constant(self) -> None:
        """Test that plain declarations are ignored."""
        assert extract_constants("int nCount;\n") == []

    def test_expression_initialiser_is_not_a_constant(self) -> None:
        """Test that only a single value may initialise a constant."""
        assert extract_constants("int nSum = 1 + 2;\nint nCall = Foo(1);\n") == []

    def test_missing_delimiter_is_not_a_constant(self) -> None:
        """Test that a statement delimiter is required."""
        assert extract_constants("int nValue = 1\n") == []

    def test_aggregate_constant(self) -> None:
        """Test that vector and object initialisers are captured whole."""
        text = "vector ORIGIN = [0.0, 0.0, [0.0]];\nstruct_t DATA = {1, {2, 3}};\n"

        constants = extract_constants(text)

        assert [c["value"] for c in constants] == ["[0.0, 0.0, [0.0]]", "{1, {2, 3}}"]

    def test_default_values_in_prototypes_are_not_constants(self) -> None:
        """Test that continuation lines of a prototype are not constants."""
        text = "void Spread(int a,\nint b = 2);\n"

        assert extract_constants(text) == []

    def test_commented_initialiser(self) -> None:
        """Test that comments around the value are skipped."""
        text = "int LIMIT = /* max */ 10 // inclusive\n;\n"

        assert extract_constants(text) == [{"type": "int", "name": "LIMIT", "value": "10"}]


class TestUnclosedBlockComments:
    """Test extraction around block comment openers that are never closed."""

    def test_declarations_after_many_unclosed_openers(self) -> None:
        """Test that lines opening unclosed comments do not hide later lines."""
        text = "/* never closed\n" * 20000 + "int A = 1;\nvoid F(int a);\n"

        assert [c["name"] for c in extract_constants(text)] == ["A"]
        assert [f["name"] for f in extract_functions(text)] == ["F"]

    def test_opener_inside_string_value_is_kept(self) -> None:
        """Test that captured text comes from the script, not the masked copy."""
        text = '/* header */\nstring OPEN = "/*";\nvoid Wrap(string s = "/*");\n'

        assert extract_constants(text) == [{"type": "string", "name": "OPEN", "value": '"/*"'}]
        function = extract_functions(text)[0]
        assert function["parameters_string"] == 'string s = "/*"'
        assert function["parameters"][0]["default_value"] == '"/*"'

    def test_unclosed_opener_is_not_trivia_inside_declaration(self) -> None:
        """Test that an unclosed opener still breaks the declaration it sits in."""
        text = "int A = /* 1;\nint B = 2;\n"

        assert [c["name"] for c in extract_constants(text)] == ["B"]


class TestSharedGrammar:
    """Test that extractors and the value scanner read one process-wide grammar."""

    def test_replaced_head_pattern_is_used(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that extractors match with the current shared grammar."""
        only = re.compile(r"^(?P<type>int) (?P<name>ONLY) =", re.MULTILINE)
        monkeypatch.setattr(
            Grammar, "_instance", dataclasses.replace(get_grammar(), constant_head=only)
        )

        text = "int A = 1;\nint ONLY = 2;\n"

        assert [c["name"] for c in extract_constants(text)] == ["ONLY"]

    def test_replaced_trivia_reaches_the_value_scanner(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test that the scanner skips trivia with the same shared grammar."""
        spaces = re.compile(r" *+")
        monkeypatch.setattr(
            Grammar, "_instance", dataclasses.replace(get_grammar(), trivia=spaces)
        )

        text = "int A = 1;\nint B = /* two */ 2;\n"

        assert [c["name"] for c in extract_constants(text)] == ["A"]
