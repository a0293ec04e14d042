"""Tests for data models."""

import pytest
from pydantic import ValidationError
from copilot.llm.provider import ChatCompletion, ChatMessage, Choice, Usage
from copilot.models import CodeFile, CodeTemplate, GeneratedCode, TemplateMatch, TemplateVariable
from copilot.parsers import SyntaxNode


class TestCodeFile:
    def test_from_source(self):
        file = CodeFile.from_source("print('hi')", "python")
        assert file.path == "temp"
        assert file.size == 11
        assert file.last_modified is not None


class TestGeneratedCode:
    @pytest.mark.parametrize("confidence", [-0.1, 1.1])
    def test_confidence_bounds(self, confidence):
        with pytest.raises(ValidationError):
            GeneratedCode(code="", confidence=confidence)

    def test_failure_reason_values(self):
        assert GeneratedCode(code="", confidence=0, failure_reason="timeout").failure_reason == "timeout"
        with pytest.raises(ValidationError):
            GeneratedCode(code="", confidence=0, failure_reason="network")


class TestTemplateMatch:
    def test_missing_variables(self):
        template = CodeTemplate(
            id="t",
            name="n",
            description="d",
            language="go",
            template="{{a}} {{b}} {{c}}",
            variables=[
                TemplateVariable(name="a", required=True),
                TemplateVariable(name="b"),
                TemplateVariable(name="c", required=True),
            ],
        )
        match = TemplateMatch(template=template, confidence=0.5, variables={"a": "x"})

        assert match.missing_variables == ["b", "c"]
        assert match.missing_required == ["c"]


class TestChatCompletion:
    def test_accessors(self):
        completion = ChatCompletion(
            choices=[Choice(message=ChatMessage(role="assistant", content="hi"), finish_reason="stop")],
            usage=Usage(total_tokens=12),
        )
        assert completion.content == "hi"
        assert completion.finish_reason == "stop"
        assert completion.total_tokens == 12

    def test_empty(self):
        completion = ChatCompletion()
        assert completion.content == ""
        assert completion.finish_reason is None
        assert completion.total_tokens == 0


class TestSyntaxNode:
    def test_walk_is_depth_first_preorder(self):
        tree = SyntaxNode(
            type="Program",
            children=[
                SyntaxNode(type="A", children=[SyntaxNode(type="A1")]),
                SyntaxNode(type="B"),
            ],
        )
        assert [node.type for node in tree.walk()] == ["Program", "A", "A1", "B"]
