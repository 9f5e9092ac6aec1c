"""Tests for provider-agnostic message building and file-context rendering."""

from clicoder.services.llm import (
    ChatContext,
    ChatMessage,
    FileContext,
    LLMUsage,
    Turn,
    append_file_context,
    build_messages,
    format_file_context,
)


class TestBuildMessages:
    def test_prompt_only(self):
        turns = build_messages("Hello", ChatContext())
        assert turns == [Turn(role="user", content="Hello")]

    def test_system_prompt_first(self):
        turns = build_messages("Hello", ChatContext(system_prompt="Be brief."))
        assert turns[0] == Turn(role="system", content="Be brief.")
        assert turns[-1] == Turn(role="user", content="Hello")

    def test_empty_system_prompt_skipped(self):
        turns = build_messages("Hello", ChatContext(system_prompt=""))
        assert [t.role for t in turns] == ["user"]

    def test_history_order_and_roles_preserved(self, chat_context):
        turns = build_messages("Now", chat_context)
        assert turns == [
            Turn(role="system", content="You are helpful."),
            Turn(role="user", content="Previous message"),
            Turn(role="system", content="Earlier instructions"),
            Turn(role="assistant", content="Previous response"),
            Turn(role="user", content="Now"),
        ]

    def test_files_not_applied(self, chat_context):
        """build_messages leaves file context to the adapters."""
        turns = build_messages("Now", chat_context)
        assert turns[-1].content == "Now"

    def test_context_not_mutated(self):
        history = (ChatMessage(role="user", content="Hi"),)
        context = ChatContext(messages=history)
        build_messages("Again", context)
        assert context.messages == history


class TestFormatFileContext:
    def test_no_files(self):
        assert format_file_context(()) == ""

    def test_single_file(self):
        rendered = format_file_context((FileContext(path="src/app.py", content="print(1)"),))
        assert rendered == "\n\n--- File Context ---\n\n=== src/app.py ===\nprint(1)\n"

    def test_multiple_files_in_order(self):
        rendered = format_file_context(
            (
                FileContext(path="one.txt", content="1"),
                FileContext(path="two.txt", content="2"),
            )
        )
        assert rendered.count("--- File Context ---") == 1
        assert rendered.index("=== one.txt ===") < rendered.index("=== two.txt ===")

    def test_content_is_raw(self):
        content = "line 1\n=== not a header ===\n"
        rendered = format_file_context((FileContext(path="x", content=content),))
        assert content in rendered

    def test_append_keeps_prompt(self):
        files = (FileContext(path="a.py", content="a"),)
        result = append_file_context("What does this do?", files)
        assert result.startswith("What does this do?")
        assert result.endswith("=== a.py ===\na\n")

    def test_append_without_files(self):
        assert append_file_context("Plain", ()) == "Plain"


class TestLLMUsage:
    def test_total_is_sum(self):
        usage = LLMUsage(prompt_tokens=7, completion_tokens=5)
        assert usage.total_tokens == 12

    def test_zero_usage(self):
        assert LLMUsage(prompt_tokens=0, completion_tokens=0).total_tokens == 0
