"""Provider-agnostic prompt building shared by the adapters.

prompt.py is provider-agnostic. It produces a list of Turn objects; each
adapter handles conversion to its provider-specific request format.

Message structure:
- System turn first (if the context has a system prompt)
- History turns in conversation order, roles preserved
- Current user prompt last

File context is never sent as a separate message. It is rendered as one
delimited block and appended to the content of the outgoing user turn:

    <prompt>

    --- File Context ---

    === src/app.py ===
    <content>
"""

from collections.abc import Iterable

from clicoder.services.llm.types import ChatContext, FileContext, Turn

FILE_CONTEXT_HEADER = "\n\n--- File Context ---\n"


def build_messages(prompt: str, context: ChatContext) -> list[Turn]:
    """Build the generic turn list for a generation call.

    Args:
        prompt: Current user message text.
        context: Conversation context (system prompt, history, files).

    Returns:
        List of Turn objects, system turn first (if present) and the
        prompt as the trailing user turn. File context is not applied here.
    """
    turns: list[Turn] = []

    if context.system_prompt:
        turns.append(Turn(role="system", content=context.system_prompt))

    for message in context.messages:
        turns.append(Turn(role=message.role, content=message.content))

    turns.append(Turn(role="user", content=prompt))

    return turns


def format_file_context(files: Iterable[FileContext]) -> str:
    """Render file entries as a delimited block.

    Returns:
        Empty string when there are no files, otherwise the header followed
        by one section per file named by its path.
    """
    sections = [f"\n=== {file.path} ===\n{file.content}\n" for file in files]
    if not sections:
        return ""
    return FILE_CONTEXT_HEADER + "".join(sections)


def append_file_context(content: str, files: Iterable[FileContext]) -> str:
    """Append the rendered file block to a user turn's content."""
    return content + format_file_context(files)
