"""Prompt formatting for commit message generation.

Serializes a PromptContext into the text sent to a language model. The
model's reply is expected to be a single JSON object with type, scope,
subject and body.
"""

import json

from hunkscope.models import CommitType, PromptContext


SYSTEM_PROMPT = f"""You write git commit messages in the Conventional Commits format.
Respond with ONLY a JSON object. No markdown fences. No commentary.
Valid types: {", ".join(t.value for t in CommitType)}.
The subject is imperative mood, lowercase, at most 72 characters, with no trailing period."""


USER_PROMPT_TEMPLATE = """Analyze this git diff and generate a commit message.

SUMMARY: {summary}
FILES: {files}
SUGGESTED TYPE: {commit_type}{scope_line}
{symbols}
DIFF:
{diff}

Write a JSON commit message describing the changes shown in the diff.
The subject must be specific - describe WHAT was changed (e.g., "add system prompt to ollama provider", "update dependency versions").

Output format:
{{"type": "{commit_type}", "scope": {scope_json}, "subject": "<your description here>", "body": null}}"""


def _indent_block(block: str, prefix: str = "    ") -> str:
    return prefix + block.replace("\n", "\n" + prefix)


def format_symbols_section(context: PromptContext) -> str:
    """Render the SYMBOLS CHANGED section, or an empty string if no symbols."""
    if not context.symbols_added and not context.symbols_removed:
        return ""

    parts = ["\nSYMBOLS CHANGED:"]
    if context.symbols_added:
        parts.append("\n  Added:\n" + _indent_block(context.symbols_added))
    if context.symbols_removed:
        parts.append("\n  Removed:\n" + _indent_block(context.symbols_removed))
    parts.append("\n")
    return "".join(parts)


def build_commit_prompt(context: PromptContext) -> str:
    """Build the user prompt for a commit message request.

    Args:
        context: The budgeted prompt context.

    Returns:
        The prompt text.
    """
    scope = context.suggested_scope
    return USER_PROMPT_TEMPLATE.format(
        summary=context.change_summary,
        files=context.file_breakdown.strip(),
        commit_type=context.suggested_type.value,
        scope_line=f"\nSCOPE: {scope}" if scope else "",
        symbols=format_symbols_section(context),
        diff=context.truncated_diff,
        scope_json=json.dumps(scope) if scope else "null",
    )
