"""Pure functions for building generation prompts."""

from __future__ import annotations

from llmhub.l1_entities.mode import Mode

MODE_INSTRUCTIONS: dict[Mode, str] = {
    Mode.KID: (
        'You are talking with a child. Use simple words and short sentences, '
        'give friendly examples, and keep every answer safe and age-appropriate.'
    ),
    Mode.EXPERT: (
        'You are talking with a domain expert. Answer with technical depth and precise '
        'terminology, and include relevant details, trade-offs and edge cases.'
    ),
    Mode.INSHORT: (
        'Answer as briefly as possible. Use at most two or three short sentences '
        'and leave out any preamble.'
    ),
}

SUGGESTION_SYSTEM_PROMPT = 'You rephrase questions. Reply with a numbered list only, no commentary.'


def compose_system_prompt(base_prompt: str, mode: Mode) -> str:
    """Prepend the instruction block for *mode* to *base_prompt*."""
    instruction = MODE_INSTRUCTIONS.get(mode)
    if instruction is None:
        return base_prompt
    if not base_prompt:
        return instruction
    return f'{instruction}\n\n{base_prompt}'


def build_suggestion_prompt(user_prompt: str, count: int) -> str:
    """Build the user prompt asking for *count* alternative phrasings."""
    return (
        f'Suggest {count} alternative ways to ask the following question. '
        f'Respond with exactly {count} lines in the form "1. ...".\n\n'
        f'Question: {user_prompt.strip()}'
    )
