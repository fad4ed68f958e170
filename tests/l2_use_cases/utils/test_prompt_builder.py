"""Tests for prompt builder pure functions."""

from llmhub.l1_entities.mode import Mode
from llmhub.l2_use_cases.utils.prompt_builder import (
    MODE_INSTRUCTIONS,
    build_suggestion_prompt,
    compose_system_prompt,
)


class TestComposeSystemPrompt:
    def test_none_mode_returns_base_unchanged(self):
        assert compose_system_prompt('You are helpful.', Mode.NONE) == 'You are helpful.'

    def test_mode_block_prepended(self):
        for mode in (Mode.KID, Mode.EXPERT, Mode.INSHORT):
            result = compose_system_prompt('BASE', mode)
            assert result.startswith(MODE_INSTRUCTIONS[mode])
            assert result.endswith('BASE')

    def test_mode_blocks_distinct(self):
        assert len(set(MODE_INSTRUCTIONS.values())) == 3

    def test_empty_base_returns_instruction_only(self):
        assert compose_system_prompt('', Mode.KID) == MODE_INSTRUCTIONS[Mode.KID]


class TestBuildSuggestionPrompt:
    def test_contains_question_and_count(self):
        result = build_suggestion_prompt('  how do magnets work?  ', 3)
        assert 'how do magnets work?' in result
        assert '3' in result
        assert '1.' in result
