"""Tests for the prompt builders."""
from src.content.prompts import (
    JSON_ONLY_INSTRUCTION,
    SCORING_CONTENT_CHAR_LIMIT,
    BriefPromptInput,
    ContentPromptInput,
    QualityPromptInput,
    build_brief_generation_prompt,
    build_content_generation_prompt,
    build_quality_scoring_prompt,
    count_words,
)


def _brief_input(**overrides):
    fields = dict(
        client_name="Acme Data",
        client_domain="acmedata.io",
        industry="Developer tools",
        brand_voice={"tone": "direct", "avoid": ["hype"]},
        target_keywords=["postgres", "migrations"],
        competitive_data=[{"competitor": f"c{i}"} for i in range(8)],
        citation_data=[{"query": f"q{i}"} for i in range(14)],
        target_keyword="zero downtime migrations",
        content_type="guide",
    )
    fields.update(overrides)
    return BriefPromptInput(**fields)


class TestBriefGenerationPrompt:
    def test_is_deterministic(self):
        assert build_brief_generation_prompt(_brief_input()) == build_brief_generation_prompt(_brief_input())

    def test_dict_key_order_does_not_change_output(self):
        a = build_brief_generation_prompt(_brief_input(brand_voice={"tone": "direct", "person": "second"}))
        b = build_brief_generation_prompt(_brief_input(brand_voice={"person": "second", "tone": "direct"}))
        assert a == b

    def test_caps_signal_documents(self):
        prompt = build_brief_generation_prompt(_brief_input())
        assert '"c4"' in prompt
        assert '"c5"' not in prompt
        assert '"q9"' in prompt
        assert '"q10"' not in prompt

    def test_embeds_client_profile_and_contract(self):
        prompt = build_brief_generation_prompt(_brief_input())
        assert "Acme Data" in prompt
        assert "acmedata.io" in prompt
        assert "postgres, migrations" in prompt
        assert "zero downtime migrations" in prompt
        for field in ("unique_angle", "controversial_positions", "semantic_keywords", "priority_level"):
            assert f'"{field}"' in prompt
        assert prompt.endswith(JSON_ONLY_INSTRUCTION)

    def test_placeholders_when_signals_missing(self):
        prompt = build_brief_generation_prompt(_brief_input(competitive_data=[], citation_data=[]))
        assert "No competitive data available yet." in prompt
        assert "No AI citation data available yet." in prompt

    def test_signal_documents_of_any_shape_are_embedded(self):
        prompt = build_brief_generation_prompt(
            _brief_input(
                competitive_data=[[{"keyword": "locks", "volume": 10}], "serp snapshot", 42],
                citation_data=[None, ["perplexity", "chatgpt"]],
            )
        )
        assert '"keyword": "locks"' in prompt
        assert '"serp snapshot"' in prompt
        assert "42" in prompt
        assert '"chatgpt"' in prompt


class TestContentGenerationPrompt:
    def test_embeds_strategy_fields(self):
        prompt = build_content_generation_prompt(
            ContentPromptInput(
                brief_title="Migrations Guide",
                target_keyword="postgres migrations",
                target_word_count=1800,
                required_sections=["Intro", "Rollbacks"],
                semantic_keywords=["lock timeout"],
                internal_links=["/blog/locks", "/blog/vacuum"],
                controversial_positions="ORMs hide too much",
            )
        )
        assert "1. Intro\n2. Rollbacks" in prompt
        assert "/blog/locks\n/blog/vacuum" in prompt
        assert "ORMs hide too much" in prompt
        assert "Target Word Count: 1800" in prompt
        assert "2-3% density" in prompt
        assert '"meta_description": "155 character max meta description"' in prompt

    def test_defaults_for_missing_fields(self):
        prompt = build_content_generation_prompt(
            ContentPromptInput(brief_title="T", target_keyword="k")
        )
        assert "Target Audience: General audience" in prompt
        assert "Internal Links" not in prompt
        assert "No SERP analysis available" in prompt


class TestQualityScoringPrompt:
    def test_truncates_body_but_counts_all_words(self):
        body = "word " * 3000
        prompt = build_quality_scoring_prompt(QualityPromptInput(content=body, target_keyword="k"))
        assert "Actual Word Count: 3000" in prompt
        assert body[:SCORING_CONTENT_CHAR_LIMIT] in prompt
        assert body[: SCORING_CONTENT_CHAR_LIMIT + 10] not in prompt

    def test_untitled_content(self):
        prompt = build_quality_scoring_prompt(QualityPromptInput(content="Short body", target_keyword="k"))
        assert "Title: Untitled" in prompt
        assert "Meta Description: None" in prompt


def test_count_words_splits_on_whitespace():
    assert count_words("one  two\nthree\tfour") == 4
    assert count_words("") == 0
    assert count_words("   ") == 0
