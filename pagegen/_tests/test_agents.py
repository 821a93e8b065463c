"""Tests for the model-backed agents, with the model call patched out."""
import json
from unittest.mock import AsyncMock, patch

import pytest

from pagegen.agents.compliance_agent import check_compliance, extract_full_text, scan_banned
from pagegen.agents.content_agent import build_content_prompt, generate_content, parse_content
from pagegen.agents.entity_agent import extract_entities
from pagegen.agents.intent_agent import build_intent_prompt, classify_intent, parse_classification
from pagegen.core.errors import ContentGenerationError
from pagegen.schemas.intent import MergedContext
from pagegen.schemas.retrieval import RetrievalContext


class TestIntentAgent:
    @pytest.mark.asyncio
    async def test_unparseable_output_gives_default(self, settings):
        with patch("pagegen.agents.intent_agent.ainvoke_text", new=AsyncMock(return_value="not json")):
            intent = await classify_intent("soups", None, settings)
        assert intent.intent_type == "general"
        assert intent.confidence == 0.3
        assert intent.layout_id == "lifestyle"
        assert intent.entities.goals == ["soups"]

    @pytest.mark.asyncio
    async def test_valid_output(self, settings):
        raw = json.dumps(
            {
                "intent_type": "recipe",
                "confidence": 0.92,
                "layout_id": "single-recipe",
                "content_types": ["recipe"],
                "entities": {
                    "products": [],
                    "ingredients": ["tomato", "basil"],
                    "goals": ["soup"],
                    "userContext": {"dietary": {"avoid": ["dairy"]}},
                },
            }
        )
        with patch("pagegen.agents.intent_agent.ainvoke_text", new=AsyncMock(return_value=f"```json\n{raw}\n```")):
            intent = await classify_intent("tomato basil soup", None, settings)
        assert intent.intent_type == "recipe"
        assert intent.layout_id == "single-recipe"
        assert intent.entities.ingredients == ["tomato", "basil"]
        assert intent.entities.user_context.dietary.avoid == ["dairy"]

    def test_unknown_intent_type_rejected(self):
        with pytest.raises(ValueError):
            parse_classification('{"intent_type": "shopping"}', "q")

    def test_confidence_clamped(self):
        intent = parse_classification('{"intent_type": "general", "confidence": 3}', "q")
        assert intent.confidence == 1.0

    def test_prompt_carries_session(self, catalog):
        merged = MergedContext(prompt_text="Session Context: Previous queries: [\"mango smoothies\" (recipe)]")
        prompt = build_intent_prompt("what blender?", merged, catalog)
        assert "mango smoothies" in prompt
        assert "- product-detail:" in prompt


class TestEntityAgent:
    @pytest.mark.asyncio
    async def test_model_failure_gives_empty(self, settings):
        with patch("pagegen.agents.entity_agent.ainvoke_text", new=AsyncMock(side_effect=RuntimeError("down"))):
            out = await extract_entities("kale soup", settings)
        assert out.products == [] and out.ingredients == []

    @pytest.mark.asyncio
    async def test_extracts(self, settings):
        raw = '{"products": ["A3500"], "ingredients": ["kale", " "], "goals": ["soup"], "keywords": "nope"}'
        with patch("pagegen.agents.entity_agent.ainvoke_text", new=AsyncMock(return_value=raw)):
            out = await extract_entities("kale soup in my A3500", settings)
        assert out.products == ["A3500"]
        assert out.ingredients == ["kale"]
        assert out.keywords == []


class TestContentAgent:
    def test_missing_ids_filled_from_slots(self, catalog):
        layout = catalog.get("educational")
        blocks = [{"type": t, "content": {}} for t in layout.block_types]
        content = parse_content(json.dumps({"headline": "How to", "blocks": blocks}), layout)
        assert [b.id for b in content.blocks] == [f"{t}-{i}" for i, t in enumerate(layout.block_types)]
        assert content.blocks[2].section_style == "highlight"

    def test_invalid_shape_raises(self, catalog):
        with pytest.raises(ContentGenerationError) as exc:
            parse_content('{"headline": "x", "blocks": []}', catalog.get("lifestyle"))
        assert exc.value.code == "CONTENT_GENERATION_FAILED"

    def test_prose_raises(self, catalog):
        with pytest.raises(ContentGenerationError):
            parse_content("Here is your page!", catalog.get("lifestyle"))

    def test_duplicate_ids_raise(self, catalog):
        blocks = [{"id": "same", "type": "hero"}, {"id": "same", "type": "cta"}]
        with pytest.raises(ContentGenerationError):
            parse_content(json.dumps({"headline": "x", "blocks": blocks}), catalog.get("lifestyle"))

    @pytest.mark.parametrize(
        "block_type, payload",
        [
            ("cards", {"cards": 5}),
            ("cards", {"cards": ["just a title"]}),
            ("cards", {"cards": [{"title": "x", "imagePrompt": 3}]}),
            ("hero", {"imagePrompt": {"scene": "kitchen"}}),
            ("faq", {"items": "What? Why?"}),
            ("comparison-table", {"rows": [["a", "b"]]}),
        ],
    )
    def test_malformed_payload_raises(self, catalog, block_type, payload):
        blocks = [{"id": "b", "type": block_type, "content": payload}]
        with pytest.raises(ContentGenerationError) as exc:
            parse_content(json.dumps({"headline": "x", "blocks": blocks}), catalog.get("lifestyle"))
        assert exc.value.code == "CONTENT_GENERATION_FAILED"

    def test_value_lists_accept_plain_strings(self, catalog):
        blocks = [
            {"id": "t", "type": "technique-spotlight", "content": {"tips": ["Start low", "Use the tamper"]}},
            {"id": "c", "type": "comparison-table", "content": {"products": ["A3500", "E310"], "rows": []}},
            {"id": "f", "type": "faq", "content": {"headline": "No questions yet"}},
        ]
        content = parse_content(json.dumps({"headline": "x", "blocks": blocks}), catalog.get("lifestyle"))
        assert content.blocks[0].content["tips"] == ["Start low", "Use the tamper"]

    def test_prompt_lists_blocks_in_order(self, catalog, make_intent, make_chunk):
        layout = catalog.get("lifestyle")
        retrieval = RetrievalContext(chunks=[make_chunk(0, "recipe", page_title="Mango Smoothie")])
        merged = MergedContext(constraints=["dairy"])
        prompt = build_content_prompt("smoothies", retrieval, make_intent(), layout, merged)
        assert '1. type "hero"' in prompt
        assert '5. type "cta"' in prompt
        assert "Always respect: dairy" in prompt
        assert "https://www.vitamix.com/recipe/0" in prompt

    @pytest.mark.asyncio
    async def test_generate(self, settings, catalog, make_intent, make_content):
        layout = catalog.get("lifestyle")
        raw = make_content(layout).model_dump_json(by_alias=True)
        with patch("pagegen.agents.content_agent.ainvoke_text", new=AsyncMock(return_value=raw)):
            content = await generate_content("smoothies", RetrievalContext(), make_intent(), layout, None, settings)
        assert [b.type for b in content.blocks] == layout.block_types


class TestComplianceAgent:
    def test_scan_banned(self):
        issues = scan_banned("This cheap blender is simply awesome.")
        assert 'Avoid "cheap" (use: value)' in issues
        assert len(issues) == 3

    def test_clean_copy(self):
        assert scan_banned("Crafted for whole-food nutrition.") == []

    def test_full_text(self, make_content, catalog):
        text = extract_full_text(make_content(catalog.get("educational")))
        assert "Page headline" in text
        assert "Question 0?" in text

    @pytest.mark.asyncio
    async def test_model_failure_counts_as_compliant(self, settings):
        with patch("pagegen.agents.compliance_agent.ainvoke_text", new=AsyncMock(side_effect=RuntimeError("down"))):
            result = await check_compliance("Crafted for whole-food nutrition.", settings)
        assert result.is_compliant
        assert result.score == 85

    @pytest.mark.asyncio
    async def test_banned_words_force_non_compliance(self, settings):
        raw = '{"isCompliant": true, "score": 95, "issues": []}'
        with patch("pagegen.agents.compliance_agent.ainvoke_text", new=AsyncMock(return_value=raw)):
            result = await check_compliance("An epic smoothie hack.", settings)
        assert not result.is_compliant
        assert result.score == 95
        assert len(result.issues) == 2
