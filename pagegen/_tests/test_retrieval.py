"""Tests for retrieval planning, ranking and knowledge-base loading."""
from unittest.mock import patch

import pytest
from langchain_core.documents import Document

from pagegen.schemas.retrieval import ChunkMetadata, RetrievedChunk
from pagegen.tools.rag.chunker import chunk_docs
from pagegen.tools.rag.kb_index import ensure_kb_index, kb_files
from pagegen.tools.rag.loaders import load_docs, split_front_matter
from pagegen.tools.rag.planner import RetrievalPlan, extract_ingredients, plan_retrieval
from pagegen.tools.rag.retriever import apply_plan, dedupe, retrieve


def hit(i, score, text=None, content_type="recipe", url=None, sku=None):
    return RetrievedChunk(
        id=f"h{i}",
        score=score,
        text=text or f"unique text number {i} " + "word " * i,
        metadata=ChunkMetadata(content_type=content_type, source_url=url or f"https://www.vitamix.com/{i}", product_sku=sku),
    )


class TestPlanRetrieval:
    def test_catalog(self, make_intent):
        plan = plan_retrieval("show me all blenders", make_intent("product_info", "category-browse"))
        assert (plan.strategy, plan.top_k, plan.dedupe, plan.max_results) == ("catalog", 50, "by-sku", 12)

    def test_comparison_with_two_products(self, make_intent):
        plan = plan_retrieval("A3500 vs E310", make_intent("comparison", products=["A3500", "E310"]))
        assert plan.strategy == "comprehensive"
        assert plan.semantic_query.startswith("compare A3500 vs E310")

    def test_ingredient_recipes(self, make_intent):
        plan = plan_retrieval("smoothie with mango and kale", make_intent("recipe", "recipe-collection"))
        assert plan.strategy == "ingredient"
        assert plan.boost_terms == ["mango", "kale"]
        assert plan.semantic_query == "vitamix recipes with mango and kale smoothie"

    def test_plain_recipes(self, make_intent):
        plan = plan_retrieval("soup ideas", make_intent("recipe", "recipe-collection"))
        assert (plan.strategy, plan.relevance_threshold) == ("filtered", 0.6)

    def test_support_expansion(self, make_intent):
        plan = plan_retrieval("my blender makes a noise", make_intent("support", "support"))
        assert "troubleshooting" in plan.semantic_query
        assert plan.content_types == ["support", "product"]

    def test_single_product(self, make_intent):
        plan = plan_retrieval("tell me about it", make_intent("product_info", "product-detail", products=["A3500"]))
        assert plan.semantic_query.startswith("A3500 vitamix")

    def test_default(self, make_intent):
        plan = plan_retrieval("healthy living", make_intent())
        assert (plan.strategy, plan.top_k, plan.relevance_threshold) == ("semantic", 10, 0.7)

    def test_ingredient_words(self):
        assert extract_ingredients("Bananas and sweet potato") == ["banana", "sweet potato", "potato"]


class TestApplyPlan:
    def test_threshold_and_cap(self):
        plan = RetrievalPlan(semantic_query="q", relevance_threshold=0.6, max_results=2)
        ctx = apply_plan(plan, [hit(1, 0.9), hit(2, 0.5), hit(3, 0.8), hit(4, 0.7)])
        assert [c.id for c in ctx.chunks] == ["h1", "h3"]
        assert ctx.source_urls == ["https://www.vitamix.com/1", "https://www.vitamix.com/3"]

    def test_prefers_plan_content_types(self):
        plan = RetrievalPlan(semantic_query="q", relevance_threshold=0.0, content_types=["product"])
        ctx = apply_plan(plan, [hit(1, 0.9), hit(2, 0.8, content_type="product")])
        assert [c.id for c in ctx.chunks] == ["h2"]

    def test_keeps_other_types_when_none_match(self):
        plan = RetrievalPlan(semantic_query="q", relevance_threshold=0.0, content_types=["product"])
        assert len(apply_plan(plan, [hit(1, 0.9)]).chunks) == 1

    def test_boost_reorders(self):
        plan = RetrievalPlan(semantic_query="q", relevance_threshold=0.0, boost_terms=["mango"], max_results=5)
        ctx = apply_plan(plan, [hit(1, 0.8, text="plain green soup"), hit(2, 0.75, text="mango lassi smoothie")])
        assert ctx.chunks[0].id == "h2"
        assert ctx.chunks[0].score == pytest.approx(0.75 * 1.15)


class TestDedupe:
    def test_by_sku_keeps_best(self):
        out = dedupe([hit(1, 0.7, sku="A3500"), hit(2, 0.9, sku="A3500"), hit(3, 0.8, sku="E310")], "by-sku")
        assert [c.id for c in out] == ["h2", "h3"]

    def test_by_url(self):
        url = "https://www.vitamix.com/soup"
        out = dedupe([hit(1, 0.7, url=url), hit(2, 0.9, url=url)], "by-url")
        assert [c.id for c in out] == ["h2"]

    def test_similarity_drops_near_duplicates(self):
        text = "blend the tomatoes on high for six minutes until steaming hot"
        out = dedupe([hit(1, 0.9, text=text), hit(2, 0.8, text=text + " ok")], "similarity")
        assert [c.id for c in out] == ["h1"]

    def test_similarity_penalises_same_source(self):
        url = "https://www.vitamix.com/soup"
        out = dedupe([hit(1, 0.9, text="alpha beta", url=url), hit(2, 0.8, text="gamma delta", url=url)], "similarity")
        assert out[1].score == pytest.approx(0.72)


class TestRetrieve:
    @pytest.mark.asyncio
    async def test_no_key_gives_empty_context(self, settings, make_intent, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        ctx = await retrieve("soups", make_intent(), settings)
        assert ctx.chunks == [] and ctx.source_urls == []

    @pytest.mark.asyncio
    async def test_unavailable_index_gives_empty_context(self, settings, make_intent, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        with patch("pagegen.tools.rag.retriever.search", side_effect=RuntimeError("No KB files")):
            ctx = await retrieve("soups", make_intent(), settings)
        assert ctx.chunks == []

    @pytest.mark.asyncio
    async def test_ranked_hits(self, settings, make_intent, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        hits = [hit(1, 0.95, content_type="editorial"), hit(2, 0.4, content_type="editorial")]
        with patch("pagegen.tools.rag.retriever.search", return_value=hits) as search:
            ctx = await retrieve("healthy living", make_intent(), settings)
        assert [c.id for c in ctx.chunks] == ["h1"]
        plan = search.call_args.args[0]
        assert plan.semantic_query == "healthy living"


class TestKnowledgeBase:
    def test_front_matter(self):
        meta, body = split_front_matter(
            "---\ncontent_type: product\nproduct_sku: A3500\nimage_url: 'https://www.vitamix.com/a.png'\nauthor: x\n---\n# Ascent\n"
        )
        assert meta == {"content_type": "product", "product_sku": "A3500", "image_url": "https://www.vitamix.com/a.png"}
        assert body == "# Ascent\n"

    def test_no_front_matter(self):
        assert split_front_matter("plain") == ({}, "plain")

    def test_load_docs(self, tmp_path):
        root = tmp_path / "kb"
        (root / "recipes").mkdir(parents=True)
        (root / "recipes" / "tomato-soup.md").write_text("Blend tomatoes.", encoding="utf-8")
        (root / "notes.txt").write_text("---\nsource_url: https://www.vitamix.com/notes\n---\nBody", encoding="utf-8")
        (root / "image.png").write_bytes(b"\x89PNG")

        files = kb_files(root)
        assert [p.name for p in files] == ["notes.txt", "tomato-soup.md"]
        docs = {d.metadata["page_title"]: d for d in load_docs(files, root)}
        assert docs["Tomato Soup"].metadata["content_type"] == "recipe"
        assert docs["Notes"].metadata["content_type"] == "editorial"
        assert docs["Notes"].metadata["source_url"] == "https://www.vitamix.com/notes"
        assert docs["Notes"].page_content == "Body"

    def test_chunk_ids(self):
        doc = Document(page_content="word " * 500, metadata={"source": "kb/a.md"})
        chunks = chunk_docs([doc], chunk_size=200, chunk_overlap=20)
        assert len(chunks) > 1
        assert [c.metadata["chunk_id"] for c in chunks[:2]] == ["kb/a.md#0", "kb/a.md#1"]

    def test_index_requires_key(self, settings, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        with pytest.raises(RuntimeError):
            ensure_kb_index(settings)

    def test_index_without_files(self, settings, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        assert ensure_kb_index(settings)["ok"] is False
