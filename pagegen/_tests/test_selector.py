"""Tests for layout selection and post-retrieval adjustment."""
import pytest

from pagegen.layouts.patterns import SelectorRules
from pagegen.layouts.selector import adjust_layout, is_bare_product_query, select_layout, select_layout_for_intent
from pagegen.schemas.intent import Entities
from pagegen.schemas.layout import Override, RuleBased, Trusted
from pagegen.schemas.retrieval import RetrievalContext


class TestBareProductOverride:
    """Bare product names always land on the product detail page."""

    @pytest.mark.parametrize("query", ["A3500", "a3500", "  the A3500 ", "Vitamix E310", "pro 750"])
    def test_detects_bare_product(self, query):
        assert is_bare_product_query(query)

    @pytest.mark.parametrize("query", ["", "A3500 vs E310", "best blender", "a3500 smoothie recipes"])
    def test_rejects_non_bare_queries(self, query):
        assert not is_bare_product_query(query)

    def test_override_beats_confident_classifier(self, make_intent):
        """A 0.95 comparison classification cannot move a bare product query."""
        choice = select_layout_for_intent(
            make_intent("comparison", "product-comparison", 0.95), "A3500"
        )
        assert isinstance(choice, Override)
        assert choice.kind == "override"
        assert choice.reason == "bare_product"
        assert choice.layout.id == "product-detail"

    def test_custom_rules_table(self, make_intent):
        rules = SelectorRules(known_products=("x1000",))
        choice = select_layout_for_intent(make_intent("general", "lifestyle", 0.95), "X1000", rules=rules)
        assert choice.layout.id == "product-detail"
        assert select_layout_for_intent(make_intent("general", "lifestyle", 0.95), "A3500", rules=rules).kind == "trusted"


class TestSingleProductComparison:
    """A lone product cannot be compared."""

    @pytest.mark.parametrize("confidence", [0.1, 0.5, 0.85, 0.99])
    def test_comparison_layout_demoted(self, make_intent, confidence):
        choice = select_layout_for_intent(
            make_intent("comparison", "product-comparison", confidence, products=["A3500"]),
            "is the A3500 worth it compared to others",
        )
        assert choice.layout.id == "product-detail"
        assert choice.layout.id != "product-comparison"

    def test_comparison_intent_with_other_layout_demoted(self, make_intent):
        choice = select_layout_for_intent(
            make_intent("comparison", "lifestyle", 0.95, products=["E310"]), "e310 compared"
        )
        assert isinstance(choice, Override)
        assert choice.reason == "single_product_comparison"

    def test_two_products_stay_comparison(self, make_intent):
        choice = select_layout_for_intent(
            make_intent("comparison", "product-comparison", 0.95, products=["A3500", "E310"]), "A3500 vs E310"
        )
        assert isinstance(choice, Trusted)
        assert choice.layout.id == "product-comparison"


class TestTrustedAndRuleBased:
    """Confidence gates the classifier's own layout."""

    def test_trusted_at_threshold(self, make_intent):
        choice = select_layout_for_intent(make_intent("recipe", "single-recipe", 0.85), "banana bread")
        assert isinstance(choice, Trusted)
        assert choice.layout.id == "single-recipe"

    def test_unknown_layout_id_falls_to_rules(self, make_intent):
        choice = select_layout_for_intent(make_intent("support", "not-a-layout", 0.99), "my blender leaks")
        assert isinstance(choice, RuleBased)
        assert choice.layout.id == "support"

    def test_threshold_is_configurable(self, make_intent):
        it = make_intent("recipe", "single-recipe", 0.7)
        assert select_layout_for_intent(it, "soup").kind == "rule_based"
        assert select_layout_for_intent(it, "soup", threshold=0.6).kind == "trusted"

    @pytest.mark.parametrize(
        "intent_type,products,goals,query,expected",
        [
            ("support", [], [], "grinding noise", "support"),
            ("comparison", [], [], "which blender", "product-comparison"),
            ("product_info", ["A3500"], [], "a3500 features", "product-detail"),
            ("product_info", [], [], "your blenders", "category-browse"),
            ("recipe", [], ["what can I make with spinach and kale"], "", "recipe-invention"),
            ("recipe", [], [], "i have bananas and oats - what can i make", "recipe-invention"),
            ("recipe", [], ["how to make hummus"], "hummus", "single-recipe"),
            ("recipe", [], ["smoothie every morning"], "morning smoothies", "use-case-landing"),
            ("recipe", [], ["soups"], "soups", "recipe-collection"),
            ("general", [], ["mother's day gift ideas"], "gifts", "campaign-landing"),
            ("general", [], ["vitamix history"], "history", "about-story"),
        ],
    )
    def test_rule_table(self, intent_type, products, goals, query, expected):
        choice = select_layout(
            intent_type, ["product"], Entities(products=products, goals=goals), None, 0.2, query=query
        )
        assert isinstance(choice, RuleBased)
        assert choice.layout.id == expected

    def test_invention_beats_single_recipe(self):
        """Invention patterns are checked before single-recipe patterns."""
        goals = ["how to make something with what I have", "what can i make with leftover rice"]
        choice = select_layout("recipe", ["recipe"], Entities(goals=goals), None, 0.2, query="")
        assert choice.layout.id == "recipe-invention"

    def test_editorial_and_default(self):
        assert select_layout("general", ["editorial"], Entities(), None, 0.1).layout.id == "educational"
        assert select_layout("general", ["product"], Entities(), None, 0.1).layout.id == "lifestyle"


class TestAdjustLayout:
    """Post-retrieval corrections."""

    def _ctx(self, make_chunk, products=0, recipes=0):
        chunks = [make_chunk(i, "product") for i in range(products)]
        chunks += [make_chunk(100 + i, "recipe") for i in range(recipes)]
        return RetrievalContext(chunks=chunks)

    def test_single_recipe_without_recipes(self, catalog, make_chunk):
        adj = adjust_layout(catalog.get("single-recipe"), self._ctx(make_chunk))
        assert adj.changed and adj.layout.id == "educational"

    def test_recipe_collection_without_recipes(self, catalog, make_chunk):
        adj = adjust_layout(catalog.get("recipe-collection"), self._ctx(make_chunk, products=2))
        assert adj.layout.id == "lifestyle"

    def test_recipes_present_keep_layout(self, catalog, make_chunk):
        adj = adjust_layout(catalog.get("single-recipe"), self._ctx(make_chunk, recipes=1))
        assert not adj.changed and adj.layout.id == "single-recipe"

    def test_detail_with_many_products(self, catalog, make_chunk):
        adj = adjust_layout(catalog.get("product-detail"), self._ctx(make_chunk, products=3), "tell me about blenders")
        assert adj.layout.id == "product-comparison"

    def test_detail_with_many_products_bare_query_kept(self, catalog, make_chunk):
        adj = adjust_layout(catalog.get("product-detail"), self._ctx(make_chunk, products=3), "A3500")
        assert not adj.changed and adj.layout.id == "product-detail"

    def test_detail_without_products(self, catalog, make_chunk):
        adj = adjust_layout(catalog.get("product-detail"), self._ctx(make_chunk))
        assert adj.layout.id == "category-browse"

    def test_browse_with_one_product(self, catalog, make_chunk):
        adj = adjust_layout(catalog.get("category-browse"), self._ctx(make_chunk, products=1))
        assert adj.layout.id == "product-detail"

    def test_catalog_entries_untouched(self, catalog, make_chunk):
        before = catalog.get("single-recipe").model_dump()
        adjust_layout(catalog.get("single-recipe"), self._ctx(make_chunk))
        assert catalog.get("single-recipe").model_dump() == before
