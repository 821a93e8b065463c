# render/templates.py
"""Jinja2 markup for every block type.

Each block renders as rows of cells inside a root div. Templates only read
``c`` (the block payload), ``img`` / ``item_img`` (resolved image refs) and
``slot``.
"""
from __future__ import annotations
from typing import Dict

MACROS = """
{% macro picture(ref, alt) -%}
{%- if ref -%}
<picture><img src="{{ ref.src }}" alt="{{ alt or '' }}"{% if ref.generated %} data-gen-image="{{ ref.id }}"{% endif %} loading="lazy"></picture>
{%- endif -%}
{%- endmacro %}
{% macro button(text, url, cls='button') -%}
{%- if text -%}<p><a href="{{ url or '#' }}" class="{{ cls }}">{{ text }}</a></p>{%- endif -%}
{%- endmacro %}
"""

WRAPPER = (
    '<div class="{{ classes }}" data-block-id="{{ block_id }}" data-block-type="{{ block_type }}"'
    ' data-block-version="{{ version }}">{{ inner }}</div>'
)

_M = '{% from "_macros.html" import picture, button %}'

BLOCK_TEMPLATES: Dict[str, str] = {
    "hero.html": _M + """
<div><div>{{ picture(img, c.headline) }}</div><div>
<h1>{{ c.headline }}</h1>
{% if c.subheadline %}<p>{{ c.subheadline }}</p>{% endif %}
{{ button(c.ctaText, c.ctaUrl) }}
</div></div>""",
    "cards.html": _M + """
{% for card in c.cards | as_list %}
<div><div>{{ picture(item_img.get(loop.index0), card.title) }}</div><div>
<h3>{{ card.title }}</h3><p>{{ card.description }}</p>
{% if card.linkText %}<p><a href="{{ card.linkUrl or '#' }}">{{ card.linkText }}</a></p>{% endif %}
</div></div>
{% endfor %}""",
    "columns.html": _M + """
<div>{% for col in c.columns | as_list %}<div>
{{ picture(item_img.get(loop.index0), col.headline) }}
{% if col.headline %}<h3>{{ col.headline }}</h3>{% endif %}<p>{{ col.text }}</p>
</div>{% endfor %}</div>""",
    "text.html": """
<div><div>
{% if c.headline %}<h2>{{ c.headline }}</h2>{% endif %}
{% for p in c.body | paragraphs %}<p>{{ p }}</p>{% endfor %}
</div></div>""",
    "cta.html": _M + """
<div><div>
<h2>{{ c.headline }}</h2>
{% if c.text %}<p>{{ c.text }}</p>{% endif %}
{% if c.buttonText %}<p><a href="{{ c.buttonUrl or '#' }}" class="button"{% if c.ctaType %} data-cta-type="{{ c.ctaType }}"{% endif %}{% if c.generationHint %} data-generation-hint="{{ c.generationHint }}"{% endif %}>{{ c.buttonText }}</a></p>{% endif %}
</div></div>""",
    "faq.html": """
{% for item in c.get('items') | as_list %}
<div><div><h3>{{ item.question }}</h3></div><div><p>{{ item.answer }}</p></div></div>
{% endfor %}""",
    "split-content.html": _M + """
<div><div>{{ picture(img, c.headline) }}</div><div>
{% if c.eyebrow %}<p class="eyebrow">{{ c.eyebrow }}</p>{% endif %}
<h2>{{ c.headline }}</h2>
{% for p in c.body | paragraphs %}<p>{{ p }}</p>{% endfor %}
{% if c.price %}<p class="price">{{ c.price }}{% if c.priceNote %} <span>{{ c.priceNote }}</span>{% endif %}</p>{% endif %}
{{ button(c.primaryCtaText, c.primaryCtaUrl) }}
{{ button(c.secondaryCtaText, c.secondaryCtaUrl, 'button secondary') }}
</div></div>""",
    "benefits-grid.html": """
{% if c.headline %}<div><div><h2>{{ c.headline }}</h2></div></div>{% endif %}
{% for item in c.get('items') | as_list %}
<div><div>{% if item.icon %}<span class="icon icon-{{ item.icon }}"></span>{% endif %}</div>
<div><h3>{{ item.title }}</h3><p>{{ item.description }}</p></div></div>
{% endfor %}""",
    "tips-banner.html": """
{% if c.headline %}<div><div><h2>{{ c.headline }}</h2></div></div>{% endif %}
{% for tip in c.tips | as_list %}
<div><div><h3>{{ tip.title }}</h3><p>{{ tip.description }}</p></div></div>
{% endfor %}""",
    "product-cards.html": _M + """
{% if c.headline %}<div><div><h2>{{ c.headline }}</h2></div></div>{% endif %}
{% for p in c.products | as_list %}
<div><div>{{ picture(item_img.get(loop.index0), p.name) }}</div><div>
<h3>{{ p.name }}</h3>{% if p.price %}<p class="price">{{ p.price }}</p>{% endif %}<p>{{ p.description }}</p>
{% if p.url %}<p><a href="{{ p.url }}">Shop {{ p.name }}</a></p>{% endif %}
</div></div>
{% endfor %}""",
    "product-recommendation.html": _M + """
<div><div>{{ picture(img, c.productName or c.headline) }}</div><div>
{% if c.eyebrow %}<p class="eyebrow">{{ c.eyebrow }}</p>{% endif %}
<h2>{{ c.headline }}</h2>{% if c.productName %}<h3>{{ c.productName }}</h3>{% endif %}
{% for p in c.body | paragraphs %}<p>{{ p }}</p>{% endfor %}
{% if c.price %}<p class="price">{{ c.price }}</p>{% endif %}
{{ button(c.ctaText, c.ctaUrl) }}
</div></div>""",
    "recipe-cards.html": _M + """
{% if c.headline %}<div><div><h2>{{ c.headline }}</h2></div></div>{% endif %}
{% for r in c.recipes | as_list %}
<div{% if r.difficulty %} data-difficulty="{{ r.difficulty }}"{% endif %}{% if r.time %} data-time="{{ r.time }}"{% endif %}><div>{{ picture(item_img.get(loop.index0), r.title) }}</div><div>
<h3>{{ r.title }}</h3>{% if r.description %}<p>{{ r.description }}</p>{% endif %}
{% if r.time or r.difficulty %}<p class="recipe-meta">{{ r.time }}{% if r.time and r.difficulty %} · {% endif %}{{ r.difficulty }}</p>{% endif %}
{% if r.url %}<p><a href="{{ r.url }}">View recipe</a></p>{% endif %}
</div></div>
{% endfor %}""",
    "recipe-filter-bar.html": """
{% for f in c.filters | as_list %}
<div><div>{{ f.label }}</div><div>{{ f.options | as_list | join(', ') }}</div></div>
{% endfor %}""",
    "ingredient-search.html": """
<div><div>
{% if c.headline %}<h2>{{ c.headline }}</h2>{% endif %}
<p>{{ c.placeholder or 'Enter ingredients you have' }}</p>
</div></div>
{% if c.suggestions %}<div><div>{{ c.suggestions | as_list | join(', ') }}</div></div>{% endif %}""",
    "quick-view-modal.html": """
<div><div>{{ c.buttonText or 'Quick view' }}</div></div>""",
    "technique-spotlight.html": _M + """
<div><div>
{% if c.videoUrl and video_ok %}<p><a href="{{ c.videoUrl }}" class="video">{{ c.title }}</a></p>{% else %}{{ picture(img, c.title) }}{% endif %}
</div><div>
<h2>{{ c.title }}</h2><p>{{ c.description }}</p>
{% if c.tips %}<ul>{% for t in c.tips | as_list %}<li>{{ t }}</li>{% endfor %}</ul>{% endif %}
{% if c.linkText %}<p><a href="{{ c.linkUrl or '#' }}">{{ c.linkText }}</a></p>{% endif %}
</div></div>""",
    "recipe-hero.html": _M + """
<div><div>{{ picture(img, c.title) }}</div><div>
<h1>{{ c.title }}</h1>{% if c.description %}<p>{{ c.description }}</p>{% endif %}
<ul class="recipe-stats">
{% for label, key in [('Prep', 'prepTime'), ('Cook', 'cookTime'), ('Servings', 'servings'), ('Difficulty', 'difficulty')] %}{% if c[key] %}<li><strong>{{ label }}</strong> {{ c[key] }}</li>{% endif %}{% endfor %}
</ul>
</div></div>""",
    "recipe-steps.html": _M + """
{% for s in c.steps | as_list %}
<div><div>{{ picture(item_img.get(loop.index0), s.title) }}</div><div>
<h3>{{ loop.index }}. {{ s.title }}</h3><p>{{ s.instruction }}</p>
</div></div>
{% endfor %}""",
    "recipe-sidebar.html": """
<div><div><ul>
{% for label, key in [('Servings', 'servings'), ('Prep time', 'prepTime'), ('Total time', 'totalTime'), ('Difficulty', 'difficulty')] %}{% if c[key] %}<li><strong>{{ label }}</strong> {{ c[key] }}</li>{% endif %}{% endfor %}
</ul>
{% if c.tags %}<p class="tags">{{ c.tags | as_list | join(', ') }}</p>{% endif %}
</div></div>""",
    "ingredients-list.html": """
<div><div><h2>{{ c.headline or 'Ingredients' }}</h2><ul>
{% for i in c.get('items') | as_list %}<li>{% if i.amount %}<strong>{{ i.amount }}</strong> {% endif %}{{ i.name }}{% if i.note %} <em>{{ i.note }}</em>{% endif %}</li>{% endfor %}
</ul></div></div>""",
    "recipe-directions.html": """
<div><div><h2>{{ c.headline or 'Directions' }}</h2><ol>
{% for s in c.steps | as_list %}<li>{{ s.instruction if s is mapping else s }}</li>{% endfor %}
</ol></div></div>""",
    "recipe-tabs.html": """
{% for t in c.tabs | as_list %}
<div><div>{{ t.label }}</div><div>{% for p in t.body | paragraphs %}<p>{{ p }}</p>{% endfor %}</div></div>
{% endfor %}""",
    "nutrition-facts.html": """
<div><div><h3>Nutrition{% if c.servingSize %} <span>per {{ c.servingSize }}</span>{% endif %}</h3></div></div>
{% for f in c.facts | as_list %}<div><div>{{ f.label }}</div><div>{{ f.value }}</div></div>{% endfor %}""",
    "recipe-tips.html": """
<div><div><h3>{{ c.headline or 'Tips' }}</h3><ul>
{% for t in c.tips | as_list %}<li>{{ t }}</li>{% endfor %}
</ul></div></div>""",
    "product-hero.html": _M + """
<div><div>{{ picture(img, c.productName) }}</div><div>
<h1>{{ c.productName }}</h1>
{% if c.badges %}<p class="badges">{% for b in c.badges | as_list %}<span>{{ b }}</span>{% endfor %}</p>{% endif %}
<p>{{ c.description }}</p>
{% if c.price %}<p class="price">{{ c.price }}</p>{% endif %}
{{ button(c.ctaText, c.ctaUrl) }}
</div></div>""",
    "specs-table.html": """
{% if c.headline %}<div><div><h2>{{ c.headline }}</h2></div></div>{% endif %}
{% for s in c.specs | as_list %}<div><div>{{ s.label }}</div><div>{{ s.value }}</div></div>{% endfor %}""",
    "feature-highlights.html": _M + """
{% if c.headline %}<div><div><h2>{{ c.headline }}</h2></div></div>{% endif %}
{% for f in c.features | as_list %}
<div><div>{{ picture(item_img.get(loop.index0), f.title) }}</div><div><h3>{{ f.title }}</h3><p>{{ f.description }}</p></div></div>
{% endfor %}""",
    "included-accessories.html": _M + """
{% if c.headline %}<div><div><h2>{{ c.headline }}</h2></div></div>{% endif %}
{% for a in c.accessories | as_list %}
<div><div>{{ picture(item_img.get(loop.index0), a.name) }}</div><div><h3>{{ a.name }}</h3>{% if a.description %}<p>{{ a.description }}</p>{% endif %}</div></div>
{% endfor %}""",
    "comparison-table.html": """
<div><div>{{ c.headline or '' }}</div>{% for p in c.products | as_list %}<div><strong>{{ p }}</strong></div>{% endfor %}</div>
{% for row in c.rows | as_list %}
<div><div>{{ row.label }}</div>{% for v in row.get('values') | as_list %}<div{% if row.winner is not none and row.winner == loop.index0 %} class="winner"{% endif %}>{{ v }}</div>{% endfor %}</div>
{% endfor %}""",
    "verdict-card.html": """
<div><div><h2>{{ c.headline }}</h2>{% if c.summary %}<p>{{ c.summary }}</p>{% endif %}</div></div>
{% for r in c.recommendations | as_list %}<div><div><strong>{{ r.product }}</strong></div><div>{{ r.bestFor }}</div></div>{% endfor %}""",
    "use-case-cards.html": """
{% for u in c.useCases | as_list %}<div><div><h3>{{ u.title }}</h3><p>{{ u.description }}</p></div></div>{% endfor %}""",
    "support-hero.html": _M + """
<div><div>
<h1>{{ c.headline }}</h1>
{% if c.subheadline %}<p>{{ c.subheadline }}</p>{% endif %}
{% if c.issue %}<p class="issue">{{ c.issue }}</p>{% endif %}
</div></div>""",
    "diagnosis-card.html": """
{% if c.headline %}<div><div><h2>{{ c.headline }}</h2></div></div>{% endif %}
{% for d in c.get('items') | as_list %}
<div{% if d.severity %} data-severity="{{ d.severity }}"{% endif %}><div><h3>{{ d.symptom }}</h3></div><div><p>{{ d.cause }}</p></div></div>
{% endfor %}""",
    "troubleshooting-steps.html": _M + """
{% if c.headline %}<div><div><h2>{{ c.headline }}</h2></div></div>{% endif %}
{% for s in c.steps | as_list %}
<div><div>{{ picture(item_img.get(loop.index0), s.title) }}</div><div><h3>{{ loop.index }}. {{ s.title }}</h3><p>{{ s.instruction }}</p></div></div>
{% endfor %}""",
    "countdown-timer.html": """
<div><div><h2>{{ c.headline }}</h2>{% if c.text %}<p>{{ c.text }}</p>{% endif %}</div>
<div>{% if c.endDate %}<time datetime="{{ c.endDate }}">{{ c.endDate }}</time>{% endif %}</div></div>""",
    "testimonials.html": _M + """
{% if c.headline %}<div><div><h2>{{ c.headline }}</h2></div></div>{% endif %}
{% for t in c.testimonials | as_list %}
<div><div>{{ picture(item_img.get(loop.index0), t.name) }}</div><div><blockquote>{{ t.quote }}</blockquote><p><strong>{{ t.name }}</strong>{% if t.role %}, {{ t.role }}{% endif %}</p></div></div>
{% endfor %}""",
    "timeline.html": """
{% if c.headline %}<div><div><h2>{{ c.headline }}</h2></div></div>{% endif %}
{% for e in c.events | as_list %}
<div><div><strong>{{ e.year }}</strong></div><div><h3>{{ e.title }}</h3><p>{{ e.description }}</p></div></div>
{% endfor %}""",
    "team-cards.html": _M + """
{% if c.headline %}<div><div><h2>{{ c.headline }}</h2></div></div>{% endif %}
{% for m in c.members | as_list %}
<div><div>{{ picture(item_img.get(loop.index0), m.name) }}</div><div><h3>{{ m.name }}</h3>{% if m.role %}<p>{{ m.role }}</p>{% endif %}{% if m.bio %}<p>{{ m.bio }}</p>{% endif %}</div></div>
{% endfor %}""",
}

PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<title>{{ title }}</title>
<meta name="description" content="{{ description }}">
<meta name="template" content="generative">
<meta name="generation-query" content="{{ query }}">
<meta name="layout" content="{{ layout_id }}">
</head>
<body>
<header></header>
<main>
{% for s in sections %}<div class="section{% if s.style %} {{ s.style }}{% endif %}{% if s.width == 'full' %} full-width{% endif %}">
<div class="{{ s.width }}">{{ s.html }}</div>
</div>
{% endfor %}{% if citations %}<div class="section citations"><ul>
{% for cite in citations %}<li><a href="{{ cite.source_url }}">{{ cite.source_title or cite.source_url }}</a></li>{% endfor %}
</ul></div>
{% endif %}</main>
<footer></footer>
</body>
</html>
"""
