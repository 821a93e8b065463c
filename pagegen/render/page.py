# render/page.py
from __future__ import annotations
from typing import List

from markupsafe import Markup

from pagegen.render.blocks import ENV
from pagegen.schemas.content import GeneratedContent
from pagegen.schemas.layout import BlockMapping


def assemble_page(
    content: GeneratedContent,
    mapping: BlockMapping,
    fragments: List[str],
    query: str,
    layout_id: str,
) -> str:
    """Full HTML document from the already-streamed block fragments, in slot order."""
    sections = []
    for binding, html in zip(mapping.bindings, fragments):
        sections.append(
            {
                "style": binding.slot.section_style if binding.slot.section_style != "default" else None,
                "width": binding.slot.width,
                "html": Markup(html),
            }
        )
    return ENV.get_template("page.html").render(
        title=content.meta.title or content.headline,
        description=content.meta.description or content.subheadline,
        query=query,
        layout_id=layout_id,
        sections=sections,
        citations=[c for c in content.citations if c.source_url],
    )
