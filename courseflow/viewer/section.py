"""
Section renderer - HTML for one module page.

Provides:
- Page header with progress
- One, two and three column layouts
- Bullet and numbered lists

Body and column fields hold authored HTML and are emitted as-is;
titles and list items are escaped.
"""

import html

from courseflow.schemas import Layout, Section


def get_section_css() -> str:
    """Get CSS styles for section display."""
    return """
    <style>
    .section-page {
        text-align: right;
        font-weight: 600;
        color: #555;
        margin-bottom: 0.5em;
    }
    .section-title {
        font-size: 1.5em;
        font-weight: 700;
        color: #EAB308;
        margin-bottom: 0.8em;
    }
    .section-subheader {
        font-size: 1.2em;
        font-weight: 600;
        color: #CA8A04;
        margin-bottom: 0.8em;
    }
    .section-columns {
        display: grid;
        gap: 1em;
    }
    .section-columns.col-2 { grid-template-columns: repeat(2, 1fr); }
    .section-columns.col-3 { grid-template-columns: repeat(3, 1fr); }
    .section-image {
        display: block;
        margin: 0 auto 1em auto;
        max-width: 100%;
        border-radius: 8px;
    }
    .section-list li {
        line-height: 2;
    }
    </style>
    """


def render_page_header(step: int, total: int) -> str:
    """Render 'Page n / total'."""
    return f'<div class="section-page">Page {step} / {total}</div>'


def render_item_list(items: list[str], numbered: bool = False) -> str:
    if not items:
        return ""
    tag = "ol" if numbered else "ul"
    rows = "".join(f"<li>{html.escape(item)}</li>" for item in items)
    return f'<{tag} class="section-list">{rows}</{tag}>'


def render_columns(section: Section) -> str:
    """Render the column grid for col-2 / col-3 layouts."""
    columns = [section.col1, section.col2]
    if section.layout == Layout.COL_3:
        columns.append(section.col3)
    cells = "".join(f'<div class="prose">{column or ""}</div>' for column in columns)
    return f'<div class="section-columns {section.layout.value}">{cells}</div>'


def render_section(section: Section) -> str:
    """
    Render a section's content (without question or exam controls).

    Args:
        section: Section to render

    Returns:
        HTML string
    """
    parts = [f'<div class="section-title">{html.escape(section.title)}</div>']

    if section.layout in (Layout.COL_2, Layout.COL_3):
        parts.append(render_columns(section))
        return "".join(parts)

    if section.image:
        parts.insert(0, f'<img class="section-image" src="{html.escape(section.image)}" alt="{html.escape(section.title)}"/>')
    if section.subheader:
        parts.append(f'<div class="section-subheader">{html.escape(section.subheader)}</div>')
    if section.body:
        parts.append(f'<div class="prose">{section.body}</div>')
    parts.append(render_item_list(section.bullet_items))
    parts.append(render_item_list(section.numbered_items, numbered=True))
    return "".join(parts)
