"""
Render a (possibly edited) slide deck into downloadable artifacts.

The HTML export is a standalone page with one full-viewport section per slide
and print page breaks, so the browser's print dialog doubles as PDF export.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from jinja2 import Environment

from meeting_summarizer.schemas.deck import SlideDeck

DECK_HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{{ title }}</title>
    <style>
        * { margin: 0; padding: 0; box-sizing: border-box; }
        body {
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            background: #0a0a0a;
            color: #ffffff;
            overflow-x: hidden;
        }
        .presentation-container { display: flex; flex-direction: column; min-height: 100vh; }
        .presentation-slide {
            min-height: 100vh;
            padding: 4rem;
            display: flex;
            flex-direction: column;
            justify-content: center;
            align-items: center;
            text-align: center;
            border-bottom: 2px solid #333;
            page-break-after: always;
        }
        .presentation-slide h2 {
            font-size: 3rem;
            margin-bottom: 3rem;
            background: linear-gradient(135deg, #6366f1 0%, #8b5cf6 100%);
            -webkit-background-clip: text;
            -webkit-text-fill-color: transparent;
            background-clip: text;
        }
        .presentation-slide ul { list-style: none; text-align: left; max-width: 800px; }
        .presentation-slide li {
            font-size: 1.5rem;
            padding: 1rem 0 1rem 2rem;
            position: relative;
            color: #a0a0a0;
        }
        .presentation-slide li::before {
            content: "\\25B8";
            position: absolute;
            left: 0;
            color: #6366f1;
            font-weight: bold;
        }
        @media print {
            body { background: #ffffff; color: #000000; }
            .presentation-slide { page-break-after: always; border-bottom: none; }
            .presentation-slide li { color: #333333; }
        }
    </style>
</head>
<body>
    <div class="presentation-container">
    {%- for slide in slides %}
        <section class="presentation-slide">
            <h2>{{ slide.title }}</h2>
            <ul>{% for point in slide.points %}<li>{{ point }}</li>{% endfor %}</ul>
        </section>
    {%- endfor %}
    </div>
    {%- if print_on_load %}
    <script>window.addEventListener("load", function () { window.print(); });</script>
    {%- endif %}
</body>
</html>
"""

_env = Environment(autoescape=True, keep_trailing_newline=True)
_deck_template = _env.from_string(DECK_HTML_TEMPLATE)


def render_deck_html(
    deck: SlideDeck, *, title: str = "Meeting Presentation", print_on_load: bool = False
) -> str:
    """With ``print_on_load`` the page opens the print dialog as soon as it loads."""
    return _deck_template.render(title=title, slides=deck.slides, print_on_load=print_on_load)


def render_summary_text(deck: SlideDeck) -> str:
    return deck.summary.strip() + "\n"


def presentation_filename(today: Optional[date] = None) -> str:
    return f"presentation-{(today or date.today()).isoformat()}.html"


def print_filename(today: Optional[date] = None) -> str:
    return f"presentation-print-{(today or date.today()).isoformat()}.html"


def summary_filename(today: Optional[date] = None) -> str:
    return f"meeting-summary-{(today or date.today()).isoformat()}.txt"
