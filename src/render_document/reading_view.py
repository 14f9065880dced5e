"""Standalone HTML reading view of an article."""

from html import escape

from common.html_tree import sanitize_html
from common.utils import present
from extract_article.models import ArticleRecord

PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{title}</title>
<style>
body {{ font-family: Georgia, "Times New Roman", serif; max-width: 42rem; margin: 2rem auto; padding: 0 1rem; line-height: 1.6; }}
h1 {{ font-family: Helvetica, Arial, sans-serif; }}
.meta {{ text-align: center; font-style: italic; color: #555; margin-bottom: 2rem; }}
.feature {{ width: 100%; margin-bottom: 2rem; }}
blockquote {{ font-style: italic; margin-left: 1.5rem; }}
</style>
</head>
<body>
<article>
<h1>{title}</h1>
{meta}{image}{body}
</article>
</body>
</html>
"""


def render_reading_html(article: ArticleRecord) -> str:
    """Title, meta line, feature image and sanitized body as one HTML page."""
    title = escape(article.title or "Untitled Article")

    meta_parts = [
        value.strip()
        for value in (article.author, article.publication_name, article.publication_date)
        if present(value)
    ]
    meta = f'<div class="meta">{escape(" | ".join(meta_parts))}</div>\n' if meta_parts else ""

    image = ""
    if present(article.feature_image_url):
        image = f'<img class="feature" src="{escape(article.feature_image_url)}" alt="Feature Image">\n'

    return PAGE_TEMPLATE.format(
        title=title,
        meta=meta,
        image=image,
        body=sanitize_html(article.article_body_html),
    )
