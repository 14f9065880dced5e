"""Build the complete multi-device PDF for one article."""

import logging
from typing import Optional

from common.config import AppConfig
from common.utils import present
from extract_article.models import ArticleRecord
from render_document.images import fetch_feature_image
from render_document.layout import DEFAULT_TITLE, render_article, render_index_page
from render_document.surface import PdfSurface

logger = logging.getLogger(__name__)


def assemble(
    article: ArticleRecord,
    config: AppConfig,
    image: Optional[bytes] = None,
    fetch_image: bool = True,
) -> bytes:
    """Render the index page and one section per device profile.

    The feature image is fetched once and shared by every section. A missing
    or broken image never stops the document from being produced.
    """
    if image is None and fetch_image and present(article.feature_image_url):
        image = fetch_feature_image(article.feature_image_url, config)

    surface = PdfSurface(
        title=article.title or DEFAULT_TITLE,
        author=article.author if present(article.author) else None,
    )

    render_index_page(
        surface,
        article,
        config.profile(config.index_profile),
        config.device_profiles,
        image,
    )
    for profile in config.device_profiles:
        logger.info("Rendering section for %s", profile.name)
        render_article(surface, profile, article, image)

    logger.info("Finalizing PDF (%d pages)", surface.page_count)
    return surface.finish()
