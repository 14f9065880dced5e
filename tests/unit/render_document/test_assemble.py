"""Tests for render_document.assemble module."""

from io import BytesIO
from unittest.mock import patch

from pypdf import PdfReader

from common.config import AppConfig
from extract_article.models import ArticleRecord
from render_document.assemble import assemble

CONFIG = AppConfig()

ARTICLE = ArticleRecord(
    title="Paper Displays Come of Age",
    article_body_html="<p>Hello <b>world</b></p><p>Second paragraph.</p>",
    author="Jane Doe",
    publication_name="Example News",
    publication_date="March 3rd, 2024",
    feature_image_url="https://e.com/lead.jpg",
)


class TestAssemble:
    @patch("render_document.assemble.fetch_feature_image")
    def test_produces_index_plus_one_section_per_profile(self, mock_fetch) -> None:
        mock_fetch.return_value = None

        data = assemble(ARTICLE, CONFIG)

        assert data.startswith(b"%PDF")
        reader = PdfReader(BytesIO(data))
        assert len(reader.pages) == 3
        assert reader.metadata.title == "Paper Displays Come of Age"

        index, move_section, pro_section = reader.pages
        assert float(index.mediabox.width) == 1080
        assert round(float(move_section.mediabox.width)) == 636
        assert float(pro_section.mediabox.width) == 1080
        text = pro_section.extract_text()
        assert "Hello" in text
        assert "world" in text

    @patch("render_document.assemble.fetch_feature_image")
    def test_image_fetched_once(self, mock_fetch) -> None:
        mock_fetch.return_value = None

        assemble(ARTICLE, CONFIG)

        mock_fetch.assert_called_once_with("https://e.com/lead.jpg", CONFIG)

    @patch("render_document.assemble.fetch_feature_image")
    def test_fetch_can_be_disabled(self, mock_fetch) -> None:
        assemble(ARTICLE, CONFIG, fetch_image=False)
        mock_fetch.assert_not_called()

    def test_broken_image_still_produces_document(self) -> None:
        data = assemble(ARTICLE, CONFIG, image=b"broken bytes")
        assert len(PdfReader(BytesIO(data)).pages) == 3

    def test_named_destinations_point_at_section_starts(self) -> None:
        reader = PdfReader(BytesIO(assemble(ARTICLE, CONFIG, fetch_image=False)))

        destinations = reader.named_destinations
        assert set(destinations) == {"proMoveStart", "proStart"}
        assert reader.get_destination_page_number(destinations["proMoveStart"]) == 1
        assert reader.get_destination_page_number(destinations["proStart"]) == 2

    def test_metadata_survives_destination_pass(self) -> None:
        reader = PdfReader(BytesIO(assemble(ARTICLE, CONFIG, fetch_image=False)))
        assert reader.metadata.title == "Paper Displays Come of Age"
        assert reader.metadata.author == "Jane Doe"
        assert len(reader.pages[0]["/Annots"].get_object()) == 2
