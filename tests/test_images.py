"""Tests for pagetype.services.images.extract_image_refs."""

from types import SimpleNamespace

from pagetype.models.media import UNKNOWN_AREA
from pagetype.services.images import extract_image_refs


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _block(text: str, is_content: bool = True):
    return SimpleNamespace(
        text=text, num_words=len(text.split()), link_density=0.0, is_content=is_content
    )


def _doc(*blocks):
    return SimpleNamespace(text_blocks=list(blocks))


_HTML = """
<html><body>
  <nav><a href="/">Home</a> <img src="/logo.png"> Site navigation menu</nav>
  <article>
    <p>The quick brown fox jumps over the lazy dog, again and again.</p>
    <figure><img src="/photos/fox.jpg" width="800" height="600" alt=" A fox "></figure>
    <img data-src="/photos/lazy.jpg">
    <img src="data:image/png;base64,AAAA">
  </article>
  <footer>Copyright notice <img src="/footer.png"></footer>
</body></html>
"""


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

class TestExtractImageRefs:
    def test_only_images_near_content(self):
        doc = _doc(
            _block("Site navigation menu", is_content=False),
            _block("The quick brown fox jumps over the lazy dog, again and again."),
            _block("Copyright notice", is_content=False),
        )
        images = extract_image_refs(doc, _HTML)
        assert [i.src for i in images] == ["/photos/fox.jpg", "/photos/lazy.jpg"]

    def test_attributes_are_read(self):
        doc = _doc(_block("The quick brown fox jumps over the lazy dog"))
        fox = extract_image_refs(doc, _HTML)[0]
        assert fox.width == 800
        assert fox.height == 600
        assert fox.area == 480_000
        assert fox.alt == "A fox"

    def test_missing_dimensions_are_unknown(self):
        doc = _doc(_block("The quick brown fox jumps over the lazy dog"))
        lazy = extract_image_refs(doc, _HTML)[1]
        assert lazy.width is None
        assert lazy.area == UNKNOWN_AREA
        assert lazy.alt is None

    def test_boilerplate_only_document_has_no_images(self):
        doc = _doc(_block("Site navigation menu", is_content=False))
        assert extract_image_refs(doc, _HTML) == []

    def test_content_in_footer_picks_footer_image(self):
        doc = _doc(_block("Copyright notice"))
        assert [i.src for i in extract_image_refs(doc, _HTML)] == ["/footer.png"]

    def test_punctuation_differences_are_ignored(self):
        html = "<div><p>Hello <b>world</b>!</p><img src='/x.png'></div>"
        doc = _doc(_block("Hello world!"))
        assert [i.src for i in extract_image_refs(doc, html)] == ["/x.png"]

    def test_empty_html(self):
        assert extract_image_refs(_doc(_block("anything")), "") == []
