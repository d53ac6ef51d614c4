# tests/test_html_parser.py

from services.html_parser import has_analytics_snippet, parse_html


def test_parse_html_basic_fields(sample_html):
    details = parse_html("https://example.com/blog/post", sample_html)

    assert details.title == "Example Blog - Technology and Finance Notes"
    assert details.description == "A blog about technology and finance for curious readers."
    assert details.keywords == "tech, money"
    assert details.robots == "index, follow"
    assert details.author == "Example Team"
    assert details.og_tags.title == "Example Blog"
    assert details.og_tags.image is None

    assert details.headings.h1 == ["Technology notes"]
    assert details.headings.h2 == ["First", "Second"]
    assert details.headings.h3 == ["Detail"]


def test_parse_html_counts(sample_html):
    details = parse_html("https://example.com/blog/post", sample_html)

    # alt="" は「alt あり」として扱う
    assert details.images.total == 3
    assert details.images.without_alt == 1
    assert details.image_paths == ["/a.png", "/b.png", "/c.png"]

    assert details.resources.css == 2
    assert details.resources.js == 1
    assert details.resources.inline_scripts == 1
    assert details.resources.inline_styles == 2

    assert len(details.anchors) == 6
    twitter = [a for a in details.anchors if "twitter" in a.href][0]
    assert twitter.rel == "nofollow noopener"


def test_parse_html_flags(sample_html):
    details = parse_html("https://example.com/blog/post", sample_html)

    assert details.structure.has_doctype
    assert details.structure.has_html_lang
    assert details.structure.has_main_tag
    assert details.structure.has_header_tag
    assert details.structure.has_footer_tag
    assert details.structure.has_nav_tag

    assert details.meta.has_viewport
    assert details.meta.has_charset
    assert details.meta.has_keywords
    assert details.meta.has_open_graph
    assert details.meta.has_favicon

    assert details.security.has_csp
    assert not details.security.has_hsts
    assert not details.security.has_x_frame

    assert details.accessibility.has_aria_labels
    assert not details.accessibility.has_alt_text
    assert details.accessibility.has_skip_links
    assert details.accessibility.has_lang_attribute
    assert details.accessibility.has_accessible_forms

    assert details.has_structured_data
    assert details.has_canonical
    assert details.has_analytics


def test_parse_html_body_text_excludes_scripts(sample_html):
    details = parse_html("https://example.com/blog/post", sample_html)

    assert "We write about technology and finance." in details.body_text
    assert "dataLayer" not in details.body_text
    assert details.word_count == len(details.body_text.split())
    assert 0 < details.text_to_html_ratio_percent < 100
    assert details.html_size_bytes == len(sample_html.encode("utf-8"))


def test_parse_html_minimal_document_defaults():
    details = parse_html("https://example.com/", "<html><body><p>hi</p></body></html>")

    assert details.title is None
    assert details.description is None
    assert not details.structure.has_doctype
    assert not details.meta.has_viewport
    assert not details.meta.has_open_graph
    # 画像もフォームも無いページは違反なし
    assert details.accessibility.has_alt_text
    assert details.accessibility.has_accessible_forms
    assert not details.has_analytics


def test_parse_html_unlabelled_input_fails_form_check():
    html = "<html><body><form><input name='q' type='text'></form></body></html>"
    details = parse_html("https://example.com/", html)
    assert not details.accessibility.has_accessible_forms


def test_parse_html_label_wrapping_input_passes_form_check():
    html = "<html><body><form><label>Query <input name='q'></label></form></body></html>"
    details = parse_html("https://example.com/", html)
    assert details.accessibility.has_accessible_forms


def test_has_analytics_snippet():
    assert has_analytics_snippet("<script src='https://www.google-analytics.com/analytics.js'></script>")
    assert not has_analytics_snippet("<script src='/app.js'></script>")


def test_parse_html_finds_doctype_after_long_leading_comment():
    html = "<!--" + ("x" * 4000) + "-->\n<!DOCTYPE html><html lang=\"en\"><body>hi</body></html>"
    details = parse_html("https://example.com/", html)

    assert details.structure.has_doctype
