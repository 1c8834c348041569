from typing import List, Tuple

from richtext_engine.document import Alignment, BlockType, Document
from richtext_engine.html import HtmlParser, parse
from richtext_engine.html.parser import parse_alignment


def span_shape(document: Document, block_index: int = 0) -> List[Tuple[str, bool]]:
    return [(span.text, span.bold) for span in document.blocks[block_index].spans]


def test_empty_input_yields_one_empty_paragraph() -> None:
    for html in ("", "   ", None):
        document = parse(html)
        assert document.block_count == 1
        assert document.blocks[0].is_paragraph
        assert document.blocks[0].plain_text == ""


def test_paragraph_with_bold_run() -> None:
    document = parse("<p>Hello <b>World</b></p>")

    assert document.block_count == 1
    assert span_shape(document) == [("Hello ", False), ("World", True)]


def test_inline_tag_synonyms_map_to_flags() -> None:
    document = parse(
        "<p><strong>a</strong><em>b</em><ins>c</ins><del>d</del>"
        "<sup>e</sup><sub>f</sub></p>"
    )
    spans = document.blocks[0].spans

    assert [span.text for span in spans] == ["a", "b", "c", "d", "e", "f"]
    assert spans[0].bold and spans[1].italic and spans[2].underline
    assert spans[3].strikethrough and spans[4].superscript and spans[5].subscript


def test_nested_formatting_accumulates() -> None:
    document = parse("<p><b>x<i>y</i></b></p>")
    bold, both = document.blocks[0].spans

    assert (bold.text, bold.bold, bold.italic) == ("x", True, False)
    assert (both.text, both.bold, both.italic) == ("y", True, True)


def test_headings_and_alignment() -> None:
    document = parse(
        '<h2 style="text-align: center">Title</h2>'
        '<p style="color: red; text-align:RIGHT">Body</p>'
        "<div>Plain</div>"
    )

    assert [block.block_type for block in document.blocks] == [
        BlockType.HEADING2,
        BlockType.PARAGRAPH,
        BlockType.PARAGRAPH,
    ]
    assert document.blocks[0].alignment is Alignment.CENTER
    assert document.blocks[1].alignment is Alignment.RIGHT
    assert document.blocks[2].alignment is Alignment.LEFT


def test_parse_alignment_ignores_unknown_values() -> None:
    assert parse_alignment("text-align: middle") is Alignment.LEFT
    assert parse_alignment(None) is Alignment.LEFT
    assert parse_alignment("text-align: left; text-align: justify") is Alignment.JUSTIFY


def test_links_carry_href() -> None:
    document = parse('<p>see <a href="https://example.com">docs</a></p>')
    plain, link = document.blocks[0].spans

    assert plain.link_url is None
    assert link.text == "docs"
    assert link.link_url == "https://example.com"


def test_top_level_inline_content_becomes_one_paragraph() -> None:
    document = parse("Hello <b>World</b>")

    assert document.block_count == 1
    assert span_shape(document) == [("Hello ", False), ("World", True)]


def test_break_inside_text_is_newline() -> None:
    document = parse("<p>one<br>two</p>")

    assert document.blocks[0].plain_text == "one\ntwo"


def test_standalone_break_is_empty_paragraph() -> None:
    document = parse("<p>a</p><br><p>b</p>")

    assert [block.plain_text for block in document.blocks] == ["a", "", "b"]


def test_whitespace_between_blocks_is_ignored() -> None:
    document = parse("<p>a</p>\n  <p>b</p>\n")

    assert [block.plain_text for block in document.blocks] == ["a", "b"]


def test_container_with_blocks_is_walked_at_block_level() -> None:
    document = parse("<section><p>a</p><h1>b</h1></section>")

    assert [block.tag for block in document.blocks] == ["p", "h1"]


def test_noise_and_comments_are_dropped() -> None:
    document = parse(
        "<!DOCTYPE html><html><head><title>t</title><style>p{}</style></head>"
        "<body><!-- note --><p>kept</p><script>bad()</script></body></html>"
    )

    assert document.block_count == 1
    assert document.blocks[0].plain_text == "kept"


def test_unknown_tags_are_transparent() -> None:
    document = parse("<p><span class='x'>in</span><font>side</font></p>")

    assert document.blocks[0].plain_text == "inside"
    assert len(document.blocks[0].spans) == 1


def test_entities_are_decoded() -> None:
    document = parse("<p>a &amp; b &lt;c&gt;</p>")

    assert document.blocks[0].plain_text == "a & b <c>"


def test_malformed_markup_degrades() -> None:
    document = HtmlParser().parse("<p>unclosed <b>bold")

    assert document.blocks[0].plain_text == "unclosed bold"
    assert document.blocks[0].spans[-1].bold


def test_parsed_document_is_normalized() -> None:
    document = parse("<p><b>a</b><b>b</b><i></i></p>")

    assert span_shape(document) == [("ab", True)]


def test_bold_wrapping_blocks_formats_every_block() -> None:
    document = parse("<b>x<p>y</p></b>")

    assert [block.tag for block in document.blocks] == ["p", "p"]
    assert span_shape(document, 0) == [("x", True)]
    assert span_shape(document, 1) == [("y", True)]


def test_link_wrapping_block_keeps_href() -> None:
    document = parse('<a href="https://e.com"><p>y</p></a>')

    span = document.blocks[0].spans[0]
    assert span.text == "y"
    assert span.link_url == "https://e.com"


def test_format_flows_through_nested_containers() -> None:
    document = parse("<i><div><h2>T<b>u</b></h2></div></i>")
    title, bold = document.blocks[0].spans

    assert document.blocks[0].block_type is BlockType.HEADING2
    assert (title.text, title.italic, title.bold) == ("T", True, False)
    assert (bold.text, bold.italic, bold.bold) == ("u", True, True)


def test_top_level_break_between_text_stays_in_one_paragraph() -> None:
    document = parse("a<br>b")

    assert document.block_count == 1
    assert document.blocks[0].plain_text == "a\nb"


def test_break_inside_formatting_carries_the_format() -> None:
    document = parse("<b>a<br>b</b>")

    assert span_shape(document) == [("a\nb", True)]
