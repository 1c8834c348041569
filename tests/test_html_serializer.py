from richtext_engine.document import Alignment, Block, Document, Span
from richtext_engine.html import parse, serialize
from richtext_engine.html.serializer import escape_attr, escape_text


def make_document(*blocks: Block) -> Document:
    return Document(list(blocks))


def test_empty_document_serializes_to_empty_paragraph() -> None:
    assert serialize(parse("")) == "<p></p>"


def test_bold_run_round_trips_literally() -> None:
    html = "<p>Hello <b>World</b></p>"

    assert serialize(parse(html)) == html


def test_alignment_written_only_when_not_left() -> None:
    document = make_document(
        Block.paragraph([Span.plain("a")]),
        Block.heading(1, [Span.plain("b")], alignment=Alignment.JUSTIFY),
    )

    assert serialize(document) == '<p>a</p><h1 style="text-align: justify">b</h1>'


def test_inline_tags_nest_in_fixed_order() -> None:
    span = Span(
        text="x",
        subscript=True,
        bold=True,
        underline=True,
        italic=True,
        link_url="https://a.test/?q=1&r=2",
    )

    html = serialize(make_document(Block.paragraph([span])))

    assert html == (
        '<p><a href="https://a.test/?q=1&amp;r=2"><b><i><u><sub>x</sub></u></i></b></a></p>'
    )


def test_text_is_escaped() -> None:
    assert escape_text("a<b & c>") == "a&lt;b &amp; c&gt;"
    assert escape_attr('say "hi"') == "say &quot;hi&quot;"
    document = make_document(Block.paragraph([Span.plain("1 < 2 & 3")]))
    assert serialize(document) == "<p>1 &lt; 2 &amp; 3</p>"


def test_newlines_are_emitted_literally() -> None:
    document = make_document(Block.paragraph([Span.plain("a\nb")]))

    assert serialize(document) == "<p>a\nb</p>"


def test_model_only_attributes_are_not_written() -> None:
    span = Span(text="c", font_family="Serif", foreground_color="#f00")

    assert serialize(make_document(Block.paragraph([span]))) == "<p>c</p>"


def test_serialize_parse_serialize_is_stable() -> None:
    sources = [
        "<p>Hello <b>World</b></p>",
        '<h3 style="text-align: right"><i>Title</i></h3><p></p><p>x<sup>2</sup></p>',
        '<p><a href="https://example.com"><b>link</b></a> &amp; more</p>',
        "<p>one<br>two</p><h6>s<s>t</s>u</h6>",
        '<b>x<p>y</p></b><a href="https://e.com"><h2>z</h2></a>',
    ]
    for source in sources:
        first = serialize(parse(source))
        assert serialize(parse(first)) == first


def test_formatting_around_blocks_is_pushed_into_them() -> None:
    html = serialize(parse('<b>x<p>y</p></b><a href="https://e.com"><h2>z</h2></a>'))

    assert html == (
        '<p><b>x</b></p><p><b>y</b></p><h2><a href="https://e.com">z</a></h2>'
    )
