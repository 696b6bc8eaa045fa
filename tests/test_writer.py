import json

from NoteBlocks.markdown_parser import parse_markdown
from NoteBlocks.markdown_writer import render_markdown
from NoteBlocks.model import (
    CalloutBlock,
    CodeBlock,
    DiagramBlock,
    Document,
    Heading,
    InlineBold,
    InlineStrike,
    InlineText,
    ListBlock,
    ListItem,
    OpaqueBlock,
    Paragraph,
    QuoteBlock,
    TableBlock,
)


def test_render_is_stable_and_reparses_to_same_blocks(sample_note):
    document = parse_markdown(sample_note)
    rendered = render_markdown(document)
    assert rendered.endswith("\n") and not rendered.endswith("\n\n")
    assert parse_markdown(rendered) == document
    assert render_markdown(parse_markdown(rendered)) == rendered


def test_heading_and_empty_heading():
    assert render_markdown(Document(blocks=[Heading(level=2, inline=[InlineText("Hi")])])) == "## Hi\n"
    rendered = render_markdown(Document(blocks=[Heading(level=3)]))
    assert rendered == "### \n"
    (heading,) = parse_markdown(rendered).blocks
    assert heading.level == 3 and heading.inline == []


def test_table_rows_are_padded():
    block = TableBlock(rows=[["a", "b", "c"], ["d", "e"], ["f"]])
    lines = render_markdown(Document(blocks=[block])).splitlines()
    assert lines == [
        "| a | b | c |",
        "| --- | --- | --- |",
        "| d | e |  |",
        "| f |  |  |",
    ]


def test_table_without_headings_gets_blank_header():
    rendered = render_markdown(Document(blocks=[TableBlock(rows=[["a", "b"]], with_headings=False)]))
    assert rendered == "|  |  |\n| --- | --- |\n| a | b |\n"
    (table,) = parse_markdown(rendered).blocks
    assert table.rows == [["", ""], ["a", "b"]]


def test_callout_marker_is_reemitted():
    block = CalloutBlock(kind="warning", message=[InlineText("message line")])
    assert render_markdown(Document(blocks=[block])) == "> [!WARNING]\n> message line\n"


def test_paragraph_block_markers_are_escaped():
    for text in ["# not heading", "1. not list", "- not bullet", "> not quote", "---", "<div>"]:
        rendered = render_markdown(Document(blocks=[Paragraph(inline=[InlineText(text)])]))
        (block,) = parse_markdown(rendered).blocks
        assert isinstance(block, Paragraph), text
        assert block.inline == [InlineText(text)]


def test_nested_list_round_trip():
    block = ListBlock(
        style="unordered",
        items=[
            ListItem(inline=[InlineText("a")]),
            ListItem(
                inline=[InlineText("b")],
                items=[ListItem(inline=[InlineText("nest1")]), ListItem(inline=[InlineText("nest2")])],
            ),
            ListItem(inline=[InlineText("c")]),
        ],
    )
    rendered = render_markdown(Document(blocks=[block]))
    assert rendered == "- a\n- b\n  - nest1\n  - nest2\n- c\n"
    assert parse_markdown(rendered).blocks == [block]


def test_empty_list_items_survive_a_round_trip():
    block = ListBlock(
        style="unordered",
        items=[ListItem(inline=[InlineText("a")]), ListItem(), ListItem(inline=[InlineText("b")])],
    )
    rendered = render_markdown(Document(blocks=[block]))
    assert rendered == "- a\n-\n- b\n"
    assert parse_markdown(rendered).blocks == [block]

    ordered = ListBlock(style="ordered", items=[ListItem(), ListItem(inline=[InlineText("two")])])
    rendered = render_markdown(Document(blocks=[ordered]))
    assert rendered == "1.\n2. two\n"
    assert parse_markdown(rendered).blocks == [ordered]

    checklist = ListBlock(style="checklist", items=[ListItem(checked=True)])
    assert render_markdown(Document(blocks=[checklist])) == "- [x]\n"
    assert parse_markdown("- [x]\n").blocks == [checklist]


def test_bare_marker_paragraph_is_escaped():
    for text in ["-", "*", "1."]:
        rendered = render_markdown(Document(blocks=[Paragraph(inline=[InlineText(text)])]))
        assert parse_markdown(rendered).blocks == [Paragraph(inline=[InlineText(text)])], text


def test_punctuated_emphasis_round_trip():
    paragraph = Paragraph(inline=[InlineText("x"), InlineBold([InlineText("a.")]), InlineText("b")])
    rendered = render_markdown(Document(blocks=[paragraph]))
    assert rendered == "x**a.**b\n"
    assert parse_markdown(rendered).blocks == [paragraph]

    struck = Paragraph(inline=[InlineText("x"), InlineStrike([InlineText("(a)")]), InlineText("y")])
    rendered = render_markdown(Document(blocks=[struck]))
    assert rendered == "x~~(a)~~y\n"
    assert parse_markdown(rendered).blocks == [struck]


def test_quote_starting_with_callout_marker_stays_a_quote():
    block = QuoteBlock(text="[!NOTE] literally")
    rendered = render_markdown(Document(blocks=[block]))
    assert rendered == "> \\[!NOTE] literally\n"
    assert parse_markdown(rendered).blocks == [block]

    already_escaped = QuoteBlock(text="\\[!TIP] kept")
    assert parse_markdown(render_markdown(Document(blocks=[already_escaped]))).blocks == [already_escaped]


def test_empty_quote_is_kept():
    rendered = render_markdown(Document(blocks=[QuoteBlock(text="")]))
    assert rendered == ">\n"
    assert parse_markdown(rendered).blocks == [QuoteBlock(text="")]


def test_fence_outgrows_backticks_in_code():
    block = CodeBlock(language="md", code="a\n```\nb")
    rendered = render_markdown(Document(blocks=[block]))
    assert rendered == "````md\na\n```\nb\n````\n"
    assert parse_markdown(rendered).blocks == [block]


def test_fences():
    doc = Document(blocks=[DiagramBlock(code="graph TD\n"), CodeBlock(language="py", code="x = 1  ")])
    assert render_markdown(doc) == "```mermaid\ngraph TD\n```\n\n```py\nx = 1\n```\n"


def test_unknown_block_uses_json_fence():
    rendered = render_markdown(Document(blocks=[OpaqueBlock(type_name="image", data={"url": "x"})]))
    assert rendered.startswith("```json\n")
    body = rendered[len("```json\n"):-len("\n```\n")]
    assert json.loads(body) == {"type": "image", "data": {"url": "x"}}


def test_empty_document():
    assert render_markdown(Document(blocks=[])) == "\n"
