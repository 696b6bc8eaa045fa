from NoteBlocks import markdown_parser
from NoteBlocks.inline import inline_to_text
from NoteBlocks.model import (
    CalloutBlock,
    CodeBlock,
    DiagramBlock,
    Heading,
    HorizontalRule,
    InlineBold,
    InlineWikilink,
    ListBlock,
    Paragraph,
    QuoteBlock,
    RawBlock,
    TableBlock,
)


def test_parse_block_kinds_in_order(sample_note):
    document = markdown_parser.parse_markdown(sample_note)
    kinds = [type(block) for block in document.blocks]
    assert kinds == [
        Heading,
        Paragraph,
        ListBlock,
        CalloutBlock,
        QuoteBlock,
        TableBlock,
        CodeBlock,
        DiagramBlock,
        HorizontalRule,
        RawBlock,
    ]


def test_parse_block_payloads(sample_note):
    blocks = markdown_parser.parse_markdown(sample_note).blocks
    assert blocks[0].level == 1
    assert inline_to_text(blocks[0].inline) == "Title"
    assert any(isinstance(node, InlineBold) for node in blocks[1].inline)
    assert InlineWikilink(target="notes/today") in blocks[1].inline
    assert blocks[3].kind == "WARNING"
    assert inline_to_text(blocks[3].message) == "message line"
    assert blocks[4].text == "quoted\n> nested"
    assert blocks[5].rows == [["A", "B"], ["1", "2"]]
    assert blocks[5].with_headings is True
    assert blocks[6].language == "python"
    assert blocks[6].code == 'print("x")'
    assert blocks[7].code == "graph TD"
    assert blocks[9].markdown == "<div>html</div>"


def test_nested_list_tree():
    document = markdown_parser.parse_markdown("- a\n- b\n  - nest1\n  - nest2\n- c")
    (block,) = document.blocks
    assert block.style == "unordered"
    assert [inline_to_text(item.inline) for item in block.items] == ["a", "b", "c"]
    assert [inline_to_text(child.inline) for child in block.items[1].items] == ["nest1", "nest2"]
    assert block.items[0].items == []


def test_checklist_and_ordered_lists():
    document = markdown_parser.parse_markdown("- [x] done\n- [ ] todo\n\n1. one\n2. two")
    checklist, ordered = document.blocks
    assert checklist.style == "checklist"
    assert [item.checked for item in checklist.items] == [True, False]
    assert ordered.style == "ordered"
    assert len(ordered.items) == 2


def test_callout_alias_and_inline_lead():
    (block,) = markdown_parser.parse_markdown("> [!caution] Careful\n> second").blocks
    assert isinstance(block, CalloutBlock)
    assert block.kind == "WARNING"
    assert inline_to_text(block.message) == "Careful\nsecond"


def test_unterminated_fence_runs_to_end():
    (block,) = markdown_parser.parse_markdown("```\ncode\nmore").blocks
    assert isinstance(block, CodeBlock)
    assert block.language == ""
    assert block.code == "code\nmore"


def test_single_column_table_is_raw():
    (block,) = markdown_parser.parse_markdown("| a |\n| --- |").blocks
    assert isinstance(block, RawBlock)
    assert block.markdown == "| a |\n| --- |"


def test_ragged_table_rows_are_padded():
    (block,) = markdown_parser.parse_markdown("| a | b | c |\n| --- | --- | --- |\n| 1 |").blocks
    assert block.rows == [["a", "b", "c"], ["1", "", ""]]


def test_indented_text_is_raw():
    (block,) = markdown_parser.parse_markdown("    indented code").blocks
    assert isinstance(block, RawBlock)
    assert block.markdown == "    indented code"


def test_paragraph_stops_at_block_start():
    document = markdown_parser.parse_markdown("line one\nline two\n# Heading")
    paragraph, heading = document.blocks
    assert inline_to_text(paragraph.inline) == "line one\nline two"
    assert isinstance(heading, Heading)


def test_crlf_and_empty_heading():
    document = markdown_parser.parse_markdown("##\r\n\r\ntext\r\n")
    heading, paragraph = document.blocks
    assert heading.level == 2
    assert heading.inline == []
    assert inline_to_text(paragraph.inline) == "text"


def test_empty_input():
    assert markdown_parser.parse_markdown("").blocks == []
    assert markdown_parser.parse_markdown("\n\n   \n").blocks == []
