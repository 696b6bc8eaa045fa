import textwrap

from NoteBlocks.extract import document_outline, linked_targets
from NoteBlocks.markdown_parser import parse_markdown

NOTE = textwrap.dedent(
    """\
    # Intro

    See [[a]] and [[b|B]].

    ## Next Steps!

    - [[c]]
      - [[a]]

    > [!TIP]
    > Try [[e#Setup]]

    | x | [[d]] |
    | --- | --- |
    """
)


def test_outline():
    assert document_outline(parse_markdown(NOTE)) == [
        (1, "Intro", "intro"),
        (2, "Next Steps!", "next-steps"),
    ]


def test_linked_targets_are_ordered_and_unique():
    assert linked_targets(parse_markdown(NOTE)) == ["a", "b", "c", "e#Setup", "d"]
