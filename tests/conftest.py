import textwrap

import pytest

SAMPLE_NOTE = textwrap.dedent(
    """
    # Title

    Text with **bold** and [[notes/today]].

    - a
    - b
      - nest1
      - nest2
    - c

    > [!WARNING]
    > message line

    > quoted
    > > nested

    | A | B |
    | --- | --- |
    | 1 | 2 |

    ```python
    print("x")
    ```

    ```mermaid
    graph TD
    ```

    ---

    <div>html</div>
    """
)


@pytest.fixture
def sample_note() -> str:
    return SAMPLE_NOTE
