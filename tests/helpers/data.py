"""Shared test data for blobfs tests."""
from __future__ import annotations

LOREM_IPSUM = (
    b"\nLorem ipsum dolor sit amet, consectetur adipiscing elit, sed do eiusmod tempor\n"
    b"incididunt ut labore et dolore magna aliqua. Ut enim ad minim veniam, quis\n"
    b"nostrud exercitation ullamco laboris nisi ut aliquip ex ea commodo consequat.\n"
    b"Duis aute irure dolor in reprehenderit in voluptate velit esse cillum dolore eu\n"
    b"fugiat nulla pariatur. Excepteur sint occaecat cupidatat non proident, sunt in\n"
    b"culpa qui officia deserunt mollit anim id est laborum.\n"
)

CONTAINER = "test-container"
OBJECT_PATH = f"{CONTAINER}/test-object-name"
NOT_FOUND_PATH = f"{CONTAINER}/not-found"

LINE_WIDTH = 100
LINE_COUNT = 512


def numbered_lines(count: int = LINE_COUNT, width: int = LINE_WIDTH) -> list[bytes]:
    """Fixed-width lines like b'17:    xxxx...\\n' so offsets map to line numbers."""
    lines = []
    for lineno in range(1, count + 1):
        head = f"{lineno}:    ".encode()
        filler = bytes((ord("a") + (lineno * 7 + i) % 26) for i in range(width - len(head) - 1))
        lines.append(head + filler + b"\n")
    return lines
