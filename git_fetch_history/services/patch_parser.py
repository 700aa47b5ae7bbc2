"""Turns git's unified patch text into ordered diff chunks."""

from typing import List, Optional

from ..models import ChunkType, DiffChunk

_LINE_TYPES = {
    "+": ChunkType.ADDED,
    "-": ChunkType.REMOVED,
    " ": ChunkType.UNCHANGED,
}


def parse_patch_chunks(patch_text: str) -> List[DiffChunk]:
    """
    Split the hunks of a single-file unified diff into chunks.

    A chunk is a run of consecutive lines with the same prefix. Each line
    keeps its newline, except where git marks "No newline at end of file".
    A hunk header always ends the current run, since the lines between two
    hunks are unchanged. Anything before the first hunk header is ignored.
    """
    chunks: List[DiffChunk] = []
    current_type: Optional[ChunkType] = None
    lines: List[str] = []

    def flush():
        nonlocal current_type, lines
        if current_type is not None and lines:
            chunks.append(DiffChunk(type=current_type, content="".join(lines)))
        current_type = None
        lines = []

    raw_lines = patch_text.split("\n")
    if raw_lines and raw_lines[-1] == "":
        raw_lines.pop()

    in_hunk = False
    for raw in raw_lines:
        if raw.startswith("@@"):
            flush()
            in_hunk = True
            continue
        if not in_hunk:
            continue
        if raw.startswith("\\"):
            # "\ No newline at end of file" applies to the previous line
            if lines and lines[-1].endswith("\n"):
                lines[-1] = lines[-1][:-1]
            continue

        line_type = _LINE_TYPES.get(raw[:1], ChunkType.UNCHANGED)
        if line_type != current_type:
            flush()
            current_type = line_type
        lines.append(raw[1:] + "\n")

    flush()
    return chunks
