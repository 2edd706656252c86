# app/rendering/markdown_parser.py
"""
Line-oriented markdown mini-parser for the free-text recipe variant.

Understands only what the markdown prompt asks the model for: `## ` and
`### ` headings, `- `/`* ` bullets, `1. ` numbered items and plain
paragraphs. Consecutive list items of the same kind are grouped into one
list block.
"""

from __future__ import annotations

import re
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

BlockKind = Literal["heading", "paragraph", "unordered_list", "ordered_list"]

_ORDERED_ITEM = re.compile(r"^\d+\.\s")


class Block(BaseModel):
    kind: BlockKind
    level: Optional[int] = None   # headings only: 2 or 3
    text: Optional[str] = None    # headings and paragraphs
    items: List[str] = Field(default_factory=list)


def parse_markdown(markdown: str) -> List[Block]:
    blocks: List[Block] = []
    list_items: List[str] = []
    list_kind: Optional[BlockKind] = None

    def close_list() -> None:
        nonlocal list_items, list_kind
        if list_items and list_kind:
            blocks.append(Block(kind=list_kind, items=list_items))
        list_items = []
        list_kind = None

    def collect(kind: BlockKind, item: str) -> None:
        nonlocal list_kind
        if list_kind != kind:
            close_list()
            list_kind = kind
        list_items.append(item)

    for line in (markdown or "").split("\n"):
        line = line.strip()

        if line.startswith("## "):
            close_list()
            blocks.append(Block(kind="heading", level=2, text=line[3:]))
        elif line.startswith("### "):
            close_list()
            blocks.append(Block(kind="heading", level=3, text=line[4:]))
        elif line.startswith("- ") or line.startswith("* "):
            collect("unordered_list", line[2:])
        elif _ORDERED_ITEM.match(line):
            collect("ordered_list", _ORDERED_ITEM.sub("", line, count=1))
        elif line:
            close_list()
            blocks.append(Block(kind="paragraph", text=line))

    close_list()
    return blocks


def to_markdown(blocks: List[Block]) -> str:
    """Flatten blocks back to canonical markdown (`-` bullets, renumbered steps)."""
    lines: List[str] = []
    for block in blocks:
        if block.kind == "heading":
            lines.append(f"{'#' * (block.level or 2)} {block.text}")
        elif block.kind == "paragraph":
            lines.append(block.text or "")
        elif block.kind == "unordered_list":
            lines.extend(f"- {item}" for item in block.items)
        else:
            lines.extend(f"{n}. {item}" for n, item in enumerate(block.items, start=1))
    return "\n".join(lines)
