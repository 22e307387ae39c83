#!/usr/bin/env python3
"""
entry_parser.py — Parse ranked vocabulary list text into entries.

Input format (blocks separated by one or more blank lines):

    1 run
    v. ["跑","奔"]  n. ["跑步"]

    2 apple
    n. ["苹果"]

The first line of a block carries the frequency rank and headword. The
first following line that looks like a definition line (contains `["`
and a part-of-speech abbreviation) is split into `<pos>. [<sense>]`
pairs.

Blocks that don't fit the format are skipped without error. The
detection is a heuristic: headwords or senses containing bracket
characters can be misread.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional


BLOCK_SEPARATOR = re.compile(r'\n\s*\n')
TITLE_PATTERN = re.compile(r'^([0-9]+)\s+(.+)$')
DEFINITION_PATTERN = re.compile(r'([a-z]+\.)\s*(\[[^\]]+\])')

# Substrings that mark a line as carrying part-of-speech definitions
POS_MARKERS = ('n.', 'adj.', 'v.', 'adv.', 'prep.', 'conj.')

MISC_POS = 'misc'


@dataclass
class Definition:
    """One sense of an entry, as written in the source list."""
    part_of_speech: str
    raw_sense: str


@dataclass
class Entry:
    """A parsed vocabulary item prior to enrichment."""
    rank: str
    headword: str
    definitions: List[Definition] = field(default_factory=list)
    raw_sense_line: str = ""


def is_definition_line(line: str) -> bool:
    """Check whether a line looks like `pos. ["sense"]` definitions."""
    return '["' in line and any(marker in line for marker in POS_MARKERS)


def parse_definitions(line: str) -> List[Definition]:
    """Split a definition line into (pos, sense) pairs, left to right."""
    definitions = [
        Definition(part_of_speech=match.group(1).replace('.', '', 1),
                   raw_sense=match.group(2))
        for match in DEFINITION_PATTERN.finditer(line)
    ]

    # A bare bracketed sense with no recognizable abbreviation
    if not definitions and line.startswith('['):
        definitions.append(Definition(part_of_speech=MISC_POS, raw_sense=line))

    return definitions


def parse_block(block: str) -> Optional[Entry]:
    """Parse one blank-line separated block, or None if it doesn't fit."""
    lines = [line.strip() for line in block.split('\n')]
    lines = [line for line in lines if line]
    if len(lines) < 2:
        return None

    title = TITLE_PATTERN.match(lines[0])
    if not title:
        return None

    sense_line = next((line for line in lines[1:] if is_definition_line(line)), None)
    definitions = parse_definitions(sense_line) if sense_line else []

    return Entry(
        rank=title.group(1),
        headword=title.group(2),
        definitions=definitions,
        raw_sense_line=sense_line or "",
    )


def parse(text: str) -> List[Entry]:
    """
    Parse vocabulary list text into entries, in block order.

    Args:
        text: Raw file contents

    Returns:
        Entries for every well-formed block; malformed blocks are omitted
    """
    entries = []
    for block in BLOCK_SEPARATOR.split(text):
        entry = parse_block(block)
        if entry is not None:
            entries.append(entry)
    return entries


def parse_file(path: Path) -> List[Entry]:
    """Read a UTF-8 vocabulary list file and parse it."""
    with open(path, 'r', encoding='utf-8', errors='replace') as f:
        return parse(f.read())
