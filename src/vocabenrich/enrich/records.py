"""
Expand parsed entries into exported records.

Each definition of an entry becomes one EnrichedRecord; an entry with
no definitions still yields one record (part of speech "unknown"). Word
level fields (phonetics, inflections, exam tags, picture, video) come
from the lookup response and default to empty values when absent.

Lookup paths used:
    ec.word[0].usphone / ukphone        phonetics
    collins_primary.words.indexforms     inflections
    ec.exam_type                         tags
    pic_dict.pic[0].image                picture
    word_video.word_videos[0].video.*    video cover/title/url
"""

import json
import math
import re
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from vocabenrich import field_extractor
from vocabenrich.entry_parser import Definition, Entry

UNKNOWN_POS = "unknown"
TRANSLATION_SEPARATOR = "；"

US_PHONE_PATH = "ec.word[0].usphone"
UK_PHONE_PATH = "ec.word[0].ukphone"
TRANSLATION_PATH = "translation"
INFLECTIONS_PATH = "collins_primary.words.indexforms"
TAGS_PATH = "ec.exam_type"
IMAGE_PATH = "pic_dict.pic[0].image"
VIDEO_PATH = "word_video.word_videos[0].video"

_OUTER_BRACKETS = re.compile(r'^\[|\]$')


@dataclass
class Video:
    coverUrl: str = ""
    title: str = ""
    url: str = ""


@dataclass
class EnrichedRecord:
    """One exported record: a single sense of a headword plus lookup data."""
    headword: str
    translation: str
    phoneticUS: str
    phoneticUK: str
    partOfSpeech: str
    inflections: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    frequencyRank: int = 0
    imageUrl: str = ""
    video: Video = field(default_factory=Video)

    def to_dict(self) -> dict:
        return asdict(self)


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def format_translation(raw: str) -> str:
    """
    Render a raw bracketed sense for export.

    '["跑","奔"]' -> '跑；奔'. Text that is not valid JSON has its outer
    brackets and quotes stripped instead.
    """
    if not raw:
        return ""
    try:
        parsed = json.loads(raw)
    except ValueError:
        return _OUTER_BRACKETS.sub('', raw).replace('"', '').strip()

    if isinstance(parsed, list):
        return TRANSLATION_SEPARATOR.join(_to_text(item) for item in parsed)
    return _to_text(parsed)


def _get_text(data: Optional[Dict[str, Any]], path: str) -> str:
    return _to_text(field_extractor.get(data, path, ""))


def _get_list(data: Optional[Dict[str, Any]], path: str) -> List[str]:
    value = field_extractor.get(data, path, [])
    return list(value) if isinstance(value, list) else []


def _is_present(value: Any) -> bool:
    """Presence test for lookup values: empty lists and dicts count as present."""
    if value is None or isinstance(value, bool):
        return bool(value)
    if isinstance(value, (int, float)):
        return value != 0 and not (isinstance(value, float) and math.isnan(value))
    if isinstance(value, str):
        return value != ""
    return True


def is_complete(data: Optional[Dict[str, Any]]) -> bool:
    """True if the response carries a US phonetic or a translation."""
    return _is_present(field_extractor.get(data, US_PHONE_PATH)) or _is_present(
        field_extractor.get(data, TRANSLATION_PATH)
    )


def senses_for(entry: Entry) -> List[Definition]:
    """Definitions to expand; a placeholder sense when the entry has none."""
    if entry.definitions:
        return entry.definitions
    return [Definition(part_of_speech=UNKNOWN_POS, raw_sense=entry.raw_sense_line)]


def build_records(entry: Entry, data: Optional[Dict[str, Any]]) -> List[EnrichedRecord]:
    """
    Expand one entry into records, one per definition.

    Args:
        entry: Parsed entry
        data: Lookup response, or None if the lookup failed

    Returns:
        At least one EnrichedRecord, in definition order
    """
    phonetic_us = _get_text(data, US_PHONE_PATH)
    phonetic_uk = _get_text(data, UK_PHONE_PATH)
    inflections = _get_list(data, INFLECTIONS_PATH)
    tags = _get_list(data, TAGS_PATH)
    image_url = _get_text(data, IMAGE_PATH)

    records = []
    for sense in senses_for(entry):
        records.append(EnrichedRecord(
            headword=entry.headword,
            translation=format_translation(sense.raw_sense),
            phoneticUS=phonetic_us,
            phoneticUK=phonetic_uk,
            partOfSpeech=sense.part_of_speech,
            inflections=list(inflections),
            tags=list(tags),
            frequencyRank=int(entry.rank),
            imageUrl=image_url,
            video=Video(
                coverUrl=_get_text(data, f"{VIDEO_PATH}.cover"),
                title=_get_text(data, f"{VIDEO_PATH}.title"),
                url=_get_text(data, f"{VIDEO_PATH}.url"),
            ),
        ))
    return records
