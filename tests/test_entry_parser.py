"""Tests for the vocabulary list parser."""

import pytest

from vocabenrich.entry_parser import (
    Definition,
    Entry,
    is_definition_line,
    parse,
    parse_block,
    parse_file,
)


class TestWellFormedBlocks:
    """Blocks with a rank/headword line and a definition line."""

    def test_multiple_definitions_on_one_line(self):
        entries = parse('1 run\nv. ["跑"]  n. ["跑步"]')

        assert entries == [
            Entry(
                rank="1",
                headword="run",
                definitions=[
                    Definition(part_of_speech="v", raw_sense='["跑"]'),
                    Definition(part_of_speech="n", raw_sense='["跑步"]'),
                ],
                raw_sense_line='v. ["跑"]  n. ["跑步"]',
            )
        ]

    def test_bracketed_abbreviation_is_not_a_definition(self):
        # '"n."' inside brackets is not followed by a bracketed sense
        entries = parse('12 apple\n["n."] adj. ["red"]')

        assert len(entries) == 1
        assert entries[0].rank == "12"
        assert entries[0].definitions == [Definition("adj", '["red"]')]
        assert entries[0].raw_sense_line == '["n."] adj. ["red"]'

    def test_multiword_headword(self):
        entries = parse('5   ice cream  \nn. ["冰淇淋"]')
        assert entries[0].headword == "ice cream"
        assert entries[0].rank == "5"

    def test_definition_line_need_not_be_second(self):
        entries = parse('3 bank\nexample: the river bank\nn. ["银行"]')
        assert entries[0].definitions == [Definition("n", '["银行"]')]

    def test_no_space_between_abbreviation_and_sense(self):
        entries = parse('9 in\nprep.["在…里"]')
        assert entries[0].definitions == [Definition("prep", '["在…里"]')]

    def test_misc_definition_when_no_pairs(self):
        entries = parse('5 hello\n["你好", "n."]')
        assert entries[0].definitions == [Definition("misc", '["你好", "n."]')]

    def test_candidate_without_pairs_or_leading_bracket(self):
        entries = parse('6 see\nsee also n. ["x"')
        assert entries[0].definitions == []
        assert entries[0].raw_sense_line == 'see also n. ["x"'

    def test_no_definition_line(self):
        entries = parse('3 the\nart. 这')
        assert entries == [Entry(rank="3", headword="the", definitions=[], raw_sense_line="")]

    def test_title_line_is_not_searched_for_definitions(self):
        entries = parse('7 n. ["x"]\nplain text')
        assert entries[0].headword == 'n. ["x"]'
        assert entries[0].definitions == []


class TestMalformedBlocks:
    """Malformed blocks are skipped without failing the parse."""

    @pytest.mark.parametrize(
        "text",
        [
            '',
            '\n\n\n',
            '1 lonely',
            'apple\nn. ["苹果"]',
            '12\nn. ["十二"]',
            'x1 apple\nn. ["苹果"]',
        ],
    )
    def test_block_is_dropped(self, text):
        assert parse(text) == []

    def test_parse_block_returns_none(self):
        assert parse_block('only one line') is None

    def test_good_blocks_survive_bad_neighbours(self, sample_list_text):
        entries = parse(sample_list_text)
        assert [e.headword for e in entries] == ["run", "apple", "the", "hello"]
        assert [e.rank for e in entries] == ["1", "2", "3", "5"]


class TestSeparators:

    def test_several_blank_lines_with_whitespace(self):
        text = '1 a\nn. ["一"]\n  \n\t\n\n2 b\nn. ["二"]'
        assert [e.headword for e in parse(text)] == ["a", "b"]

    def test_windows_line_endings(self):
        text = '1 run\r\nv. ["跑"]\r\n\r\n2 go\r\nv. ["去"]\r\n'
        entries = parse(text)
        assert [e.headword for e in entries] == ["run", "go"]
        assert entries[1].definitions == [Definition("v", '["去"]')]


class TestDefinitionLineDetection:

    @pytest.mark.parametrize(
        "line,expected",
        [
            ('n. ["苹果"]', True),
            ('adv. ["很"]', True),
            ('conj. ["和"]', True),
            ('["你好"]', False),        # no abbreviation
            ('n. [苹果]', False),        # no '["'
            ('art. 这', False),
        ],
    )
    def test_is_definition_line(self, line, expected):
        assert is_definition_line(line) is expected


def test_parse_is_deterministic(sample_list_text):
    assert parse(sample_list_text) == parse(sample_list_text)


def test_parse_file(temp_dir, sample_list_text):
    path = temp_dir / "list.md"
    path.write_text(sample_list_text, encoding="utf-8")
    assert parse_file(path) == parse(sample_list_text)


def test_parse_file_replaces_undecodable_bytes(temp_dir):
    path = temp_dir / "latin1.md"
    path.write_bytes(b'1 caf\xe9\nn. ["coffee"]\n\n2 tea\nn. ["tea"]\n')

    entries = parse_file(path)

    assert [e.headword for e in entries] == ["caf\ufffd", "tea"]
    assert entries[0].definitions == [Definition("n", '["coffee"]')]
