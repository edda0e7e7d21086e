"""
Tests for the user_pref merge.
"""

from datetime import datetime

from dotstrap.prefs import (
    MARKER_PREFIX,
    collect_keys,
    extract_key,
    is_marker,
    merge_prefs,
    parse_document,
    provenance_marker,
)

NOW = datetime(2026, 1, 2, 3, 4, 5)
LATER = datetime(2026, 6, 7, 8, 9, 10)


def marker(now=NOW) -> str:
    return '\n' + provenance_marker(now) + '\n'


def strip_markers(text: str) -> str:
    return '\n'.join(line for line in text.split('\n') if not line.startswith(MARKER_PREFIX))


class TestExtractKey:

    def test_simple_entry(self):
        assert extract_key('user_pref("a.b", 1);') == 'a.b'

    def test_leading_whitespace(self):
        assert extract_key('   user_pref( "a.b", true);\n') == 'a.b'

    def test_value_with_quotes(self):
        assert extract_key('user_pref("x.y", "some \\"quoted\\" value");') == 'x.y'

    def test_comment_is_not_entry(self):
        assert extract_key('// user_pref("a.b", 1);') is None

    def test_blank_and_malformed(self):
        assert extract_key('') is None
        assert extract_key('user_pref(a.b, 1);') is None
        assert extract_key('pref("a.b", 1);') is None

    def test_empty_key(self):
        assert extract_key('user_pref("", 1);') == ''

    def test_prefix_keys_are_distinct(self):
        assert extract_key('user_pref("a.bc", 1);') == 'a.bc'


class TestParse:

    def test_keeps_line_endings(self):
        lines = parse_document('user_pref("a", 1);\r\n// c\nlast')
        assert [line.raw for line in lines] == ['user_pref("a", 1);\r\n', '// c\n', 'last']
        assert [line.key for line in lines] == ['a', None, None]

    def test_splits_on_newline_only(self):
        text = 'user_pref("a", "x\u2028y\x85z\x0cw");\nuser_pref("k", 1);\n'
        lines = parse_document(text)
        assert [line.key for line in lines] == ['a', 'k']
        assert ''.join(line.raw for line in lines) == text

    def test_collect_keys_collapses_duplicates(self):
        text = 'user_pref("x", 1);\nuser_pref("x", 2);\n// user_pref("y", 3);\nuser_pref("z", 4);\n'
        assert collect_keys(text) == {'x', 'z'}

    def test_marker_format(self):
        line = provenance_marker(NOW)
        assert line.startswith('// Added by dotstrap on ')
        assert '2026' in line
        assert is_marker(line + '\n')
        assert not is_marker('// some other comment')


class TestMerge:

    def test_concrete_scenario(self):
        a = 'user_pref("a.b", 1);\nuser_pref("c.d", 2);\n// keep me\n'
        b = 'user_pref("a.b", 9);\n'
        expected = 'user_pref("c.d", 2);\n// keep me\n' + marker() + 'user_pref("a.b", 9);\n'
        assert merge_prefs(a, b, NOW) == expected

    def test_duplicate_key_in_existing_all_dropped(self):
        a = 'user_pref("x",1);\nuser_pref("y",2);\nuser_pref("x",1);\n'
        b = 'user_pref("x", 5);\n'
        merged = merge_prefs(a, b, NOW)
        assert merged == 'user_pref("y",2);\n' + marker() + 'user_pref("x", 5);\n'
        assert merged.count('"x"') == 1

    def test_prefix_key_not_removed(self):
        a = 'user_pref("a.bc", 1);\nuser_pref("a.b", 2);\n'
        b = 'user_pref("a.b", 3);\n'
        merged = merge_prefs(a, b, NOW)
        assert merged.startswith('user_pref("a.bc", 1);\n\n')
        assert 'user_pref("a.b", 2);' not in merged

    def test_empty_existing(self):
        b = 'user_pref("a", 1);\n// note\n'
        assert merge_prefs('', b, NOW) == marker() + b

    def test_empty_new(self):
        a = 'user_pref("a", 1);\n// note\n'
        assert merge_prefs(a, '', NOW) == a + marker()

    def test_both_empty(self):
        assert merge_prefs('', '', NOW) == marker()

    def test_existing_without_trailing_newline(self):
        merged = merge_prefs('user_pref("a", 1);', 'user_pref("b", 2);\n', NOW)
        assert merged == 'user_pref("a", 1);\n' + marker() + 'user_pref("b", 2);\n'

    def test_order_and_passthrough(self):
        a = (
            '// Mozilla User Preferences\n'
            '\n'
            'user_pref("one", 1);\n'
            'user_pref("two", 2);\n'
            'garbage line\n'
            'user_pref("three", 3);\n'
            '// user_pref("two", 0);\n'
        )
        b = '// mine\nuser_pref("two", 22);\n\nuser_pref("four", 4);\n'
        merged = merge_prefs(a, b, NOW)
        expected_head = (
            '// Mozilla User Preferences\n'
            '\n'
            'user_pref("one", 1);\n'
            'garbage line\n'
            'user_pref("three", 3);\n'
            '// user_pref("two", 0);\n'
        )
        assert merged == expected_head + marker() + b

    def test_new_keys_only_from_new_block(self):
        a = 'user_pref("k1", 1);\nuser_pref("k2", 2);\nuser_pref("k3", 3);\n'
        b = 'user_pref("k1", 10);\nuser_pref("k3", 30);\n'
        merged = merge_prefs(a, b, NOW)
        head, tail = merged.split(provenance_marker(NOW))
        assert collect_keys(head) == {'k2'}
        assert tail == '\n' + b

    def test_idempotent(self):
        a = 'user_pref("a.b", 1);\nuser_pref("c.d", 2);\n// keep me\n'
        b = '// dotfiles\nuser_pref("a.b", 9);\n\nuser_pref("e.f", "x");\n'
        once = merge_prefs(a, b, NOW)
        twice = merge_prefs(once, b, LATER)
        assert twice != once
        assert strip_markers(twice) == strip_markers(once)
        assert twice.count(MARKER_PREFIX) == 1

    def test_idempotent_from_empty(self):
        b = 'user_pref("a", 1);\n'
        once = merge_prefs('', b, NOW)
        assert merge_prefs(once, b, NOW) == once

    def test_changed_settings_replace_old_entries(self):
        a = 'user_pref("keep", 0);\n'
        b1 = 'user_pref("a", 1);\nuser_pref("b", 2);\n'
        b2 = 'user_pref("a", 5);\n'
        merged = merge_prefs(merge_prefs(a, b1, NOW), b2, LATER)
        assert 'user_pref("a", 1);' not in merged
        assert 'user_pref("b", 2);' in merged
        assert merged.endswith(marker(LATER) + b2)

    def test_firefox_rewrite_keeps_block_detection_safe(self):
        # prefs.js rewritten by the browser after a merge no longer ends with the block
        b = 'user_pref("a", 1);\n'
        once = merge_prefs('', b, NOW)
        rewritten = once + 'user_pref("z", 26);\n'
        merged = merge_prefs(rewritten, b, LATER)
        assert merged.count('user_pref("a", 1);') == 1
        assert 'user_pref("z", 26);' in merged

    def test_never_raises_on_odd_input(self):
        text = 'user_pref("\n)"(;\x00\n\ufeffuser_pref("bom", 1);\n'
        merged = merge_prefs(text, text, NOW)
        assert isinstance(merged, str)

    def test_unicode_separators_inside_values(self):
        a = 'user_pref("a", "x\u2028y");\nuser_pref("k", 1);\n'
        b = 'user_pref("a", "z");\n'
        merged = merge_prefs(a, b, NOW)
        assert merged == 'user_pref("k", 1);\n' + marker() + b

    def test_empty_key_is_deduplicated(self):
        a = 'user_pref("", 1);\nuser_pref("k", 1);\n'
        b = 'user_pref("", 2);\n'
        assert merge_prefs(a, b, NOW) == 'user_pref("k", 1);\n' + marker() + b

    def test_lone_carriage_return_is_not_a_line_end(self):
        merged = merge_prefs('user_pref("a", 1);\r', '', NOW)
        assert merged == 'user_pref("a", 1);\r\n' + marker()
