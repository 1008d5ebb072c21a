"""Tests for the shared parsing primitives."""

import pytest

from gitdiffparse.diff.models import FileStatus
from gitdiffparse.diff.primitives import (
    Shortstat,
    parse_dirstat,
    parse_rename_path,
    parse_shortstat,
    parse_stat_value,
    split_stat_sections,
    status_from_letter,
    unescape_path,
)


class TestStatValue:
    def test_binary_placeholder_is_zero(self):
        assert parse_stat_value("-") == 0

    @pytest.mark.parametrize("n", [0, 1, 42, 123456])
    def test_integers(self, n):
        assert parse_stat_value(str(n)) == n


class TestShortstat:
    def test_all_three_phrases(self):
        stat = parse_shortstat(" 3 files changed, 10 insertions(+), 5 deletions(-)")
        assert stat == Shortstat(files_changed=3, insertions=10, deletions=5)

    def test_singular_forms(self):
        stat = parse_shortstat(" 1 file changed, 1 insertion(+), 1 deletion(-)")
        assert stat == Shortstat(1, 1, 1)

    def test_insertions_only(self):
        stat = parse_shortstat(" 2 files changed, 7 insertions(+)")
        assert stat.files_changed == 2
        assert stat.insertions == 7
        assert stat.deletions == 0

    def test_deletions_only(self):
        stat = parse_shortstat(" 1 file changed, 4 deletions(-)")
        assert stat.insertions == 0
        assert stat.deletions == 4

    def test_missing_line(self):
        assert parse_shortstat(None) == Shortstat(0, 0, 0)

    def test_unrecognised_text(self):
        assert parse_shortstat("nothing to see here") == Shortstat(0, 0, 0)


class TestDirstat:
    def test_entries(self):
        info = parse_dirstat(" 45.2% lib/commands/\n 30.1% spec/unit/\n".split("\n"))
        assert len(info) == 2
        assert [e.directory for e in info] == ["lib/commands/", "spec/unit/"]
        assert [e.percentage for e in info] == [45.2, 30.1]

    def test_lookup_by_directory(self):
        info = parse_dirstat(["  60.0% lib/", "  40.0% spec/"])
        assert info["lib/"] == 60.0
        assert info["spec/"] == 40.0
        assert info["docs/"] is None
        assert info.to_dict() == {"lib/": 60.0, "spec/": 40.0}

    def test_non_matching_lines_skipped(self):
        info = parse_dirstat(["garbage", "  12.5% src/", "1.2.3% bad/"])
        assert len(info) == 1
        assert info["src/"] == 12.5

    def test_empty(self):
        assert len(parse_dirstat([])) == 0


class TestUnescapePath:
    def test_unquoted_passthrough(self):
        assert unescape_path("lib/foo.rb") == "lib/foo.rb"
        assert unescape_path("back\\302slash") == "back\\302slash"

    def test_octal_utf8(self):
        assert unescape_path('"file_\\302\\265.rb"') == "file_µ.rb"

    @pytest.mark.parametrize(
        "escape,char",
        [
            ("a", "\x07"),
            ("b", "\x08"),
            ("t", "\t"),
            ("n", "\n"),
            ("v", "\x0b"),
            ("f", "\x0c"),
            ("r", "\r"),
            ("e", "\x1b"),
            ("\\", "\\"),
            ('"', '"'),
            ("'", "'"),
        ],
    )
    def test_named_escapes(self, escape, char):
        assert unescape_path(f'"x\\{escape}y"') == f"x{char}y"

    def test_out_of_range_octal_kept_literal(self):
        assert unescape_path('"bad\\777.rb"') == "bad\\777.rb"
        assert unescape_path('"x\\400"') == "x\\400"
        assert unescape_path('"ok\\377"').encode("utf-8", "surrogateescape") == b"ok\xff"

    def test_multibyte_sequence(self):
        # "日本" as UTF-8 octal escapes
        assert unescape_path('"\\346\\227\\245\\346\\234\\254.txt"') == "日本.txt"

    def test_invalid_utf8_kept(self):
        result = unescape_path('"caf\\351.txt"')
        assert result.encode("utf-8", "surrogateescape") == b"caf\xe9.txt"


class TestRenamePath:
    def test_brace_form(self):
        assert parse_rename_path("old_dir/{a => b}/file.rb") == (
            "old_dir/b/file.rb",
            "old_dir/a/file.rb",
        )

    def test_brace_form_file_name(self):
        assert parse_rename_path("lib/{old.rb => new.rb}") == ("lib/new.rb", "lib/old.rb")

    def test_move_into_subdirectory(self):
        assert parse_rename_path("{ => sub}/a.rb") == ("sub/a.rb", "a.rb")

    def test_move_out_of_subdirectory(self):
        assert parse_rename_path("lib/{old => }/x.rb") == ("lib/x.rb", "lib/old/x.rb")

    def test_simple_form(self):
        assert parse_rename_path("old_name.rb => new_name.rb") == ("new_name.rb", "old_name.rb")

    def test_no_rename(self):
        assert parse_rename_path("lib/foo.rb") == ("lib/foo.rb", None)


class TestStatusFromLetter:
    @pytest.mark.parametrize(
        "token, expected",
        [
            ("A", (FileStatus.ADDED, None)),
            ("M", (FileStatus.MODIFIED, None)),
            ("D", (FileStatus.DELETED, None)),
            ("T", (FileStatus.TYPE_CHANGED, None)),
            ("R075", (FileStatus.RENAMED, 75)),
            ("C100", (FileStatus.COPIED, 100)),
        ],
    )
    def test_known_letters(self, token, expected):
        assert status_from_letter(token) == expected

    def test_unknown_letter(self):
        assert status_from_letter("X") == (FileStatus.UNKNOWN, None)
        assert status_from_letter("") == (FileStatus.UNKNOWN, None)

    def test_rewrite_score_dropped_for_modified(self):
        assert status_from_letter("M087") == (FileStatus.MODIFIED, None)


class TestSplitStatSections:
    def test_without_shortstat(self):
        assert split_stat_sections(["1\t1\ta"], include_dirstat=True) == (["1\t1\ta"], None, [])

    def test_dirstat_only_when_requested(self):
        lines = ["1\t1\ta", " 1 file changed, 1 insertion(+), 1 deletion(-)", "  100.0% ./"]
        numstat_lines, shortstat, dirstat = split_stat_sections(lines, include_dirstat=False)
        assert numstat_lines == ["1\t1\ta"]
        assert shortstat == lines[1]
        assert dirstat == []

        _, _, dirstat = split_stat_sections(lines, include_dirstat=True)
        assert dirstat == ["  100.0% ./"]
