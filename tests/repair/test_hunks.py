import textwrap

from patchmend.repair.hunks import closest_number, hunks_to_patch, locate_lines, parse_hunks


ORIGINAL = "alpha\n  beta\ngamma\nbeta\n\nomega\n"


def test_locate_lines_ignores_marker_and_whitespace():
    assert locate_lines(ORIGINAL, "-beta") == [2, 4]
    assert locate_lines(ORIGINAL, "+   beta  ") == [2, 4]
    assert locate_lines(ORIGINAL, " gamma") == [3]


def test_locate_lines_blank_and_missing():
    assert locate_lines(ORIGINAL, "") == [5]
    assert locate_lines(ORIGINAL, "-delta") == []


def test_closest_number():
    assert closest_number([2, 10, 20], 12) == 10
    assert closest_number([4, 8], 6) == 4  # tie -> earliest
    assert closest_number([], 3) is None


def test_parse_hunks_with_file_headers():
    patch_str = textwrap.dedent("""\
        Index: foo.py
        --- a/foo.py
        +++ b/foo.py
        @@ -1,3 +1,3 @@
         a
        -b
        +B
         c
        @@ -10,2 +10,3 @@
         x
        +y
         z
    """)
    hunks = parse_hunks(patch_str)
    assert len(hunks) == 2

    first, second = hunks
    assert first.header == "@@ -1,3 +1,3 @@"
    assert (first.header_start, first.header_length) == (1, 3)
    assert first.lines == [" a", "-b", "+B", " c"]
    assert first.additions == ["+B"]
    assert first.subtractions == ["-b"]
    assert first.context_lines == [" a", " c"]

    assert (second.header_start, second.new_length) == (10, 3)
    assert second.lines == [" x", "+y", " z"]


def test_parse_hunks_multi_file_patch_splits_on_file_header():
    patch_str = "--- a/x\n+++ b/x\n@@ -1 +1 @@\n-a\n+b\n--- a/y\n+++ b/y\n@@ -1 +1 @@\n-c\n+d\n"
    hunks = parse_hunks(patch_str)
    assert [h.lines for h in hunks] == [["-a", "+b"], ["-c", "+d"]]


def test_parse_hunks_keeps_deleted_dash_lines():
    # '--- x' not followed by '+++' is a deleted '-- x' line, not a file header
    patch_str = "@@ -1,2 +1,1 @@\n--- x\n keep\n"
    hunks = parse_hunks(patch_str)
    assert hunks[0].lines == ["--- x", " keep"]
    assert hunks[0].subtractions == ["--- x"]


def test_parse_hunks_unmarked_lines_are_context():
    hunks = parse_hunks("@@ -1,2 +1,2 @@\nXXXX\n-b\n+c")
    assert hunks[0].lines == ["XXXX", "-b", "+c"]
    assert hunks[0].context_lines == ["XXXX"]


def test_parse_hunks_no_newline_marker():
    patch_str = "@@ -1 +1 @@\n-a\n\\ No newline at end of file\n+b\n\\ No newline at end of file\n"
    hunks = parse_hunks(patch_str)
    assert len(hunks) == 1
    assert hunks[0].lines == ["-a", "+b"]
    assert hunks[0].missing_newline is True
    assert hunks_to_patch(hunks).endswith("+b\n\\ No newline at end of file")


def test_parse_hunks_ignores_text_before_first_header():
    hunks = parse_hunks("Here is the fix:\n\n@@ -1 +1 @@\n-a\n+b")
    assert len(hunks) == 1
    assert hunks[0].lines == ["-a", "+b"]


def test_parse_and_serialize_round_trip():
    patch_str = "@@ -1,3 +1,3 @@\n a\n-b\n+B\n c\n@@ -8,2 +8,3 @@\n h\n+i\n j"
    assert hunks_to_patch(parse_hunks(patch_str)) == patch_str


def test_empty_patch():
    assert parse_hunks("") == []
    assert hunks_to_patch([]) == ""
