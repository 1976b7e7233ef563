import random
import textwrap

import pytest

from patchmend.apply.strict import apply_patch, try_apply_patch
from patchmend.models import EXACT, Hunk
from patchmend.repair.hunks import parse_hunks
from patchmend.repair.pipeline import (
    can_find_valid_lines,
    categorize_hunks,
    fix_patch,
    fix_patch_report,
    hunk_is_empty,
    is_deleting_real_lines,
)


def _corrupt(patch_str: str, rng: random.Random) -> str:
    """
    Damage a difflib patch the way an LLM tends to: bogus line numbers, one
    context line garbled (with or without its marker), another one dropped.
    """
    lines = patch_str.splitlines()
    at = next(i for i, ln in enumerate(lines) if ln.startswith("@@"))
    lines[at] = "@@ -1000,1 +1000,1 @@"
    context = [i for i in range(at + 1, len(lines)) if lines[i].startswith(" ")]
    garbled, dropped = rng.sample(context, 2)
    lines[garbled] = rng.choice(["XXXX", " XXXX"])
    del lines[dropped]
    return "\n".join(lines) + "\n"


@pytest.mark.parametrize("seed", range(20))
def test_corrupted_patch_is_recovered(seed, random_lines, unified_diff):
    rng = random.Random(seed)
    before = "".join(ln + "\n" for ln in random_lines)
    modified = list(random_lines)
    modified[rng.randrange(len(modified))] += "  # changed"
    after = "".join(ln + "\n" for ln in modified)

    broken = _corrupt(unified_diff(before, after), rng)
    fixed = fix_patch(before, broken)

    assert fixed
    assert "XXXX" not in fixed
    assert apply_patch(before, fixed) == after


def test_correct_patch_passes_through_unchanged(random_lines, unified_diff):
    before = "".join(ln + "\n" for ln in random_lines)
    modified = list(random_lines)
    modified[5] = "replaced = True"
    after = "".join(ln + "\n" for ln in modified)

    diff = unified_diff(before, after)
    hunk_text = "".join(diff.splitlines(keepends=True)[2:]).rstrip("\n")

    fixed = fix_patch(before, diff)
    assert fixed == hunk_text
    assert fix_patch(before, fixed) == fixed
    assert apply_patch(before, fixed) == after


def test_append_at_end_of_file():
    original = "a\nb\nc\nd\ne\nf\ng\n"
    fixed = fix_patch(original, "@@ -1,2 +1,3 @@\n f\n g\n+h")
    assert fixed == "@@ -3,5 +3,6 @@\n c\n d\n e\n f\n g\n+h"
    assert apply_patch(original, fixed) == original + "h\n"


def test_truncated_deletion_is_completed():
    original = (
        "def compute():\n"
        "    result = compute_total(alpha, beta)\n"
        "    return result\n"
    )
    patch_str = (
        "@@ -1,4 +1,3 @@\n"
        " def compute():\n"
        "-    result = compute_total(alpha,\n"
        "  beta)\n"
        "+    result = compute_total(alpha, beta, gamma)\n"
        "     return result\n"
    )
    fixed = fix_patch(original, patch_str)
    assert apply_patch(original, fixed) == (
        "def compute():\n"
        "    result = compute_total(alpha, beta, gamma)\n"
        "    return result\n"
    )


def test_accidental_deletion_is_kept():
    original = "a\nb\nc\nd\n"
    fixed = fix_patch(original, "@@ -1,4 +1,4 @@\n a\n-b\n b\n+x\n c\n d")
    assert apply_patch(original, fixed) == "a\nb\nx\nc\nd\n"


def test_context_missing_between_changes_is_not_misapplied():
    original = "a\nb\nc\nd\ne\nf\ng\nh\n"
    # ' d' was left out between the two changes.
    fixed = fix_patch(original, "@@ -1,7 +1,7 @@\n a\n-b\n+B\n c\n-e\n+E\n f")

    assert "-e" in fixed.splitlines()
    assert try_apply_patch(original, fixed) is None


def test_truncated_deletion_repeated_earlier_edits_the_anchored_copy():
    original = "x = foo(1)\na\nb\ny\nx = foo(2)\nz\n"
    fixed = fix_patch(original, "@@ -4,3 +4,3 @@\n y\n-x = foo(\n+x = bar\n z")

    assert "-x = foo(2)" in fixed.splitlines()
    assert apply_patch(original, fixed) == "x = foo(1)\na\nb\ny\nx = bar\nz\n"


def test_drifted_hunks_get_real_headers(numbered_text):
    original = numbered_text(30)
    patch_str = textwrap.dedent("""\
        @@ -52,3 +52,3 @@
         line 2
        -line 3
        +LINE 3
         line 4
        @@ -70,3 +70,4 @@
         line 20
        -line 21
        +LINE 21
        +extra
         line 22
    """)
    fixed = fix_patch(original, patch_str)
    headers = [h.header for h in parse_hunks(fixed)]
    assert headers == ["@@ -1,4 +1,4 @@", "@@ -21,6 +21,7 @@"]

    result = apply_patch(original, fixed).splitlines()
    assert result[2] == "LINE 3"
    assert result[20:23] == ["LINE 21", "extra", "line 22"]


def test_report_explains_each_hunk(numbered_text):
    original = numbered_text(20)
    patch_str = textwrap.dedent("""\
        @@ -2,3 +2,3 @@
         line 2
        -line 3
        +LINE 3
         line 4
        @@ -8,2 +8,2 @@
         line 8
        -this line does not exist
        +replacement
        @@ -12,1 +12,2 @@
         zzz
        +new
        @@ -15,2 +15,2 @@
         line 15
         line 16
    """)
    report = fix_patch_report(original, patch_str)

    assert [h.status for h in report.hunks] == ["kept", "excluded", "excluded", "excluded"]
    assert [h.reason for h in report.hunks] == [None, "unlocatable_deletion", "no_anchor", "empty"]
    assert report.hunks[0].confidence == EXACT
    assert report.hunks[0].header == "@@ -1,4 +1,4 @@"
    assert len(report.kept) == 1
    assert len(report.excluded) == 3
    assert report.patch == fix_patch(original, patch_str)
    assert "this line does not exist" not in report.patch


def test_nothing_repairable_gives_empty_patch(numbered_text):
    assert fix_patch(numbered_text(5), "@@ -1,1 +1,1 @@\n-nope\n+yes") == ""


# ---------- predicates ----------

def test_is_deleting_real_lines(numbered_text):
    original = numbered_text(5)
    assert is_deleting_real_lines(Hunk.from_header("@@ -1 +1 @@", ["-  line 2 "]), original)
    assert not is_deleting_real_lines(Hunk.from_header("@@ -1 +1 @@", ["-line 9"]), original)


def test_can_find_valid_lines(numbered_text):
    original = numbered_text(5)
    assert can_find_valid_lines(Hunk.from_header("@@ -1 +1 @@", [" line 3", "+x"]), original)
    assert not can_find_valid_lines(Hunk.from_header("@@ -1 +1 @@", [" ghost", "+x"]), original)


@pytest.mark.parametrize(
    "lines, empty",
    [
        ([], True),
        ([" a", " b"], True),
        (["-  a", "+a  "], True),
        (["-a", "-b", "+a", "+b"], True),
        (["-a", "+b"], False),
        ([" a", "+b"], False),
        (["-a"], False),
    ],
)
def test_hunk_is_empty(lines, empty):
    assert hunk_is_empty(Hunk.from_header("@@ -1 +1 @@", lines)) is empty


# ---------- categorize_hunks ----------

def test_categorize_hunks_partitions_every_hunk(numbered_text):
    original = numbered_text(20)
    patch_str = textwrap.dedent("""\
        @@ -2,3 +2,3 @@
         line 2
        -line 3
        +LINE 3
         line 4
        @@ -8,2 +8,2 @@
         nothing
        -line 9
        +LINE 9
        @@ -15,2 +15,2 @@
        -line 15
        +LINE 15
         line 16
    """)
    categories = categorize_hunks(original, patch_str)

    assert [h.header for h in categories.valid_hunks] == ["@@ -2,3 +2,3 @@", "@@ -15,2 +15,2 @@"]
    assert [h.header for h in categories.invalid_hunks] == ["@@ -8,2 +8,2 @@"]
    total = len(categories.valid_hunks) + len(categories.invalid_hunks)
    assert total == len(parse_hunks(patch_str))
