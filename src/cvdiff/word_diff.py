"""
Word-level diff between two free-text strings.

Tokens are alternating runs of whitespace and non-whitespace, so the tokens of
a string always concatenate back to the string itself. Alignment uses a
longest-common-subsequence table over tokens; the result is a sequence of
coalesced unchanged/added/removed runs.
"""

import re

from .models import DiffSegment, DiffType, WordDiffResult

_TOKEN_PATTERN = re.compile(r"(\s+)")


def tokenize(text: str | None) -> list[str]:
    """
    Split text into word and whitespace tokens.

    Args:
        text: Text to split (None is treated as empty)

    Returns:
        List of tokens whose concatenation equals the input
    """
    if not text:
        return []
    return [token for token in _TOKEN_PATTERN.split(text) if token]


def _is_whitespace(value: str) -> bool:
    return not value.strip()


def _lcs_ops(original: list[str], modified: list[str]) -> list[tuple[DiffType, str]]:
    """
    Align two token lists and return one operation per token.

    Removed tokens of a gap are emitted before the added tokens of the same gap.
    """
    n, m = len(original), len(modified)

    # suffix table: table[i][j] = LCS length of original[i:] and modified[j:]
    table = [[0] * (m + 1) for _ in range(n + 1)]
    for i in range(n - 1, -1, -1):
        row, below = table[i], table[i + 1]
        token = original[i]
        for j in range(m - 1, -1, -1):
            if token == modified[j]:
                row[j] = below[j + 1] + 1
            else:
                row[j] = below[j] if below[j] >= row[j + 1] else row[j + 1]

    ops: list[tuple[DiffType, str]] = []
    removed: list[str] = []
    added: list[str] = []
    i = j = 0

    while i < n and j < m:
        if original[i] == modified[j]:
            ops.extend((DiffType.REMOVED, t) for t in removed)
            ops.extend((DiffType.ADDED, t) for t in added)
            removed, added = [], []
            ops.append((DiffType.UNCHANGED, original[i]))
            i += 1
            j += 1
        elif table[i + 1][j] >= table[i][j + 1]:
            removed.append(original[i])
            i += 1
        else:
            added.append(modified[j])
            j += 1

    removed.extend(original[i:])
    added.extend(modified[j:])
    ops.extend((DiffType.REMOVED, t) for t in removed)
    ops.extend((DiffType.ADDED, t) for t in added)
    return ops


def _coalesce(ops: list[tuple[DiffType, str]]) -> list[list]:
    runs: list[list] = []
    for op_type, value in ops:
        if runs and runs[-1][0] is op_type:
            runs[-1][1] += value
        else:
            runs.append([op_type, value])
    return runs


def _fold_whitespace_runs(runs: list[list]) -> list[list]:
    """
    Fold whitespace-only unchanged runs that sit between two edits.

    Each maximal stretch of edits is rewritten as one removed run followed by
    one added run, so word-disjoint strings yield exactly two segments.
    """
    groups: list[list] = []  # [DiffType.UNCHANGED, text] or [None, removed, added]
    for op_type, value in runs:
        if op_type is DiffType.UNCHANGED:
            groups.append([op_type, value])
            continue
        if not groups or groups[-1][0] is not None:
            groups.append([None, "", ""])
        if op_type is DiffType.REMOVED:
            groups[-1][1] += value
        else:
            groups[-1][2] += value

    merged: list[list] = []
    index = 0
    while index < len(groups):
        group = groups[index]
        if (
            group[0] is DiffType.UNCHANGED
            and _is_whitespace(group[1])
            and merged
            and merged[-1][0] is None
            and index + 1 < len(groups)
            and groups[index + 1][0] is None
        ):
            following = groups[index + 1]
            merged[-1][1] += group[1] + following[1]
            merged[-1][2] += group[1] + following[2]
            index += 2
            continue
        merged.append(list(group))
        index += 1

    result: list[list] = []
    for group in merged:
        if group[0] is DiffType.UNCHANGED:
            result.append(group)
            continue
        if group[1]:
            result.append([DiffType.REMOVED, group[1]])
        if group[2]:
            result.append([DiffType.ADDED, group[2]])
    return result


def diff_words(original: str | None, modified: str | None) -> WordDiffResult:
    """
    Compute a word-level diff between two strings.

    Args:
        original: Original text (None is treated as empty)
        modified: Modified text (None is treated as empty)

    Returns:
        WordDiffResult whose segments rebuild both inputs exactly
    """
    original = original or ""
    modified = modified or ""

    if original == modified:
        if not original:
            return WordDiffResult()
        return WordDiffResult(segments=(DiffSegment(DiffType.UNCHANGED, original),))

    original_tokens = tokenize(original)
    modified_tokens = tokenize(modified)

    # common prefix and suffix never enter the LCS table
    prefix = 0
    limit = min(len(original_tokens), len(modified_tokens))
    while prefix < limit and original_tokens[prefix] == modified_tokens[prefix]:
        prefix += 1

    suffix = 0
    limit -= prefix
    while (
        suffix < limit
        and original_tokens[-1 - suffix] == modified_tokens[-1 - suffix]
    ):
        suffix += 1

    middle_original = original_tokens[prefix : len(original_tokens) - suffix]
    middle_modified = modified_tokens[prefix : len(modified_tokens) - suffix]

    ops = [(DiffType.UNCHANGED, t) for t in original_tokens[:prefix]]
    ops.extend(_lcs_ops(middle_original, middle_modified))
    if suffix:
        ops.extend((DiffType.UNCHANGED, t) for t in original_tokens[-suffix:])

    runs = _fold_whitespace_runs(_coalesce(ops))
    segments = tuple(DiffSegment(op_type, value) for op_type, value in runs)

    return WordDiffResult(
        segments=segments,
        added_count=sum(1 for s in segments if s.type is DiffType.ADDED),
        removed_count=sum(1 for s in segments if s.type is DiffType.REMOVED),
    )
