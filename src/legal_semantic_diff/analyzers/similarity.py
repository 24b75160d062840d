"""Character-level text similarity based on Levenshtein distance."""


def levenshtein_distance(s1: str, s2: str) -> int:
    """
    Compute the exact Levenshtein edit distance between two strings.

    Standard O(n*m) dynamic program; only the previous row of the table is
    kept in memory.

    Args:
        s1: First string.
        s2: Second string.

    Returns:
        Minimum number of single-character insertions, deletions and
        substitutions turning s1 into s2.
    """
    if s1 == s2:
        return 0
    if not s1:
        return len(s2)
    if not s2:
        return len(s1)

    previous = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1, start=1):
        current = [i] + [0] * len(s2)
        for j, c2 in enumerate(s2, start=1):
            if c1 == c2:
                current[j] = previous[j - 1]
            else:
                current[j] = 1 + min(previous[j], current[j - 1], previous[j - 1])
        previous = current
    return previous[-1]


def text_similarity(text1: str, text2: str) -> float:
    """
    Compute similarity as ``(longer - distance) / longer``.

    Args:
        text1: First text.
        text2: Second text.

    Returns:
        Similarity in [0.0, 1.0]; 1.0 when both texts are empty.
    """
    longer = max(len(text1), len(text2))
    if longer == 0:
        return 1.0
    distance = levenshtein_distance(text1, text2)
    return (longer - distance) / longer
