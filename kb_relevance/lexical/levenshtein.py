"""
Levenshtein edit distance.

Minimum number of single-character insertions, deletions and substitutions
needed to turn one string into another. Classic dynamic programming with a
two-row rolling buffer sized to the shorter string.

Complexity: O(len(a) * len(b)) time, O(min(len(a), len(b))) space.
"""


def levenshtein(a: str, b: str) -> int:
    """
    Compute edit distance between two strings.
    
    Examples:
        >>> levenshtein("cat", "bat")
        1
        >>> levenshtein("", "cat")
        3
        >>> levenshtein("delay", "delays")
        1
    """
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)
    
    # Distance is symmetric: keep the row over the shorter string
    if len(b) > len(a):
        a, b = b, a
    
    prev = list(range(len(b) + 1))
    curr = [0] * (len(b) + 1)
    
    for i, char_a in enumerate(a, start=1):
        curr[0] = i
        for j, char_b in enumerate(b, start=1):
            cost = 0 if char_a == char_b else 1
            curr[j] = min(
                curr[j - 1] + 1,     # insertion
                prev[j] + 1,         # deletion
                prev[j - 1] + cost,  # substitution
            )
        prev, curr = curr, prev
    
    return prev[len(b)]
