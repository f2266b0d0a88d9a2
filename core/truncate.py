# core/truncate.py

# Discord rejects presence strings over 127 bytes; the budget is counted
# in UTF-16 bytes, two per code unit.
MAX_PRESENCE_BYTES = 127
ELLIPSIS_BUDGET_BYTES = 123
TRUNCATE_CHARS = 64
ELLIPSIS = "..."


def byte_count(s: str) -> int:
    return len(s.encode("utf-16-le", errors="surrogatepass"))


def truncate(s: str) -> str:
    """
    Fit a presence line into MAX_PRESENCE_BYTES.

    Over-budget strings are cut to TRUNCATE_CHARS characters, trimmed
    further until they fit ELLIPSIS_BUDGET_BYTES, then suffixed with "...".
    """
    if byte_count(s) <= MAX_PRESENCE_BYTES:
        return s

    s = s[:TRUNCATE_CHARS]
    while byte_count(s) > ELLIPSIS_BUDGET_BYTES:
        s = s[:-1]

    return s + ELLIPSIS
