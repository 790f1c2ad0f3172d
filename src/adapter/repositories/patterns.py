"""LIKE pattern helpers"""

LIKE_ESCAPE = "\\"


def contains_pattern(fragment: str) -> str:
    """%fragment% with LIKE wildcards in the fragment matched literally"""
    escaped = (
        fragment.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", f"{LIKE_ESCAPE}%")
        .replace("_", f"{LIKE_ESCAPE}_")
    )
    return f"%{escaped}%"
