"""HTML reduction before LLM extraction.

Club listing pages are mostly presentation: inline styles, tracking scripts
and SVG icons. The reducer strips those, keeps script blocks that carry
machine-readable calendar data (JSON-LD, Nuxt state, dataLayer, inline JSON)
and bounds the result so one page never exceeds the model's input budget.
"""

import re

MAX_HTML_LENGTH = 40_000

_COMMENT_RE = re.compile(r"<!--[\s\S]*?-->")
_STYLE_RE = re.compile(r"<style[\s\S]*?</style>", re.IGNORECASE)
_SCRIPT_RE = re.compile(r"<script[\s\S]*?</script>", re.IGNORECASE)
_SVG_RE = re.compile(r"<svg[\s\S]*?</svg>", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s{2,}")

# A script containing any of these is kept verbatim
DATA_SCRIPT_MARKERS = (
    re.compile(r"application/ld\+json", re.IGNORECASE),
    re.compile(r"__NUXT__", re.IGNORECASE),
    re.compile(r"dataLayer", re.IGNORECASE),
    re.compile(r'"@type"\s*:', re.IGNORECASE),
    re.compile(r'"events"\s*:', re.IGNORECASE),
)


def is_data_script(block: str) -> bool:
    """Check whether a <script> block carries structured event data."""
    return any(marker.search(block) for marker in DATA_SCRIPT_MARKERS)


def _keep_data_script(match: re.Match[str]) -> str:
    block = match.group(0)
    return block if is_data_script(block) else ""


def reduce_html(html: str, max_length: int = MAX_HTML_LENGTH) -> str:
    """Strip presentation markup and truncate to `max_length` characters.

    Steps, in order: drop comments, drop <style> blocks, drop <script>
    blocks without data markers, drop <svg> blocks, collapse whitespace
    runs, truncate.

    Args:
        html: Raw page HTML
        max_length: Maximum length of the returned string

    Returns:
        Reduced HTML
    """
    if not html:
        return ""

    cleaned = _COMMENT_RE.sub("", html)
    cleaned = _STYLE_RE.sub("", cleaned)
    cleaned = _SCRIPT_RE.sub(_keep_data_script, cleaned)
    cleaned = _SVG_RE.sub("", cleaned)
    cleaned = _WHITESPACE_RE.sub(" ", cleaned)

    if len(cleaned) > max_length:
        cleaned = cleaned[:max_length]

    return cleaned
