"""Markdown parsing utilities for embeds, wiki-links, and inline tags."""

import re

# Match [[target]], [[target|display]], [[target#section]], [[target#section|display]]
WIKILINK_PATTERN = re.compile(r"\[\[(?P<target>[^\]|#]+)(?:#[^\]|]+)?(?:\|(?P<display>[^\]]+))?\]\]")

# ![[image.png]] / ![[image.png|300]] and ![alt](path "title")
EMBED_PATTERN = re.compile(
    r"!\[\[(?P<wiki>[^\]|#]+)(?:#[^\]|]+)?(?:\|[^\]]*)?\]\]"
    r"|!\[[^\]]*\]\(\s*<?(?P<md>[^)\s>]+)>?(?:\s+\"[^\"]*\")?\s*\)"
)

# #tag, #nested/tag; not inside words or headings ("# Title")
INLINE_TAG_PATTERN = re.compile(r"(?<![\w#/&])#([A-Za-z0-9_\-/]*[A-Za-z_\-/][A-Za-z0-9_\-/]*)")

FENCE_PATTERN = re.compile(r"^(```|~~~).*?^\1", re.MULTILINE | re.DOTALL)


def extract_embeds(content: str | None) -> list[str]:
    """Extract embed targets (wiki and markdown image syntax) in document order."""
    if not content:
        return []
    result = []
    for match in EMBED_PATTERN.finditer(content):
        target = match.group("wiki") or match.group("md")
        if target and target.strip():
            result.append(target.strip())
    return result


def parse_wikilink(value: str) -> str | None:
    """Return the target when ``value`` is exactly one wiki-link, else None."""
    match = WIKILINK_PATTERN.fullmatch(value.strip())
    return match.group(1).strip() if match else None


def extract_inline_tags(content: str) -> list[str]:
    """Extract ``#tags`` from body text, skipping fenced code blocks."""
    body = FENCE_PATTERN.sub("", content)
    seen = set()
    result = []
    for match in INLINE_TAG_PATTERN.findall(body):
        tag = f"#{match}"
        if tag not in seen:
            seen.add(tag)
            result.append(tag)
    return result
