"""Redirect detection and taxonomy label extraction for wiki markup."""

import re

# MediaWiki style: "#REDIRECT [[Target]]" / "#넘겨주기 [[Target]]"
BRACKETED_REDIRECT_PATTERN = re.compile(r"#(?:넘겨주기|REDIRECT)\s*\[\[(.+?)\]\]", re.IGNORECASE)

# NamuMark style: "#redirect Target" / "#넘겨주기 Target"
PLAIN_REDIRECT_PATTERN = re.compile(r"#(?:redirect|넘겨주기)\s+(.+)", re.IGNORECASE)

# [[분류:Label]] or [[분류:Label|SortKey]]
LOCALIZED_CATEGORY_PATTERN = re.compile(r"\[\[분류:([^|\]]+)(?:\|[^\]]*)?\]\]")

# [[Category:Label]] or [[Category:Label|SortKey]]
ENGLISH_CATEGORY_PATTERN = re.compile(r"\[\[Category:([^|\]]+)(?:\|[^\]]*)?\]\]", re.IGNORECASE)


def find_redirect_target(text: str | None) -> str | None:
    """Return the target of a bracketed redirect marker, if any.

    Args:
        text: Raw wiki markup

    Returns:
        Bracketed target title, or None when the text is not a redirect
    """
    if not text:
        return None
    match = BRACKETED_REDIRECT_PATTERN.search(text)
    return match.group(1) if match else None


def find_plain_redirect_target(text: str | None) -> str | None:
    """Return the target of an unbracketed NamuMark redirect, if any.

    The target is the remainder of the line after the marker.
    """
    if not text:
        return None
    match = PLAIN_REDIRECT_PATTERN.search(text.strip())
    if not match:
        return None
    return match.group(1).strip()


def extract_taxonomy_labels(text: str | None) -> list[str]:
    """Extract category labels from wiki markup.

    Localized [[분류:...]] labels come first, then [[Category:...]] labels.
    Sort keys after "|" are dropped. Repeated labels are kept; callers decide
    how to treat multiplicity.

    Args:
        text: Raw wiki markup

    Returns:
        Non-empty, stripped labels in match order
    """
    if not text:
        return []

    labels: list[str] = []
    for pattern in (LOCALIZED_CATEGORY_PATTERN, ENGLISH_CATEGORY_PATTERN):
        for match in pattern.finditer(text):
            label = match.group(1).strip()
            if label:
                labels.append(label)
    return labels


def truncate(value: str, max_length: int) -> str:
    """Cut value to at most max_length characters."""
    if len(value) <= max_length:
        return value
    return value[:max_length]
