"""Slug generation and cross-reference target normalization"""

import re


def slugify(text: str) -> str:
    """Convert text to a lowercase, hyphen-separated URL-safe slug."""
    text = text.lower()
    text = re.sub(r'[^\w\s-]', '', text)
    text = re.sub(r'[\s_]+', '-', text)
    return re.sub(r'-+', '-', text).strip('-')


def target_slug(target: str) -> str:
    """Normalize a doc-link target ('Some-Talk#anchor', 'docs/Some-Talk') to a slug."""
    target = target.split('#', 1)[0].rstrip('/')
    return slugify(target.rsplit('/', 1)[-1])
