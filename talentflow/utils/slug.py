"""
Slug generation for job postings.

Slugs are URL-safe, lowercase, hyphen-separated renderings of a job title.
"""

import re

_DISALLOWED_CHARS = re.compile(r"[^a-z0-9 -]")
_WHITESPACE_RUN = re.compile(r"\s+")
_HYPHEN_RUN = re.compile(r"-+")


def generate_slug(title: str) -> str:
    """
    Derive a slug from a job title.

    Normalization rules:
    - Convert to lowercase
    - Drop characters outside [a-z0-9 -]
    - Replace whitespace runs with a single hyphen
    - Collapse consecutive hyphens
    - Strip leading/trailing hyphens

    The result only contains [a-z0-9-] and generate_slug(generate_slug(t))
    equals generate_slug(t).

    Args:
        title: Job title

    Returns:
        Slug string (empty when the title has no usable characters)

    Examples:
        >>> generate_slug("Backend Engineer")
        'backend-engineer'
        >>> generate_slug("  Senior Front-End / UI Developer!  ")
        'senior-front-end-ui-developer'
        >>> generate_slug("C++ & C# Wizard")
        'c-c-wizard'
    """
    slug = title.lower()
    slug = _DISALLOWED_CHARS.sub("", slug)
    slug = _WHITESPACE_RUN.sub("-", slug)
    slug = _HYPHEN_RUN.sub("-", slug)
    return slug.strip("-")
