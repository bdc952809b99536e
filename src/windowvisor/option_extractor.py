#!/usr/bin/env python3
"""
Feature option extraction from window descriptions.
"""

import re
from typing import List

# Checked in this order; output order never depends on the input text
OPTION_PATTERNS = [
    ('Low-E Glass', re.compile(r'low-e|low e|lowe', re.IGNORECASE)),
    ('Argon Gas', re.compile(r'argon|gas filled', re.IGNORECASE)),
    ('ENERGY STAR', re.compile(r'energy star|energystar', re.IGNORECASE)),
    ('Tempered Glass', re.compile(r'tempered|safety glass', re.IGNORECASE)),
    ('Grids', re.compile(r'grids|grilles|muntins', re.IGNORECASE)),
    ('Screens', re.compile(r'screens', re.IGNORECASE)),
    ('Tilt Feature', re.compile(r'tilt|washable', re.IGNORECASE)),
]


def extract_options(description) -> List[str]:
    """
    Find the feature options mentioned in a description.

    Args:
        description: Free-text window description

    Returns:
        Option labels, each at most once, in the fixed check order
    """
    if not isinstance(description, str) or not description:
        return []

    options = []
    for label, pattern in OPTION_PATTERNS:
        if pattern.search(description) and label not in options:
            options.append(label)
    return options


def format_option_labels(labels: List[str]) -> str:
    """Join option labels into the stored comma-separated form."""
    return ', '.join(labels)


def extract_options_text(description) -> str:
    return format_option_labels(extract_options(description))
