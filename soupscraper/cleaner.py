"""
Cleaner Module

Normalizes text pulled out of a page before it is stored.
"""

import re

QUOTE_CHARS = '"\'“”‘’«»'

_NUMBER = re.compile(r'-?\d[\d,]*(?:\.\d+)?|-?\.\d+')


def clean_text(text):
    """
    Clean extracted text by removing extra whitespace and invalid characters.

    Args:
        text (str): Raw text

    Returns:
        str: Cleaned text ('' for None)
    """
    if text is None:
        return ''

    text = str(text)
    text = text.replace('�', '')  # Remove replacement character
    text = text.replace('\x00', '')

    # Keep whitespace so it can be collapsed below
    text = ''.join(char for char in text if char.isprintable() or char.isspace())

    text = re.sub(r'\s+', ' ', text)
    return text.strip()


def strip_quotes(text):
    """
    Strip surrounding straight or typographic quote marks.

    Args:
        text (str): Quoted text

    Returns:
        str: Text without the surrounding quotes
    """
    return clean_text(text).strip(QUOTE_CHARS).strip()


def parse_number(text):
    """
    Extract the first number in a string.

    Args:
        text (str): Text such as '£51.77' or '1,204 reviews'

    Returns:
        float or None: The number, or None if the text has none

    Examples:
        >>> parse_number('£51.77')
        51.77
        >>> parse_number('1,204 reviews')
        1204.0
    """
    if text is None:
        return None

    match = _NUMBER.search(str(text))
    if not match:
        return None
    return float(match.group(0).replace(',', ''))


def clean_row(row, transforms=None):
    """
    Clean every value of a row and apply per-column transforms.

    Args:
        row (dict): Column name to raw value
        transforms (dict): Column name to callable applied after clean_text

    Returns:
        dict: New row with string values
    """
    transforms = transforms or {}
    cleaned = {}

    for key, value in row.items():
        value = clean_text(value)
        transform = transforms.get(key)
        if transform is not None:
            value = transform(value)
        cleaned[key] = '' if value is None else str(value)

    return cleaned
