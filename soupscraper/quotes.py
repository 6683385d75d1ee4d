"""
Quotes Example

Extraction rules for the classic quotes practice site, where each quote
sits in a div.quote block and pages link onward through li.next.
"""

from .cleaner import strip_quotes
from .parser import text_of

DEFAULT_START_URL = 'https://quotes.toscrape.com/'
QUOTE_FIELDS = ['text', 'author', 'tags']
NEXT_SELECTOR = 'li.next > a'


def extract_quotes(document):
    """
    Extract every quote on a page.

    Args:
        document (Document): Parsed quotes page

    Returns:
        list: Rows with text, author and comma-separated tags
    """
    rows = []
    for block in document.find_all('div', class_='quote'):
        text = strip_quotes(text_of(block.find('span', class_='text')))
        if not text:
            continue

        tags = [text_of(tag) for tag in block.find_all('a', class_='tag')]
        rows.append({
            'text': text,
            'author': text_of(block.find('small', class_='author')),
            'tags': ', '.join(tag for tag in tags if tag)
        })
    return rows


def format_quote(row):
    """
    Format a quote row for the console.

    Args:
        row (dict): Row from extract_quotes

    Returns:
        str: e.g. '"Some quote" - Author [tag1, tag2]'
    """
    line = f"\"{row['text']}\" - {row['author'] or 'Unknown'}"
    if row.get('tags'):
        line += f" [{row['tags']}]"
    return line
