"""Vocabulary for generated destination directory names.

Names look like ``<adjective>-<noun>``, for example ``quiet-river``.
"""

from typing import Final

ADJECTIVES: Final = (
    'amber',
    'bold',
    'brave',
    'bright',
    'calm',
    'clever',
    'crisp',
    'eager',
    'gentle',
    'golden',
    'happy',
    'lively',
    'lucky',
    'mellow',
    'noble',
    'quiet',
    'rapid',
    'silver',
    'swift',
    'wild',
)

NOUNS: Final = (
    'badger',
    'canyon',
    'comet',
    'dolphin',
    'eagle',
    'falcon',
    'forest',
    'garden',
    'harbor',
    'island',
    'lantern',
    'meadow',
    'ocean',
    'otter',
    'pebble',
    'river',
    'summit',
    'thunder',
    'tiger',
    'valley',
)

# Random draws before falling back to a numbered name
MAX_NAME_ATTEMPTS: Final = 10

NAME_SEPARATOR: Final = '-'


def make_name(adjective: str, noun: str) -> str:
    """Join an adjective and a noun into a directory name.

    Args:
        adjective: Word from ADJECTIVES.
        noun: Word from NOUNS.

    Returns:
        Name like ``quiet-river``.
    """
    return f'{adjective}{NAME_SEPARATOR}{noun}'


def make_numbered_name(base_name: str, counter: int) -> str:
    """Append a counter to a base name (``quiet-river-2``)."""
    return f'{base_name}{NAME_SEPARATOR}{counter}'
