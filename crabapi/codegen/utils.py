import re

__all__ = (
    'RESERVED_WORDS',
    'escape_reserved',
    'split_words',
    'to_kebab_case',
    'to_lower_camel_case',
    'to_shouty_snake_case',
    'to_snake_case',
    'to_upper_camel_case',
)

# Rust keywords that cannot be used as plain identifiers.
RESERVED_WORDS = frozenset(
    {
        'as',
        'async',
        'await',
        'break',
        'const',
        'continue',
        'crate',
        'dyn',
        'else',
        'enum',
        'extern',
        'false',
        'fn',
        'for',
        'if',
        'impl',
        'in',
        'let',
        'loop',
        'match',
        'mod',
        'move',
        'mut',
        'pub',
        'ref',
        'return',
        'self',
        'static',
        'struct',
        'super',
        'trait',
        'true',
        'type',
        'unsafe',
        'use',
        'where',
        'while',
    }
)

_NON_ALPHANUMERIC = re.compile(r'[^0-9A-Za-zÀ-￿]+')


def split_words(value: str) -> list[str]:
    """Split an identifier into words the way heck does.

    Non-alphanumeric characters separate words. Inside a run, a boundary is
    placed before an uppercase letter that follows a lowercase one, and before
    the last uppercase letter of an acronym that is followed by lowercase
    (``HTTPServer`` -> ``HTTP``, ``Server``). Digits never start a word.
    """
    words = []
    for chunk in _NON_ALPHANUMERIC.split(value):
        if not chunk:
            continue
        start = 0
        mode = None
        for index, char in enumerate(chunk):
            if index + 1 == len(chunk):
                words.append(chunk[start:])
                break
            following = chunk[index + 1]
            if char.islower():
                next_mode = 'lower'
            elif char.isupper():
                next_mode = 'upper'
            else:
                next_mode = mode

            if next_mode == 'lower' and following.isupper():
                words.append(chunk[start : index + 1])
                start = index + 1
                mode = None
            elif mode == 'upper' and char.isupper() and following.islower():
                words.append(chunk[start:index])
                start = index
                mode = None
            else:
                mode = next_mode
    return [word for word in words if word]


def _capitalize(word: str) -> str:
    return word[:1].upper() + word[1:].lower()


def to_snake_case(value: str) -> str:
    return '_'.join(word.lower() for word in split_words(value))


def to_kebab_case(value: str) -> str:
    return '-'.join(word.lower() for word in split_words(value))


def to_shouty_snake_case(value: str) -> str:
    return '_'.join(word.upper() for word in split_words(value))


def to_upper_camel_case(value: str) -> str:
    return ''.join(_capitalize(word) for word in split_words(value))


def to_lower_camel_case(value: str) -> str:
    words = split_words(value)
    if not words:
        return ''
    return words[0].lower() + ''.join(_capitalize(word) for word in words[1:])


def escape_reserved(name: str, taken: set[str] | frozenset[str] = frozenset()) -> str:
    """Append underscores until ``name`` is neither reserved nor taken."""
    while name in RESERVED_WORDS or name in taken:
        name += '_'
    return name
