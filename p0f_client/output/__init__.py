from .formatter import (
    SimpleResponseOutput,
    DetailedResponseOutput,
    JSONResponseOutput,
    get_formatter,
    colorize,
    describe,
)

__all__ = [
    'SimpleResponseOutput',
    'DetailedResponseOutput',
    'JSONResponseOutput',
    'get_formatter',
    'colorize',
    'describe',
]
