"""Command line tokenizer — shell-like word splitting for `!` commands.

Splits an operator-typed line into arguments:

- unquoted whitespace separates arguments, runs of it collapse;
- a double quote at the start of an argument opens a quoted span in
  which whitespace is literal, until the closing quote;
- a backslash escapes exactly the next character, in words and in
  quoted spans alike.

The tokenizer never fails. An unterminated quote or a trailing lone
backslash is kept as part of the last argument.
"""

from enum import Enum


class State(Enum):
    UNQUOTED = "unquoted"
    BUILDING_WORD = "building_word"
    BUILDING_QUOTED = "building_quoted"
    ESCAPE_IN_WORD = "escape_in_word"
    ESCAPE_IN_QUOTED = "escape_in_quoted"


class CharClass(Enum):
    WHITESPACE = "whitespace"
    QUOTE = "quote"
    BACKSLASH = "backslash"
    OTHER = "other"


# Actions applied to the character that triggered a transition
_DROP = "drop"      # discard the character
_PUSH = "push"      # append the character to the current argument
_FLUSH = "flush"    # emit the current argument, discard the character


def classify(char: str) -> CharClass:
    """Map a character to the class the state machine switches on."""
    if char.isspace():
        return CharClass.WHITESPACE
    if char == '"':
        return CharClass.QUOTE
    if char == "\\":
        return CharClass.BACKSLASH
    return CharClass.OTHER


def _from_unquoted(cls: CharClass) -> tuple[State, str]:
    if cls is CharClass.WHITESPACE:
        return State.UNQUOTED, _DROP
    if cls is CharClass.QUOTE:
        return State.BUILDING_QUOTED, _DROP
    if cls is CharClass.BACKSLASH:
        return State.ESCAPE_IN_WORD, _DROP
    return State.BUILDING_WORD, _PUSH


def _from_word(cls: CharClass) -> tuple[State, str]:
    if cls is CharClass.WHITESPACE:
        return State.UNQUOTED, _FLUSH
    if cls is CharClass.BACKSLASH:
        return State.ESCAPE_IN_WORD, _DROP
    # A quote inside a word is an ordinary character
    return State.BUILDING_WORD, _PUSH


def _from_quoted(cls: CharClass) -> tuple[State, str]:
    if cls is CharClass.QUOTE:
        return State.UNQUOTED, _FLUSH
    if cls is CharClass.BACKSLASH:
        return State.ESCAPE_IN_QUOTED, _DROP
    return State.BUILDING_QUOTED, _PUSH


def _from_escape_in_word(cls: CharClass) -> tuple[State, str]:
    return State.BUILDING_WORD, _PUSH


def _from_escape_in_quoted(cls: CharClass) -> tuple[State, str]:
    return State.BUILDING_QUOTED, _PUSH


TRANSITIONS = {
    State.UNQUOTED: _from_unquoted,
    State.BUILDING_WORD: _from_word,
    State.BUILDING_QUOTED: _from_quoted,
    State.ESCAPE_IN_WORD: _from_escape_in_word,
    State.ESCAPE_IN_QUOTED: _from_escape_in_quoted,
}


def tokenize(line: str) -> list[str]:
    """Split a command line into its arguments.

    >>> tokenize('!say "a b" c')
    ['!say', 'a b', 'c']
    """
    args: list[str] = []
    current: list[str] = []
    state = State.UNQUOTED

    for char in line:
        state, action = TRANSITIONS[state](classify(char))
        if action == _PUSH:
            current.append(char)
        elif action == _FLUSH:
            args.append("".join(current))
            current = []

    # End of input behaves like a trailing whitespace, leniently
    if state is State.BUILDING_WORD or state is State.BUILDING_QUOTED:
        args.append("".join(current))
    elif state is State.ESCAPE_IN_WORD or state is State.ESCAPE_IN_QUOTED:
        current.append("\\")
        args.append("".join(current))

    return args
