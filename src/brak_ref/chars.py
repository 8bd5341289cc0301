"""Character classes used by the Brak lexer."""

_SPACE = frozenset(" \n\t\r")
_DIGIT = frozenset("0123456789.")


def is_space(ch: str) -> bool:
    return ch in _SPACE


def is_digit_char(ch: str) -> bool:
    """Digits plus the decimal point; a numeric run is validated later."""
    return ch in _DIGIT


def is_ident_char(ch: str) -> bool:
    if ch == "_":
        return True
    # ASCII only: identifiers are letters, digits and underscore
    return ch.isascii() and ch.isalnum()
