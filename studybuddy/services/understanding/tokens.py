"""
Tokenization shared by the understanding stages.

Text is split into words, numbers and boundary punctuation. Rendering
joins tokens with single spaces and attaches punctuation to the word
before it, so tokenize(render(tokens)) == tokens.
"""

import re

BOUNDARY_PUNCTUATION = frozenset({".", ",", ";", "!", "?"})

# Ordinals stay whole ("3rd"); other digit/letter mixes split apart
_PIECE_RE = re.compile(r"\d+(?:st|nd|rd|th)\b|\d+(?:\.\d+)?|[a-z]+|[.,;!?]")
_NUMBER_RE = re.compile(r"^\d+(?:\.\d+)?$")


def split_word(word: str) -> list[str]:
    """Split one whitespace-delimited word into token pieces."""
    return _PIECE_RE.findall(word)


def tokenize(text: str) -> list[str]:
    """Tokenize already-cleaned text."""
    tokens: list[str] = []
    for word in text.split():
        tokens.extend(split_word(word))
    return tokens


def render(tokens: list[str]) -> str:
    """Join tokens back into text."""
    parts: list[str] = []
    for token in tokens:
        if token in BOUNDARY_PUNCTUATION and parts:
            parts[-1] += token
        else:
            parts.append(token)
    return " ".join(parts)


def is_boundary(token: str) -> bool:
    return token in BOUNDARY_PUNCTUATION


def is_numeric(token: str) -> bool:
    return bool(_NUMBER_RE.match(token))


def is_word(token: str) -> bool:
    return token.isalpha()
