"""Case conversion and singularization helpers for synthesized names."""

from __future__ import annotations

import re

# Word boundaries: separators, lower-to-upper transitions and the end of an
# uppercase run followed by a capitalized word ("HTTPServer" -> HTTP, Server).
_SEPARATOR_RE = re.compile(r"[^0-9a-zA-Z]+")
_WORD_RE = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|[0-9]+")

_UNCOUNTABLE: frozenset[str] = frozenset(
    {
        "equipment",
        "feedback",
        "fish",
        "information",
        "metadata",
        "money",
        "news",
        "rice",
        "series",
        "sheep",
        "species",
        "status",
        "traffic",
    }
)

_IRREGULAR: dict[str, str] = {
    "children": "child",
    "feet": "foot",
    "geese": "goose",
    "men": "man",
    "mice": "mouse",
    "oxen": "ox",
    "people": "person",
    "teeth": "tooth",
    "women": "woman",
}

# Checked in order; the first matching suffix wins.
_SINGULAR_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"(quiz)zes$", re.IGNORECASE), r"\1"),
    (re.compile(r"(matr|vert|ind)ices$", re.IGNORECASE), r"\1ix"),
    (re.compile(r"(movie|cookie|zombie)s$", re.IGNORECASE), r"\1"),
    (re.compile(r"([^aeiouy])ies$", re.IGNORECASE), r"\1y"),
    (re.compile(r"(ss|sh|ch|x|z)es$", re.IGNORECASE), r"\1"),
    (re.compile(r"(alias|status|bus)es$", re.IGNORECASE), r"\1"),
    (re.compile(r"(analy|ba|diagno|parenthe|progno|synop|the)ses$", re.IGNORECASE), r"\1sis"),
    (re.compile(r"([lr])ves$", re.IGNORECASE), r"\1f"),
    (re.compile(r"(kni|wi|li)ves$", re.IGNORECASE), r"\1fe"),
    (re.compile(r"(ss|us|is)$", re.IGNORECASE), r"\1"),
    (re.compile(r"s$", re.IGNORECASE), ""),
)


def split_words(raw: str) -> list[str]:
    """Split identifier-like text into its words."""
    words: list[str] = []
    for chunk in _SEPARATOR_RE.split(raw):
        words.extend(_WORD_RE.findall(chunk))
    return words


def camel(raw: str) -> str:
    """``widget_status`` -> ``widgetStatus``."""
    words = split_words(raw)
    if not words:
        return ""
    first, *rest = words
    return first.lower() + "".join(word.capitalize() for word in rest)


def pascal(raw: str) -> str:
    """``swagger petstore`` -> ``SwaggerPetstore``."""
    return "".join(word.capitalize() for word in split_words(raw))


def kebab(raw: str) -> str:
    """``codegenRequestBodyName`` -> ``codegen-request-body-name``."""
    return "-".join(word.lower() for word in split_words(raw))


def singular(word: str) -> str:
    """Return the singular form of an English noun, keeping its case style."""
    if not word:
        return word
    lowered = word.lower()
    if lowered in _UNCOUNTABLE:
        return word
    if lowered in _IRREGULAR:
        return _restore_case(word, _IRREGULAR[lowered])
    for pattern, replacement in _SINGULAR_RULES:
        if pattern.search(word):
            return _restore_case(word, pattern.sub(replacement, lowered, count=1))
    return word


def _restore_case(original: str, replacement: str) -> str:
    if original.isupper():
        return replacement.upper()
    if original[:1].isupper():
        return replacement[:1].upper() + replacement[1:]
    if original == original.lower():
        return replacement
    # Mixed case: keep the original's shared prefix verbatim.
    prefix_length = 0
    for left, right in zip(original.lower(), replacement):
        if left != right:
            break
        prefix_length += 1
    return original[:prefix_length] + replacement[prefix_length:]
