"""
Keyword Lexicon

Loads the request-understanding vocabulary from YAML into an immutable
Lexicon. The normalizer, segmenter and extractor receive a Lexicon at
construction time; nothing mutates it afterwards, so a single instance
can be shared freely across threads and requests.

Usage:
    from studybuddy.config.lexicon import get_lexicon, load_lexicon

    lexicon = get_lexicon()                      # packaged lexicon.yaml
    custom = load_lexicon(Path("my_lexicon.yaml"))

    lexicon.resolve_target("card")   # TargetDomain.FLASHCARDS
    lexicon.canonical("card")        # "flashcards"
"""

import logging
import re
from dataclasses import dataclass
from functools import cached_property, lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional

import yaml

from studybuddy.config.understanding import understanding_settings
from studybuddy.enums.request import ActionVerb, FunKind, TargetDomain

logger = logging.getLogger(__name__)

DEFAULT_LEXICON_PATH = Path(__file__).parent / "lexicon.yaml"

_NUMBER_RE = re.compile(r"^\d+(?:\.\d+)?$")


def _words(values: Optional[list], section: str) -> list[str]:
    """Return a YAML word list, rejecting anything that did not parse as a string."""
    words = list(values or [])
    invalid = [w for w in words if not isinstance(w, str)]
    if invalid:
        raise ValueError(
            f"Lexicon section '{section}' has non-string entries {invalid!r}; "
            f"quote YAML words such as on/off/yes/no"
        )
    return words


@dataclass(frozen=True)
class Lexicon:
    """
    Immutable keyword tables used for request understanding.

    Mappings are read-only proxies and word sets are frozensets. Ordered
    tuples are kept where lexicon order breaks fuzzy-match ties.
    """

    target_aliases: Mapping[str, TargetDomain]
    target_keywords: Mapping[TargetDomain, str]
    fun_kinds: Mapping[str, FunKind]
    verbs: Mapping[str, ActionVerb]
    implied_targets: Mapping[str, TargetDomain]
    conjunctions: frozenset[str]
    prepositions: frozenset[str]
    quantifiers: frozenset[str]
    articles: frozenset[str]
    fillers: frozenset[str]
    number_words: Mapping[str, int]
    fraction_words: frozenset[str]
    domain_nouns: tuple[str, ...]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Lexicon":
        """
        Build a Lexicon from parsed YAML.

        Raises:
            ValueError: If a section names an unknown target, verb or fun
                kind, or holds a non-string word (bare `on` or `no` parse
                as booleans in YAML)
        """
        target_aliases: dict[str, TargetDomain] = {}
        target_keywords: dict[TargetDomain, str] = {}
        for target_name, aliases in (data.get("targets") or {}).items():
            target = TargetDomain(target_name)
            if target == TargetDomain.ALL:
                raise ValueError("'all' is a wildcard, not a lexicon target")
            aliases = _words(aliases, f"targets.{target_name}")
            if not aliases:
                raise ValueError(f"Target '{target_name}' has no aliases")
            target_keywords[target] = aliases[0]
            for alias in aliases:
                target_aliases.setdefault(alias, target)

        verbs: dict[str, ActionVerb] = {}
        for verb_name, words in (data.get("verbs") or {}).items():
            verb = ActionVerb(verb_name)
            for word in _words(words, f"verbs.{verb_name}"):
                verbs.setdefault(word, verb)

        number_words = data.get("number_words") or {}
        _words(list(number_words), "number_words")
        _words(list(data.get("implied_targets") or {}), "implied_targets")

        return cls(
            target_aliases=MappingProxyType(target_aliases),
            target_keywords=MappingProxyType(target_keywords),
            fun_kinds=MappingProxyType(
                {kind: FunKind(kind) for kind in _words(data.get("fun_kinds"), "fun_kinds")}
            ),
            verbs=MappingProxyType(verbs),
            implied_targets=MappingProxyType(
                {
                    word: TargetDomain(target)
                    for word, target in (data.get("implied_targets") or {}).items()
                }
            ),
            conjunctions=frozenset(_words(data.get("conjunctions"), "conjunctions")),
            prepositions=frozenset(_words(data.get("prepositions"), "prepositions")),
            quantifiers=frozenset(_words(data.get("quantifiers"), "quantifiers")),
            articles=frozenset(_words(data.get("articles"), "articles")),
            fillers=frozenset(_words(data.get("fillers"), "fillers")),
            number_words=MappingProxyType(
                {word: int(value) for word, value in number_words.items()}
            ),
            fraction_words=frozenset(_words(data.get("fraction_words"), "fraction_words")),
            domain_nouns=tuple(_words(data.get("domain_nouns"), "domain_nouns")),
        )

    @cached_property
    def vocabulary(self) -> frozenset[str]:
        """Every word the lexicon knows; exact matches are never corrected."""
        return frozenset().union(
            self.target_aliases,
            self.fun_kinds,
            self.verbs,
            self.conjunctions,
            self.prepositions,
            self.quantifiers,
            self.articles,
            self.fillers,
            self.number_words,
            self.fraction_words,
            self.domain_nouns,
        )

    @cached_property
    def correction_candidates(self) -> tuple[str, ...]:
        """
        Words a misspelled token may be corrected to, in tie-break order.

        Conjunctions, articles and fillers are excluded: they are short,
        common, and rewriting a topic word into one loses information.
        """
        ordered: dict[str, None] = {}
        for group in (
            self.target_aliases,
            self.verbs,
            self.fun_kinds,
            self.prepositions,
            self.quantifiers,
            self.number_words,
            self.domain_nouns,
        ):
            for word in sorted(group) if isinstance(group, frozenset) else group:
                ordered.setdefault(word, None)
        return tuple(ordered)

    def is_known(self, word: str) -> bool:
        return word in self.vocabulary

    def resolve_target(self, word: str) -> Optional[TargetDomain]:
        """Map a target alias or fun kind to its domain."""
        if word in self.target_aliases:
            return self.target_aliases[word]
        if word in self.fun_kinds:
            return TargetDomain.FUN
        return None

    def canonical(self, word: str) -> str:
        """Canonical spelling for a matched word (target aliases collapse to their keyword)."""
        target = self.target_aliases.get(word)
        if target is not None:
            return self.target_keywords[target]
        return word

    def parse_number(self, word: str) -> Optional[int]:
        """Parse a number token ("7", "2.5" -> 2) or English number word."""
        if _NUMBER_RE.match(word):
            return int(float(word))
        return self.number_words.get(word)


@lru_cache()
def load_lexicon(path: Optional[Path] = None) -> Lexicon:
    """
    Load and cache a lexicon from YAML.

    Args:
        path: YAML file to read; None selects the packaged lexicon.yaml

    Returns:
        Immutable Lexicon instance
    """
    lexicon_path = Path(path) if path is not None else DEFAULT_LEXICON_PATH

    with open(lexicon_path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    lexicon = Lexicon.from_dict(data)
    logger.debug(
        f"Loaded lexicon from {lexicon_path}: {len(lexicon.vocabulary)} words, "
        f"{len(lexicon.domain_nouns)} domain nouns"
    )
    return lexicon


def get_lexicon() -> Lexicon:
    """Get the lexicon selected by UNDERSTANDING_LEXICON_PATH (or the packaged default)."""
    return load_lexicon(understanding_settings.LEXICON_PATH)
