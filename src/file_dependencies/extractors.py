# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Extraction of defined and required symbol names from raw file text.

Extraction is pattern-based, not syntactic. An Extractor has two slots,
one for defines and one for requires. The default RegexExtractor fills both
from single-capture-group patterns; CallableExtractor lets integrators plug
arbitrary functions into either slot (e.g. for non-regex module systems)
while the other slot keeps the default behavior.

The extractor is chosen once per invocation by create_extractor().
"""

import logging
import re
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Pattern, Union

from file_dependencies.config import Config, ExtractFunction
from file_dependencies.models import dedupe

logger = logging.getLogger(__name__)


def compile_pattern(pattern: Union[str, Pattern[str]]) -> Pattern[str]:
    """Compile a match rule, requiring exactly one capturing group.

    Raises:
        ValueError: If the pattern does not have exactly one capturing group.
    """
    compiled = re.compile(pattern) if isinstance(pattern, str) else pattern
    if compiled.groups != 1:
        raise ValueError(
            f"Pattern {compiled.pattern!r} must have exactly one capturing group, "
            f"has {compiled.groups}"
        )
    return compiled


def extract_matches(content: str, pattern: Pattern[str]) -> List[str]:
    """Return every captured value in first-occurrence order, without duplicates."""
    return dedupe(match.group(1) for match in pattern.finditer(content))


class Extractor(ABC):
    """Pulls defined and required symbol names out of file content.

    Implementations are pure: no side effects, no I/O. Both methods return
    names without duplicates, in first-occurrence order.
    """

    @abstractmethod
    def extract_defines(self, content: str) -> List[str]:
        pass

    @abstractmethod
    def extract_requires(self, content: str) -> List[str]:
        pass

    def name(self) -> str:
        return type(self).__name__


class RegexExtractor(Extractor):
    """Default extractor driven by two single-capture-group patterns."""

    def __init__(
        self,
        defines_pattern: Union[str, Pattern[str]],
        requires_pattern: Union[str, Pattern[str]],
    ) -> None:
        self.defines_pattern = compile_pattern(defines_pattern)
        self.requires_pattern = compile_pattern(requires_pattern)

    def extract_defines(self, content: str) -> List[str]:
        return extract_matches(content, self.defines_pattern)

    def extract_requires(self, content: str) -> List[str]:
        return extract_matches(content, self.requires_pattern)


def _as_symbols(result: Union[str, Iterable[str]]) -> List[str]:
    if isinstance(result, str):
        return [result]
    return dedupe(result)


class CallableExtractor(Extractor):
    """Extractor with user-supplied functions in one or both slots.

    Slots left as None are delegated to `fallback`. A function returning a
    single string yields that one symbol.
    """

    def __init__(
        self,
        fallback: Extractor,
        defines_func: Optional[ExtractFunction] = None,
        requires_func: Optional[ExtractFunction] = None,
    ) -> None:
        self.fallback = fallback
        self.defines_func = defines_func
        self.requires_func = requires_func

    def extract_defines(self, content: str) -> List[str]:
        if self.defines_func is None:
            return self.fallback.extract_defines(content)
        return _as_symbols(self.defines_func(content))

    def extract_requires(self, content: str) -> List[str]:
        if self.requires_func is None:
            return self.fallback.extract_requires(content)
        return _as_symbols(self.requires_func(content))


def create_extractor(config: Config) -> Extractor:
    """Build the extractor for an invocation from its configuration."""
    extractor: Extractor = RegexExtractor(
        config.extract_defines_pattern, config.extract_requires_pattern
    )
    if config.extract_defines is not None or config.extract_requires is not None:
        extractor = CallableExtractor(
            extractor,
            defines_func=config.extract_defines,
            requires_func=config.extract_requires,
        )

    logger.debug(f"Using extractor '{extractor.name()}'")
    return extractor
