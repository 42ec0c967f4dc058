"""Symbol extraction for hunkscope.

This package provides:
- languages: LanguageProfile, LanguageRegistry, default_registry, BUILTIN_LANGUAGES
- extractor: extract_symbols
"""

from hunkscope.symbols.languages import (
    ANONYMOUS,
    BUILTIN_LANGUAGES,
    LanguageRegistry,
    LanguageProfile,
    default_registry,
)
from hunkscope.symbols.extractor import (
    ContentLookup,
    extract_symbols,
)


__all__ = [
    "ANONYMOUS",
    "BUILTIN_LANGUAGES",
    "LanguageRegistry",
    "LanguageProfile",
    "default_registry",
    "ContentLookup",
    "extract_symbols",
]
