"""End-to-end analysis of a staged change set.

Strings the components together: symbol extraction, prompt context building
and split analysis. Synchronous and free of I/O; content lookups must already
be resolved by the caller.
"""

from dataclasses import dataclass
from typing import Optional

from hunkscope.config import AnalysisConfig
from hunkscope.context import build_prompt_context
from hunkscope.models import CodeSymbol, PromptContext, SplitSuggestion, StagedChanges
from hunkscope.splitter import analyze_split
from hunkscope.symbols import ContentLookup, LanguageRegistry, extract_symbols


@dataclass
class AnalysisResult:
    """Everything derived from one staged change set."""

    symbols: list[CodeSymbol]
    context: PromptContext
    split: SplitSuggestion


def analyze_changes(
    changes: StagedChanges,
    staged_content: Optional[ContentLookup],
    head_content: Optional[ContentLookup],
    config: Optional[AnalysisConfig] = None,
    registry: Optional[LanguageRegistry] = None,
) -> AnalysisResult:
    """Run the full analysis pipeline.

    Args:
        changes: The staged change set (never empty).
        staged_content: Lookup of staged content by path.
        head_content: Lookup of HEAD content by path.
        config: Analysis configuration (defaults to AnalysisConfig()).
        registry: Language registry for symbol extraction.

    Returns:
        AnalysisResult with symbols, prompt context and split suggestion.
    """
    if config is None:
        config = AnalysisConfig()

    symbols = extract_symbols(list(changes.files), staged_content, head_content, registry)
    context = build_prompt_context(changes, symbols, config=config)
    split = analyze_split(changes, symbols, generic_dirs=config.generic_module_dirs)

    return AnalysisResult(symbols=symbols, context=context, split=split)
