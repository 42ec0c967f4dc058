"""Language registry for symbol extraction.

Each supported language is described by a LanguageProfile: the tree-sitter
grammar, a static table mapping declaration node types to SymbolKind, and a
visibility rule. Profiles are registered per file extension, so adding a
language means registering another profile rather than adding control flow.
"""

from dataclasses import dataclass, field
from functools import cached_property
from pathlib import PurePosixPath
from typing import Callable, Iterable, Optional

import tree_sitter_go
import tree_sitter_javascript
import tree_sitter_python
import tree_sitter_rust
import tree_sitter_typescript
from tree_sitter import Language, Node

from hunkscope.models import SymbolKind


# Name used when a declaration node has no "name" field (e.g. Rust impl blocks)
ANONYMOUS = "anonymous"

VisibilityRule = Callable[[Node, str], bool]


def never_public(node: Node, name: str) -> bool:
    """Visibility rule for languages without a visibility concept."""
    return False


def leading_visibility_modifier(node: Node, name: str) -> bool:
    """Public when the first child is a visibility modifier (Rust ``pub``)."""
    first = node.child(0)
    return first is not None and first.type == "visibility_modifier"


def exported_statement(node: Node, name: str) -> bool:
    """Public when the declaration is wrapped in an ``export`` statement."""
    parent = node.parent
    return parent is not None and parent.type == "export_statement"


def no_leading_underscore(node: Node, name: str) -> bool:
    """Public unless the name is underscore-prefixed (Python convention)."""
    return name != ANONYMOUS and not name.startswith("_")


def capitalized_name(node: Node, name: str) -> bool:
    """Public when the name is exported by capitalization (Go convention)."""
    return name != ANONYMOUS and name[:1].isupper()


@dataclass(frozen=True)
class LanguageProfile:
    """How to find declarations in one language."""

    name: str
    extensions: tuple[str, ...]
    grammar: Callable[[], object] = field(repr=False)
    node_kinds: dict[str, SymbolKind] = field(repr=False)
    is_public: VisibilityRule = field(default=never_public, repr=False)

    @cached_property
    def language(self) -> Language:
        return Language(self.grammar())

    def kind_of(self, node_type: str) -> Optional[SymbolKind]:
        return self.node_kinds.get(node_type)


RUST_KINDS = {
    "function_item": SymbolKind.FUNCTION,
    "struct_item": SymbolKind.STRUCT,
    "enum_item": SymbolKind.ENUM,
    "trait_item": SymbolKind.TRAIT,
    "impl_item": SymbolKind.IMPL,
    "const_item": SymbolKind.CONST,
    "type_item": SymbolKind.TYPE,
}

PYTHON_KINDS = {
    "function_definition": SymbolKind.FUNCTION,
    "class_definition": SymbolKind.CLASS,
}

GO_KINDS = {
    "function_declaration": SymbolKind.FUNCTION,
    "method_declaration": SymbolKind.METHOD,
    "type_spec": SymbolKind.TYPE,
    "const_spec": SymbolKind.CONST,
}

JAVASCRIPT_KINDS = {
    "function_declaration": SymbolKind.FUNCTION,
    "generator_function_declaration": SymbolKind.FUNCTION,
    "method_definition": SymbolKind.METHOD,
    "class_declaration": SymbolKind.CLASS,
}

TYPESCRIPT_KINDS = {
    **JAVASCRIPT_KINDS,
    "abstract_class_declaration": SymbolKind.CLASS,
    "interface_declaration": SymbolKind.INTERFACE,
    "enum_declaration": SymbolKind.ENUM,
    "type_alias_declaration": SymbolKind.TYPE,
}


BUILTIN_LANGUAGES = (
    LanguageProfile(
        name="rust",
        extensions=(".rs",),
        grammar=tree_sitter_rust.language,
        node_kinds=RUST_KINDS,
        is_public=leading_visibility_modifier,
    ),
    LanguageProfile(
        name="python",
        extensions=(".py", ".pyi"),
        grammar=tree_sitter_python.language,
        node_kinds=PYTHON_KINDS,
        is_public=no_leading_underscore,
    ),
    LanguageProfile(
        name="go",
        extensions=(".go",),
        grammar=tree_sitter_go.language,
        node_kinds=GO_KINDS,
        is_public=capitalized_name,
    ),
    LanguageProfile(
        name="javascript",
        extensions=(".js", ".jsx", ".mjs", ".cjs"),
        grammar=tree_sitter_javascript.language,
        node_kinds=JAVASCRIPT_KINDS,
        is_public=exported_statement,
    ),
    LanguageProfile(
        name="typescript",
        extensions=(".ts",),
        grammar=tree_sitter_typescript.language_typescript,
        node_kinds=TYPESCRIPT_KINDS,
        is_public=exported_statement,
    ),
    LanguageProfile(
        name="tsx",
        extensions=(".tsx",),
        grammar=tree_sitter_typescript.language_tsx,
        node_kinds=TYPESCRIPT_KINDS,
        is_public=exported_statement,
    ),
)


class LanguageRegistry:
    """Maps file extensions to LanguageProfiles."""

    def __init__(self, profiles: Iterable[LanguageProfile] = ()):
        self._by_extension: dict[str, LanguageProfile] = {}
        for profile in profiles:
            self.register(profile)

    def register(self, profile: LanguageProfile) -> None:
        """Register a profile for all of its extensions, replacing earlier ones."""
        for ext in profile.extensions:
            self._by_extension[ext.lower()] = profile

    def for_path(self, path: str) -> Optional[LanguageProfile]:
        """Return the profile for a file path, or None if unsupported."""
        return self._by_extension.get(PurePosixPath(path).suffix.lower())

    @property
    def extensions(self) -> list[str]:
        return sorted(self._by_extension)


def default_registry() -> LanguageRegistry:
    """Build a registry with all built-in languages."""
    return LanguageRegistry(BUILTIN_LANGUAGES)
