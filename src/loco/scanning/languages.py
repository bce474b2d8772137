"""Language rules: the single source of truth for lexical patterns.

Adding a language:
  1. Add a LanguageRule entry to RULES below.
  2. Add a display label for its extensions to LANGUAGE_LABELS.
  That's it. The registry picks it up automatically.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..exceptions import MalformedRuleError


@dataclass(frozen=True)
class LanguageRule:
    """Everything the line classifier needs to know about a language.

    All marker and keyword matching is plain substring search. Order matters:
    the classifier takes the first configured marker that occurs on a line,
    not the leftmost one.
    """

    name: str
    extensions: tuple[str, ...]

    # Comment syntax
    single_line_comments: tuple[str, ...] = ()
    multi_line_comments: tuple[tuple[str, str], ...] = ()

    # Signal keywords, first match per category wins on each line
    function_keywords: tuple[str, ...] = ()
    class_keywords: tuple[str, ...] = ()
    import_keywords: tuple[str, ...] = ()
    complexity_keywords: tuple[str, ...] = ()
    test_keywords: tuple[str, ...] = ()
    doc_keywords: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Reject delimiters that would corrupt the multi-line carry state."""
        for marker in self.single_line_comments:
            if not marker.strip():
                raise MalformedRuleError(self.name, "empty single-line comment marker")

        for pair in self.multi_line_comments:
            if len(pair) != 2:
                raise MalformedRuleError(self.name, "multi-line delimiter must be a (start, end) pair")
            start, end = pair
            if not start.strip():
                raise MalformedRuleError(self.name, "empty multi-line start marker", pair)
            if not end.strip():
                raise MalformedRuleError(self.name, "empty multi-line terminator", pair)
            # Single-character delimiters may not terminate themselves
            if start == end and len(start) == 1:
                raise MalformedRuleError(self.name, "self-equal single-character terminator", pair)


# ── Re-usable building blocks ──────────────────────────────────────

_C_LINE = ("//",)
_C_BLOCK = (("/*", "*/"),)
_HASH = ("#",)
_C_FLOW = ("if ", "while ", "for ", "switch ", "try ", "catch ", "else if ")
_JAVADOC = ("/**", "//", "@param", "@return")


# ── Language definitions ───────────────────────────────────────────

RULES: dict[str, LanguageRule] = {
    "rust": LanguageRule(
        name="rust",
        extensions=("rs",),
        single_line_comments=_C_LINE,
        multi_line_comments=_C_BLOCK,
        function_keywords=("fn ", "async fn "),
        class_keywords=("struct ", "enum ", "trait ", "impl "),
        import_keywords=("use ", "extern ", "mod "),
        complexity_keywords=("if ", "while ", "for ", "match ", "loop ", "else if "),
        test_keywords=("#[test]", "#[cfg(test)]", "assert!"),
        doc_keywords=("///", "//!", "#[doc"),
    ),
    "python": LanguageRule(
        name="python",
        extensions=("py", "pyw", "pyi"),
        single_line_comments=_HASH,
        multi_line_comments=(('"""', '"""'), ("'''", "'''")),
        function_keywords=("def ", "async def ", "lambda "),
        class_keywords=("class ",),
        import_keywords=("import ", "from "),
        complexity_keywords=("if ", "while ", "for ", "try ", "except ", "with ", "elif "),
        test_keywords=("def test_", "import unittest", "import pytest"),
        doc_keywords=('"""', "'''", "# TODO", "# FIXME"),
    ),
    "javascript": LanguageRule(
        name="javascript",
        extensions=("js", "ts", "jsx", "tsx", "mjs", "cjs"),
        single_line_comments=_C_LINE,
        multi_line_comments=_C_BLOCK,
        function_keywords=("function ", "=>", "async ", "const ", "let ", "var "),
        class_keywords=("class ", "interface ", "type ", "enum "),
        import_keywords=("import ", "require(", "export ", "from "),
        complexity_keywords=_C_FLOW,
        test_keywords=("describe(", "it(", "test(", "expect("),
        doc_keywords=_JAVADOC,
    ),
    "jvm": LanguageRule(
        name="jvm",
        extensions=("java", "kt", "scala"),
        single_line_comments=_C_LINE,
        multi_line_comments=_C_BLOCK,
        function_keywords=("public ", "private ", "protected ", "static "),
        class_keywords=("class ", "interface ", "enum ", "abstract "),
        import_keywords=("import ", "package "),
        complexity_keywords=_C_FLOW,
        test_keywords=("@Test", "junit", "testng"),
        doc_keywords=_JAVADOC,
    ),
    "c": LanguageRule(
        name="c",
        extensions=("c", "cpp", "cc", "cxx", "h", "hpp", "hxx", "c++"),
        single_line_comments=_C_LINE,
        multi_line_comments=_C_BLOCK,
        function_keywords=("int ", "void ", "char ", "float ", "double ", "bool "),
        class_keywords=("class ", "struct ", "union ", "enum ", "namespace "),
        import_keywords=("#include", "#import", "using "),
        complexity_keywords=("if ", "while ", "for ", "switch ", "else if "),
        test_keywords=("TEST(", "ASSERT_", "EXPECT_"),
        doc_keywords=("/**", "//!", "///"),
    ),
    "go": LanguageRule(
        name="go",
        extensions=("go",),
        single_line_comments=_C_LINE,
        multi_line_comments=_C_BLOCK,
        function_keywords=("func ",),
        class_keywords=("type ", "struct ", "interface "),
        import_keywords=("import ", "package "),
        complexity_keywords=("if ", "for ", "switch ", "select ", "else if "),
        test_keywords=("func Test", "testing.T"),
        doc_keywords=("//", "/*"),
    ),
    "php": LanguageRule(
        name="php",
        extensions=("php",),
        single_line_comments=("//", "#"),
        multi_line_comments=_C_BLOCK,
        function_keywords=("function ", "public function ", "private function "),
        class_keywords=("class ", "interface ", "trait ", "abstract "),
        import_keywords=("require", "include", "use "),
        complexity_keywords=("if ", "while ", "for ", "switch ", "try ", "catch "),
        test_keywords=("function test", "PHPUnit"),
        doc_keywords=("/**", "//", "*"),
    ),
    "ruby": LanguageRule(
        name="ruby",
        extensions=("rb",),
        single_line_comments=_HASH,
        multi_line_comments=(("=begin", "=end"),),
        function_keywords=("def ",),
        class_keywords=("class ", "module "),
        import_keywords=("require ", "require_relative ", "include "),
        complexity_keywords=("if ", "unless ", "while ", "until ", "case ", "rescue ", "elsif "),
        test_keywords=("describe ", "it ", "assert_", "RSpec"),
        doc_keywords=("=begin", "# @param", "# @return"),
    ),
    "shell": LanguageRule(
        name="shell",
        extensions=("sh", "bash", "zsh"),
        single_line_comments=_HASH,
        function_keywords=("function ", "() {"),
        import_keywords=("source ", ". /"),
        complexity_keywords=("if ", "while ", "for ", "case ", "elif ", "until "),
        test_keywords=("bats ", "@test", "assert"),
        doc_keywords=("##",),
    ),
}


LANGUAGE_LABELS: dict[str, str] = {
    "rs": "Rust",
    "py": "Python",
    "pyw": "Python",
    "pyi": "Python",
    "js": "JavaScript",
    "mjs": "JavaScript",
    "cjs": "JavaScript",
    "ts": "TypeScript",
    "jsx": "React JSX",
    "tsx": "React TypeScript",
    "java": "Java",
    "kt": "Kotlin",
    "scala": "Scala",
    "c": "C",
    "cpp": "C++",
    "cc": "C++",
    "cxx": "C++",
    "c++": "C++",
    "h": "C Header",
    "hpp": "C++ Header",
    "hxx": "C++ Header",
    "go": "Go",
    "php": "PHP",
    "rb": "Ruby",
    "sh": "Shell",
    "bash": "Shell",
    "zsh": "Shell",
}


def _normalize_extension(extension: str) -> str:
    return extension.lower().lstrip(".")


class RuleRegistry:
    """Resolves file extensions to language rules and display labels.

    The registry owns the unknown-extension policy: by default an extension
    without a rule resolves to ``None`` and the file is not analyzed. A
    ``fallback`` rule, when given, is used for every unknown extension instead.
    """

    def __init__(
        self,
        rules: Optional[dict[str, LanguageRule]] = None,
        labels: Optional[dict[str, str]] = None,
        fallback: Optional[LanguageRule] = None,
    ):
        self._labels = dict(LANGUAGE_LABELS if labels is None else labels)
        self._fallback = fallback
        self._by_extension: dict[str, LanguageRule] = {}
        for rule in (RULES if rules is None else rules).values():
            for ext in rule.extensions:
                self._by_extension[_normalize_extension(ext)] = rule

    def rule_for(self, extension: str) -> Optional[LanguageRule]:
        """Rule for an extension (with or without leading dot), or the fallback."""
        return self._by_extension.get(_normalize_extension(extension), self._fallback)

    def rule_for_path(self, path: Path) -> Optional[LanguageRule]:
        return self.rule_for(path.suffix)

    def label_for(self, extension: str) -> str:
        ext = _normalize_extension(extension)
        return self._labels.get(ext, f"Unknown ({ext})")

    def label_for_path(self, path: Path) -> str:
        return self.label_for(path.suffix)

    def is_known(self, extension: str) -> bool:
        return _normalize_extension(extension) in self._by_extension

    @property
    def extensions(self) -> list[str]:
        return sorted(self._by_extension)


default_registry = RuleRegistry()


def get_rule(extension: str) -> Optional[LanguageRule]:
    """Look up the built-in rule for an extension."""
    return default_registry.rule_for(extension)


def language_label(extension: str) -> str:
    """Display label for an extension, e.g. ``"py"`` -> ``"Python"``."""
    return default_registry.label_for(extension)
