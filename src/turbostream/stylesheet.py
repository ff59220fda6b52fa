"""Stylesheet collaborator.

The tree builder hands the text of every closed ``<style>`` element to a
stylesheet parser: any callable taking the raw CSS text and returning a list
of rule objects. The rules are stored, never inspected, by the builder.

``parse_stylesheet`` is the default collaborator, backed by tinycss2.
"""

import tinycss2

from .log import get_logger

logger = get_logger(__name__)


class StyleRule:
    """A qualified CSS rule: a selector and its declarations in source order."""

    __slots__ = ("declarations", "selector", "source")

    def __init__(self, selector, declarations, source=None):
        self.selector = selector
        self.declarations = declarations
        self.source = source

    def __repr__(self):
        return f"StyleRule({self.selector!r}, {self.declarations!r})"

    def __str__(self):
        body = ";".join(f"{name}:{value}" for name, value in self.declarations)
        return f"{self.selector}{{{body}}}"

    def __eq__(self, other):
        if not isinstance(other, StyleRule):
            return NotImplemented
        return self.selector == other.selector and self.declarations == other.declarations

    __hash__ = None


def parse_stylesheet(text):
    """Parse CSS text into a list of rules.

    Qualified rules become ``StyleRule`` objects; at-rules are passed through
    as tinycss2 nodes. Syntax errors reported by tinycss2 are dropped.
    """
    rules = []
    for node in tinycss2.parse_stylesheet(text, skip_comments=True, skip_whitespace=True):
        if node.type == "qualified-rule":
            rules.append(_to_style_rule(node))
        elif node.type == "error":
            logger.debug("Dropping CSS parse error at %s:%s: %s", node.source_line, node.source_column, node.message)
        else:
            rules.append(node)
    return rules


def _to_style_rule(node):
    selector = tinycss2.serialize(node.prelude).strip()
    declarations = []
    for item in tinycss2.parse_declaration_list(node.content, skip_comments=True, skip_whitespace=True):
        if item.type != "declaration":
            continue
        value = tinycss2.serialize(item.value).strip()
        if item.important:
            value += " !important"
        declarations.append((item.name, value))
    return StyleRule(selector, declarations, source=node)
