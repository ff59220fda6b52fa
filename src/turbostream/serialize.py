"""Serialization utilities for turbostream DOM trees.

``to_test_format`` produces the html5lib-style ``| <tag>`` dump used by the
tests and the command line; ``to_html`` turns a tree back into markup.
"""

# HTML5 void elements (no closing tag)
VOID_ELEMENTS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "param", "source", "track", "wbr",
})


def to_test_format(node, indent=0):
    """Convert a node to the html5lib test format string."""
    if node.tag_name == "#document":
        parts = []
        for child in node.children:
            child_output = to_test_format(child, 0)
            if child_output:
                parts.append(child_output)
        return "\n".join(parts)

    if node.tag_name == "#text":
        return f'| {" " * indent}"{node.content}"'

    sections = [f"| {' ' * indent}<{node.tag_name}>"]
    # Attributes stay in source order; duplicates are listed twice.
    for name, value in node.attributes:
        sections.append(f'| {" " * (indent + 2)}{name}="{value}"')
    for child in node.children:
        child_output = to_test_format(child, indent + 2)
        if child_output:
            sections.append(child_output)
    return "\n".join(sections)


def to_html(node, indent=0, indent_size=2):
    """Convert node to pretty-printed HTML string."""
    if node.tag_name == "#document":
        parts = []
        for child in node.children:
            child_html = _node_to_html(child, indent, indent_size)
            if child_html:
                parts.append(child_html)
        return "\n".join(parts)
    return _node_to_html(node, indent, indent_size)


def _node_to_html(node, indent=0, indent_size=2):
    prefix = " " * (indent * indent_size)

    if node.tag_name == "#text":
        text = node.content.strip()
        if text:
            return f"{prefix}{_escape_text(text)}"
        return ""

    name = node.tag_name
    attr_str = ""
    if node.attributes:
        attr_parts = []
        for key, value in node.attributes:
            if value == "":
                attr_parts.append(key)
            else:
                escaped = value.replace("&", "&amp;").replace('"', "&quot;")
                attr_parts.append(f'{key}="{escaped}"')
        attr_str = " " + " ".join(attr_parts)

    if name in VOID_ELEMENTS:
        return f"{prefix}<{name}{attr_str}>"

    children = node.children
    if not children:
        return f"{prefix}<{name}{attr_str}></{name}>"

    if all(child.tag_name == "#text" for child in children):
        text = "".join(child.content for child in children)
        if name not in ("style", "script"):
            text = _escape_text(text)
        return f"{prefix}<{name}{attr_str}>{text}</{name}>"

    parts = [f"{prefix}<{name}{attr_str}>"]
    for child in children:
        child_html = _node_to_html(child, indent + 1, indent_size)
        if child_html:
            parts.append(child_html)
    parts.append(f"{prefix}</{name}>")
    return "\n".join(parts)


def _escape_text(text):
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
