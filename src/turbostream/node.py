import weakref

from .serialize import to_test_format


class Node:
    """Base DOM node.

    - tag_name: element name, or '#document' / '#text' for the other kinds
    - children: list of child Nodes, owned by this node
    - parent: the parent Node, held through a weak reference (None for the root)
    """

    __slots__ = ("__weakref__", "_parent", "children", "tag_name")

    def __init__(self, tag_name):
        if tag_name is None or tag_name == "":
            msg = "Empty tag_name passed to Node constructor (bug: tokenizer produced blank tag)"
            raise ValueError(msg)
        self.tag_name = tag_name
        self.children = []
        self._parent = None

    @property
    def parent(self):
        if self._parent is None:
            return None
        return self._parent()

    def append_child(self, child):
        if self.find_ancestor(lambda node: node is child) is not None:
            msg = f"Adding {child.tag_name} as child of {self.tag_name} would create circular reference"
            raise ValueError(msg)
        child._parent = weakref.ref(self)
        self.children.append(child)

    def find_ancestor(self, tag_name_or_predicate):
        """Find the nearest ancestor matching a tag name or predicate.
        Includes the current node in the search.
        """
        is_callable = callable(tag_name_or_predicate)
        current = self
        while current is not None:
            if is_callable:
                if tag_name_or_predicate(current):
                    return current
            elif current.tag_name == tag_name_or_predicate:
                return current
            current = current.parent
        return None

    def iter(self, tag_name=None):
        """Yield this node and every descendant in document order."""
        stack = [self]
        while stack:
            node = stack.pop()
            if tag_name is None or node.tag_name == tag_name:
                yield node
            stack.extend(reversed(node.children))

    @property
    def text(self):
        """Concatenated content of all descendant text nodes."""
        return "".join(node.content for node in self.iter("#text"))

    def to_test_format(self, indent=0):
        return to_test_format(self, indent)


class Document(Node):
    __slots__ = ()

    def __init__(self):
        super().__init__("#document")

    def __repr__(self):
        return f"Document(children={len(self.children)})"


class Element(Node):
    __slots__ = ("attributes",)

    def __init__(self, tag_name, attributes=None):
        super().__init__(tag_name)
        # Ordered (name, value) pairs exactly as tokenized, duplicates included.
        self.attributes = list(attributes) if attributes else []

    def get_attribute(self, name, default=None):
        """Value of the first attribute called ``name``."""
        for key, value in self.attributes:
            if key == name:
                return value
        return default

    def __repr__(self):
        return f"Element(<{self.tag_name}>, children={len(self.children)})"


class Text(Node):
    __slots__ = ("_parts",)

    def __init__(self, content=""):
        super().__init__("#text")
        self._parts = [content] if content else []

    @property
    def content(self):
        if len(self._parts) > 1:
            self._parts = ["".join(self._parts)]
        return self._parts[0] if self._parts else ""

    def append_text(self, data):
        self._parts.append(data)

    def __repr__(self):
        return f"Text({self.content[:30]!r})"
