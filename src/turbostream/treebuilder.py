from .errors import TagMismatchError
from .log import get_logger
from .node import Document, Element, Text
from .stylesheet import parse_stylesheet
from .tokens import CharacterTokens, EOFToken, Tag

logger = get_logger(__name__)

STYLE_ELEMENT = "style"


class TreeBuilder:
    """Token sink that assembles the DOM.

    The open element stack starts with the Document. Start tags append a new
    Element under the stack top and push it (unless self-closing); end tags
    must close the stack top exactly, otherwise ``TagMismatchError`` is raised
    and the stack is left untouched. Closing a ``<style>`` element sends its
    text to ``stylesheet_parser`` and appends the returned rules to
    ``style_rules``.
    """

    __slots__ = ("current_text_node", "document", "finished", "open_elements", "style_rules", "stylesheet_parser")

    def __init__(self, stylesheet_parser=None, style_rules=None):
        self.stylesheet_parser = stylesheet_parser or parse_stylesheet
        # Callers that want rules to outlive this parse pass their own list.
        self.style_rules = style_rules if style_rules is not None else []
        self.document = Document()
        self.open_elements = [self.document]
        self.current_text_node = None
        self.finished = False

    @property
    def current_node(self):
        return self.open_elements[-1]

    def process_token(self, token):
        if isinstance(token, CharacterTokens):
            self._insert_text(token.data)
        elif isinstance(token, Tag):
            if token.kind == Tag.START:
                self._insert_element(token)
            else:
                self._close_element(token)
        elif isinstance(token, EOFToken):
            self.finished = True
            if len(self.open_elements) > 1:
                logger.debug("End of input with %d element(s) still open", len(self.open_elements) - 1)

    def finish(self):
        return self.document

    def _insert_element(self, tag):
        element = Element(tag.name, tag.attrs)
        self.current_node.append_child(element)
        if not tag.self_closing:
            self.open_elements.append(element)
        self.current_text_node = None

    def _close_element(self, tag):
        top = self.current_node
        if top is self.document:
            raise TagMismatchError(None, tag.name)
        if top.tag_name != tag.name:
            raise TagMismatchError(top.tag_name, tag.name)
        if top.tag_name == STYLE_ELEMENT:
            self._add_style_rules(top)
        self.open_elements.pop()
        self.current_text_node = None

    def _insert_text(self, data):
        if self.current_text_node is None:
            self.current_text_node = Text()
            self.current_node.append_child(self.current_text_node)
        self.current_text_node.append_text(data)

    def _add_style_rules(self, element):
        css_text = ""
        if element.children and element.children[0].tag_name == "#text":
            css_text = element.children[0].content
        rules = self.stylesheet_parser(css_text)
        self.style_rules.extend(rules)
        logger.debug("Collected %d style rule(s) from <style>", len(rules))
