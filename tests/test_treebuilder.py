import gc
import unittest

from turbostream.errors import TagMismatchError
from turbostream.node import Document, Element, Text
from turbostream.parser import HTMLStream, parse_html
from turbostream.stylesheet import StyleRule


class TestTreeConstruction(unittest.TestCase):
    def test_paragraph(self):
        root = parse_html("<p>hi</p>").root
        assert isinstance(root, Document)
        assert len(root.children) == 1
        p = root.children[0]
        assert isinstance(p, Element)
        assert p.tag_name == "p"
        assert p.attributes == []
        assert len(p.children) == 1
        assert isinstance(p.children[0], Text)
        assert p.children[0].content == "hi"

    def test_reparse_is_structurally_equal(self):
        html = '<div id="a"><p>one</p>two<br/></div>'
        first = parse_html(html).to_test_format()
        second = parse_html(html).to_test_format()
        assert first == second

    def test_anchor_attribute(self):
        a = parse_html('<a href="x">t</a>').root.children[0]
        assert a.attributes == [("href", "x")]
        assert a.get_attribute("href") == "x"
        assert [child.content for child in a.children] == ["t"]

    def test_nested_children_order(self):
        root = parse_html("<div><span>a</span>b</div>").root
        expected = "\n".join([
            "| <div>",
            "|   <span>",
            '|     "a"',
            '|   "b"',
        ])
        assert root.to_test_format() == expected
        div = root.children[0]
        assert [child.tag_name for child in div.children] == ["span", "#text"]

    def test_self_closing_is_not_pushed(self):
        root = parse_html("<div><br/>after</div>").root
        div = root.children[0]
        assert [child.tag_name for child in div.children] == ["br", "#text"]
        assert div.children[0].children == []

    def test_unquoted_self_closing_child(self):
        div = parse_html("<div><img src=a.png/></div>").root.children[0]
        assert [child.tag_name for child in div.children] == ["img"]
        assert div.children[0].attributes == [("src", "a.png")]
        assert div.children[0].children == []

    def test_text_coalesces_across_fragments(self):
        stream = HTMLStream()
        for c in "<p>hello world</p>":
            stream.feed(c)
        stream.close()
        p = stream.root.children[0]
        assert len(p.children) == 1
        assert p.children[0].content == "hello world"

    def test_recovered_less_than_joins_text_node(self):
        p = parse_html("<p>a < b</p>").root.children[0]
        assert len(p.children) == 1
        assert p.children[0].content == "a < b"

    def test_text_after_element_is_new_node(self):
        div = parse_html("<div>a<i>b</i>c</div>").root.children[0]
        assert [child.tag_name for child in div.children] == ["#text", "i", "#text"]
        assert div.children[0].content == "a"
        assert div.children[2].content == "c"

    def test_duplicate_attributes_preserved(self):
        el = parse_html('<a x="1" x="2"></a>').root.children[0]
        assert el.attributes == [("x", "1"), ("x", "2")]
        assert el.get_attribute("x") == "1"

    def test_top_level_text(self):
        root = parse_html("just text").root
        assert root.to_test_format() == '| "just text"'

    def test_parent_links(self):
        root = parse_html("<ul><li>x</li></ul>").root
        ul = root.children[0]
        li = ul.children[0]
        assert li.parent is ul
        assert ul.parent is root
        assert root.parent is None
        assert li.children[0].find_ancestor("ul") is ul

    def test_append_ancestor_rejected(self):
        root = parse_html("<ul><li>x</li></ul>").root
        li = root.children[0].children[0]
        with self.assertRaises(ValueError):
            li.append_child(root)
        assert root.parent is None

    def test_parent_link_is_weak(self):
        root = parse_html("<ul><li>x</li></ul>").root
        li = root.children[0].children[0]
        del root
        gc.collect()
        assert li.parent is None

    def test_unclosed_elements_remain_open(self):
        stream = parse_html("<div><p>text")
        assert stream.finished
        assert [node.tag_name for node in stream.tree_builder.open_elements] == ["#document", "div", "p"]
        assert stream.root.text == "text"


class TestTagMismatch(unittest.TestCase):
    def test_mismatched_end_tag_raises(self):
        stream = HTMLStream()
        with self.assertRaises(TagMismatchError) as ctx:
            stream.feed("<p>x</span>")
        assert ctx.exception.expected == "p"
        assert ctx.exception.actual == "span"
        # p was not silently closed
        assert stream.tree_builder.current_node.tag_name == "p"

    def test_end_tag_case_must_match(self):
        with self.assertRaises(TagMismatchError):
            parse_html("<P>x</p>")

    def test_end_tag_with_nothing_open(self):
        with self.assertRaises(TagMismatchError) as ctx:
            parse_html("</div>")
        assert ctx.exception.expected is None


class TestStyleExtraction(unittest.TestCase):
    def test_style_rule_collected(self):
        stream = parse_html("<style>body{color:red}</style>")
        assert len(stream.style_rules) == 1
        rule = stream.style_rules[0]
        assert isinstance(rule, StyleRule)
        assert rule.selector == "body"
        assert rule.declarations == [("color", "red")]
        assert str(rule) == "body{color:red}"

    def test_rules_from_several_style_elements(self):
        html = "<head><style>p{margin:0}</style></head><body><style>a{color:blue} b{font-weight:bold}</style></body>"
        stream = parse_html(html)
        assert [rule.selector for rule in stream.style_rules] == ["p", "a", "b"]

    def test_empty_style_element(self):
        assert parse_html("<style></style>").style_rules == []

    def test_custom_stylesheet_parser(self):
        seen = []

        def collaborator(text):
            seen.append(text)
            return ["rule-1", "rule-2"]

        stream = parse_html("<style> p { x: y } </style>", stylesheet_parser=collaborator)
        assert seen == [" p { x: y } "]
        assert stream.style_rules == ["rule-1", "rule-2"]

    def test_caller_supplied_rule_list_is_retained(self):
        rules = []
        parse_html("<style>a{color:red}</style>", style_rules=rules)
        parse_html("<style>b{color:blue}</style>", style_rules=rules)
        assert [rule.selector for rule in rules] == ["a", "b"]

    def test_fresh_parses_do_not_share_rules(self):
        first = parse_html("<style>a{color:red}</style>")
        second = parse_html("<p></p>")
        assert len(first.style_rules) == 1
        assert second.style_rules == []

    def test_style_forwarded_only_on_close(self):
        stream = HTMLStream()
        stream.feed("<style>p{color:red}")
        assert stream.style_rules == []
        stream.feed("</style>")
        assert len(stream.style_rules) == 1


if __name__ == "__main__":
    unittest.main()
