import unittest

from turbostream.parser import parse_html
from turbostream.serialize import to_html, to_test_format


class TestSerialize(unittest.TestCase):
    def test_test_format_attributes_in_source_order(self):
        root = parse_html('<a z="1" b="2">t</a>').root
        assert to_test_format(root) == "\n".join([
            "| <a>",
            '|   z="1"',
            '|   b="2"',
            '|   "t"',
        ])

    def test_to_html_inline_text(self):
        root = parse_html('<p class="x">a &amp; b</p>').root
        assert to_html(root) == '<p class="x">a &amp;amp; b</p>'

    def test_to_html_nested(self):
        root = parse_html("<div><p>hi</p><br/></div>").root
        assert to_html(root) == "\n".join([
            "<div>",
            "  <p>hi</p>",
            "  <br>",
            "</div>",
        ])

    def test_to_html_style_text_not_escaped(self):
        root = parse_html("<style>a>b{color:red}</style>").root
        assert to_html(root) == "<style>a>b{color:red}</style>"

    def test_boolean_attribute(self):
        root = parse_html("<input disabled/>").root
        assert to_html(root) == "<input disabled>"


if __name__ == "__main__":
    unittest.main()
