import unittest

from turbostream.errors import StrictModeError
from turbostream.parser import HTMLStream, parse_html
from turbostream.tokenizer import TokenizerOpts

HTML = """<html>
<head><title>Demo</title><style>h1 { font-size: 2em }</style></head>
<body class="main"><h1 id=top>Heading</h1><p>one<br/>two</p></body>
</html>"""


class TestHTMLStream(unittest.TestCase):
    def test_incremental_matches_one_shot(self):
        expected = parse_html(HTML)
        for size in (1, 2, 5, 17):
            stream = HTMLStream()
            for start in range(0, len(HTML), size):
                stream.feed(HTML[start:start + size])
            root = stream.close()
            assert root.to_test_format() == expected.to_test_format(), size
            assert stream.style_rules == expected.style_rules

    def test_finished_only_after_close(self):
        stream = HTMLStream()
        stream.feed("<p>x</p>")
        assert not stream.finished
        stream.close()
        assert stream.finished

    def test_feed_is_chainable(self):
        root = HTMLStream().feed("<b>").feed("x</b>").close()
        assert root.text == "x"

    def test_text_is_visible_only_after_flush(self):
        stream = HTMLStream().feed("<p>partial")
        assert stream.root.children[0].children == []
        stream.close()
        assert stream.root.text == "partial"

    def test_errors_collected(self):
        stream = parse_html("<p = x>", tokenizer_opts=TokenizerOpts(collect_errors=True))
        assert [error.code for error in stream.errors] == ["unexpected-equals-sign-before-attribute-name"]

    def test_strict_parse(self):
        with self.assertRaises(StrictModeError):
            parse_html("<p>1 < 2</p>", tokenizer_opts=TokenizerOpts(strict=True))

    def test_empty_input(self):
        stream = parse_html("")
        assert stream.finished
        assert stream.root.children == []


if __name__ == "__main__":
    unittest.main()
