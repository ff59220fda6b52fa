import json
import unittest

from turbostream.request import FORM_CONTENT_TYPE, JSON_CONTENT_TYPE, Request, encode_body


class TestRequest(unittest.TestCase):
    def test_default_get(self):
        request = Request("example.com")
        assert str(request) == "\r\n".join([
            "GET / HTTP/1.1",
            "Host: example.com",
            f"Content-Type: {FORM_CONTENT_TYPE}",
            "Content-Length: 0",
            "",
            "",
        ])

    def test_host_header_includes_non_default_port(self):
        request = Request("localhost", port=8080)
        assert request.headers["Host"] == "localhost:8080"

    def test_explicit_host_header_kept(self):
        request = Request("127.0.0.1", headers={"Host": "example.com"})
        assert request.headers["Host"] == "example.com"

    def test_method_upper_cased(self):
        assert str(Request("h", method="post")).startswith("POST / HTTP/1.1\r\n")

    def test_form_body(self):
        request = Request("h", method="POST", path="/submit", body={"name": "a b", "q": "x&y"})
        assert request.body_text == "name=a%20b&q=x%26y"
        assert request.headers["Content-Length"] == str(len("name=a%20b&q=x%26y"))
        assert str(request).endswith("\r\n\r\nname=a%20b&q=x%26y")

    def test_json_body(self):
        request = Request("h", method="POST", headers={"Content-Type": JSON_CONTENT_TYPE}, body={"a": [1, 2]})
        assert request.body_text == '{"a":[1,2]}'
        assert json.loads(request.body_text) == {"a": [1, 2]}

    def test_content_length_counts_bytes(self):
        request = Request("h", method="POST", body="café")
        assert request.headers["Content-Length"] == "5"
        assert request.to_bytes().endswith("café".encode())

    def test_bytes_body_sent_unchanged(self):
        request = Request("h", method="POST", body=b"raw=1")
        assert request.body_text == "raw=1"


class TestEncodeBody(unittest.TestCase):
    def test_media_type_parameters_ignored(self):
        assert encode_body({"a": 1}, "application/json; charset=utf-8") == '{"a":1}'

    def test_form_reserved_characters(self):
        assert encode_body({"k": "it's (ok)!"}, FORM_CONTENT_TYPE) == "k=it's%20(ok)!"

    def test_unknown_content_type(self):
        with self.assertRaises(TypeError):
            encode_body({"a": 1}, "text/plain")


if __name__ == "__main__":
    unittest.main()
