"""HTTP/1.1 request formatting.

A request is text: the request line, one ``Name: value`` line per header, a
blank line, then the encoded body. Mapping bodies are encoded according to
``Content-Type`` (``application/x-www-form-urlencoded`` by default, or
``application/json``); ``str`` and ``bytes`` bodies are sent unchanged.
"""

import json
from urllib.parse import quote, urlencode

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
JSON_CONTENT_TYPE = "application/json"
HTTP_PORT = 80


class Request:
    __slots__ = ("body", "body_text", "headers", "host", "method", "path", "port")

    def __init__(self, host, *, method="GET", port=HTTP_PORT, path="/", headers=None, body=None):
        self.method = method.upper()
        self.host = host
        self.port = int(port)
        self.path = path or "/"
        self.body = body if body is not None else {}
        self.headers = dict(headers or {})

        if "Host" not in self.headers:
            self.headers["Host"] = host if self.port == HTTP_PORT else f"{host}:{self.port}"
        if "Content-Type" not in self.headers:
            self.headers["Content-Type"] = FORM_CONTENT_TYPE

        self.body_text = encode_body(self.body, self.headers["Content-Type"])
        self.headers["Content-Length"] = str(len(self.body_text.encode("utf-8")))

    def __repr__(self):
        return f"Request({self.method} http://{self.host}:{self.port}{self.path})"

    def __str__(self):
        lines = [f"{self.method} {self.path} HTTP/1.1"]
        lines.extend(f"{name}: {value}" for name, value in self.headers.items())
        return "\r\n".join(lines) + "\r\n\r\n" + self.body_text

    def to_bytes(self):
        return str(self).encode("utf-8")


def encode_body(body, content_type):
    if isinstance(body, bytes):
        return body.decode("utf-8")
    if isinstance(body, str):
        return body
    media_type = content_type.split(";", 1)[0].strip().lower()
    if media_type == JSON_CONTENT_TYPE:
        return json.dumps(body, separators=(",", ":"), ensure_ascii=False)
    if media_type == FORM_CONTENT_TYPE:
        # Same escaping as JavaScript's encodeURIComponent.
        return urlencode(body, quote_via=quote, safe="-_.!~*'()")
    msg = f"Cannot encode a {type(body).__name__} body as {content_type!r}; pass str or bytes"
    raise TypeError(msg)
