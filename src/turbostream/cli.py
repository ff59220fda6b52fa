"""Command line front end: ``turbostream fetch`` and ``turbostream parse``."""

import argparse
import asyncio
import sys

from .client import ClientOpts, fetch_html
from .errors import TurboStreamError
from .log import get_logger, set_logger
from .parser import HTMLStream
from .request import JSON_CONTENT_TYPE, Request

logger = get_logger(__name__)


def _split_pairs(values, separator):
    pairs = {}
    for item in values or []:
        key, sep, value = item.partition(separator)
        if not sep:
            msg = f"expected KEY{separator}VALUE, got {item!r}"
            raise ValueError(msg)
        pairs[key.strip()] = value.strip() if separator == ":" else value
    return pairs


def build_arg_parser():
    parser = argparse.ArgumentParser(prog="turbostream", description="Fetch and parse HTML incrementally.")
    parser.add_argument("-v", "--verbose", action="store_true", help="log at DEBUG level")
    commands = parser.add_subparsers(dest="command", required=True)

    fetch = commands.add_parser("fetch", help="send a request and parse the response body as HTML")
    fetch.add_argument("host")
    fetch.add_argument("--port", type=int, default=80)
    fetch.add_argument("--path", default="/")
    fetch.add_argument("--method", default="GET")
    fetch.add_argument("--header", action="append", metavar="NAME:VALUE", help="extra request header")
    fetch.add_argument("--form", action="append", metavar="KEY=VALUE", help="body field")
    fetch.add_argument("--json", action="store_true", help="send the body fields as JSON")
    fetch.add_argument("--timeout", type=float, default=None)

    parse = commands.add_parser("parse", help="parse an HTML file (or stdin) and print the tree")
    parse.add_argument("file", nargs="?", type=argparse.FileType("r", encoding="utf-8"), default=sys.stdin)
    return parser


def _print_document(document, out):
    print(document.to_test_format(), file=out)
    print(f"style rules: {len(document.style_rules)}", file=out)
    for rule in document.style_rules:
        print(f"  {rule}", file=out)


def run_fetch(args, out):
    headers = _split_pairs(args.header, ":")
    if args.json:
        headers.setdefault("Content-Type", JSON_CONTENT_TYPE)
    request = Request(
        args.host,
        method=args.method,
        port=args.port,
        path=args.path,
        headers=headers,
        body=_split_pairs(args.form, "="),
    )
    response, document = asyncio.run(fetch_html(request, ClientOpts(timeout=args.timeout)))
    print(f"{response.status_code} {response.status_text}", file=out)
    for name, value in response.headers.items():
        print(f"{name}: {value}", file=out)
    print(file=out)
    _print_document(document, out)


def run_parse(args, out):
    stream = HTMLStream()
    for line in args.file:
        stream.feed(line)
    stream.close()
    _print_document(stream, out)


def main(argv=None, out=None):
    out = out or sys.stdout
    args = build_arg_parser().parse_args(argv)
    set_logger(verbose=args.verbose)
    try:
        if args.command == "fetch":
            run_fetch(args, out)
        else:
            run_parse(args, out)
    except (TurboStreamError, OSError, ValueError) as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
