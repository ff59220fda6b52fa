#!/usr/bin/env python3
"""Debug script to inspect how the tokenizer handles a piece of markup."""

import argparse
import sys

from turbostream.tokenizer import Tokenizer, TokenizerOpts
from turbostream.tokens import CharacterTokens, EOFToken, Tag


class RecordingSink:
    def __init__(self):
        self.tokens = []

    def process_token(self, token):
        self.tokens.append(token)


def _token_to_list(token):
    if isinstance(token, CharacterTokens):
        return ["Character", token.data]
    if isinstance(token, Tag):
        if token.kind == Tag.START:
            return ["StartTag", token.name, list(token.attrs), token.self_closing]
        return ["EndTag", token.name]
    if isinstance(token, EOFToken):
        return ["EOF"]
    return None


def debug_markup(html, legacy_quoting=False, trace=False):
    sink = RecordingSink()
    opts = TokenizerOpts(collect_errors=True, legacy_quoting=legacy_quoting)
    tok = Tokenizer(sink, opts)

    print(f"Input: {html!r}")
    print(f"Legacy quoting: {legacy_quoting}")

    if trace:
        print("\nState trace:")
        for c in html:
            before = tok.state
            tok.feed(c)
            print(f"  {c!r:8} {before.name} -> {tok.state.name}")
    else:
        tok.feed(html)
    tok.close()

    print("\nTokens:")
    for token in sink.tokens:
        print(f"  {_token_to_list(token)}")

    if tok.errors:
        print("\nErrors:")
        for error in tok.errors:
            print(f"  {error}")
    else:
        print("\nNo parse errors")


def main():
    parser = argparse.ArgumentParser(description="Print the token stream for a markup string")
    parser.add_argument("html", nargs="?", help="Markup to tokenize (default: read stdin)")
    parser.add_argument("--legacy-quoting", action="store_true", help="Enable legacy attribute quoting")
    parser.add_argument("--trace", action="store_true", help="Print every state transition")
    args = parser.parse_args()

    html = args.html if args.html is not None else sys.stdin.read()
    debug_markup(html, legacy_quoting=args.legacy_quoting, trace=args.trace)


if __name__ == "__main__":
    main()
