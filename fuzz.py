#!/usr/bin/env python3
"""
Random fuzzer for the incremental parsers.
Generates malformed HTML and HTTP responses, then checks that splitting the
input into random fragments never changes the outcome.
"""

import argparse
import random
import string
import sys
import time
import traceback

from turbostream import HTMLStream, ResponseParser, TagMismatchError, TokenizerOpts, TurboStreamError

TAGS = [
    "div", "span", "p", "a", "img", "table", "tr", "td", "ul", "li", "form",
    "input", "button", "style", "head", "body", "html", "title", "br", "hr",
    "h1", "h2", "pre", "code", "section", "article", "DIV", "Span",
]

ATTRIBUTES = [
    "id", "class", "style", "href", "src", "alt", "title", "name", "value",
    "type", "data-x", "aria-label", "disabled", "checked", "viewBox",
]

CSS_SNIPPETS = [
    "body{color:red}",
    "p { margin: 0 auto; padding: 1px }",
    "a:hover{text-decoration:underline !important}",
    "@media print { p { color: black } }",
    "h1{",
    "}}}",
    "/* comment */ div > p { x: y }",
    "",
]

SPECIAL_CHARS = [
    "\x00", "\x0c", "\x7f", "\ufffd", "\u00a0", "\u2028", "\u200b", "\ufeff", "\r", "\r\n",
]


def random_string(min_len=0, max_len=20):
    """Generate random ASCII string."""
    length = random.randint(min_len, max_len)
    return "".join(random.choices(string.ascii_letters + string.digits, k=length))


def random_whitespace():
    ws = [" ", "\t", "\n", "\f", ""]
    return "".join(random.choices(ws, k=random.randint(0, 3)))


def fuzz_attribute():
    """Generate malformed attributes."""
    name = random.choice([
        lambda: random.choice(ATTRIBUTES),
        lambda: random_string(1, 10),
        lambda: "=",
        lambda: '"',
        lambda: "'",
        lambda: "<",
    ])()
    value = random.choice([
        lambda: random_string(0, 30),
        lambda: '"' + random_string() + '"',
        lambda: "'" + random_string() + "'",
        lambda: "/path/to/" + random_string(),
        lambda: random.choice(SPECIAL_CHARS) * random.randint(1, 4),
        lambda: "",
    ])()
    quote_start, quote_end = random.choice([
        ('="', '"'),
        ("='", "'"),
        ("=", ""),
        (" = ", ""),
        ("", ""),
        ('="', ""),  # Unclosed quote
        ("==", ""),
    ])
    return f"{name}{quote_start}{value}{quote_end}"


def fuzz_open_tag():
    tag = random.choice(TAGS)
    attrs = " ".join(fuzz_attribute() for _ in range(random.randint(0, 4)))
    closing = random.choice([">", "/>", " >", "/ >", "", ">>", ">/"])
    opening = random.choice(["<", "< ", "<<", "</"]) if random.random() < 0.2 else "<"
    return f"{opening}{tag}{random_whitespace()}{attrs}{random_whitespace()}{closing}"


def fuzz_close_tag():
    return random.choice([
        lambda: f"</{random.choice(TAGS)}>",
        lambda: f"</{random.choice(TAGS)} {fuzz_attribute()}>",
        lambda: "</>",
        lambda: "</ ",
        lambda: "</",
    ])()


def fuzz_text():
    return random.choice([
        lambda: random_string(0, 40),
        lambda: "a < b && c > d",
        lambda: random.choice(SPECIAL_CHARS),
        lambda: "\n" * random.randint(1, 3),
    ])()


def fuzz_well_formed(depth=0, max_depth=6):
    """Generate balanced markup so the tree builder gets past the first end tag."""
    tag = random.choice([t for t in TAGS if t != "style"])
    if depth >= max_depth or random.random() < 0.3:
        return f"<{tag}/>" if random.random() < 0.3 else f"<{tag}>{fuzz_text()}</{tag}>"
    inner = "".join(fuzz_well_formed(depth + 1, max_depth) for _ in range(random.randint(1, 3)))
    if random.random() < 0.2:
        inner += f"<style>{random.choice(CSS_SNIPPETS)}</style>"
    return f"<{tag} {fuzz_attribute()}>{inner}</{tag}>"


def generate_fuzzed_html():
    elements = [fuzz_open_tag, fuzz_close_tag, fuzz_text, fuzz_well_formed]
    weights = [4, 1, 3, 2]
    parts = [random.choices(elements, weights)[0]() for _ in range(random.randint(1, 12))]
    return "".join(parts)


def generate_fuzzed_response():
    """Generate a chunked or close-delimited response, sometimes truncated."""
    body = generate_fuzzed_html()
    headers = [("Content-Type", "text/html; charset=utf-8"), ("X-" + random_string(1, 6), random_string())]
    if random.random() < 0.7:
        headers.append(("Transfer-Encoding", "chunked"))
        chunks = []
        rest = body.encode("utf-8")
        while rest:
            size = random.randint(1, 16)
            piece, rest = rest[:size], rest[size:]
            chunks.append(b"%x\r\n%s\r\n" % (len(piece), piece))
        payload = b"".join(chunks) + b"0\r\n\r\n"
    else:
        payload = body.encode("utf-8")
    head = "HTTP/1.1 200 OK\r\n" + "".join(f"{name}: {value}\r\n" for name, value in headers) + "\r\n"
    data = head.encode("latin-1") + payload
    if random.random() < 0.1:
        data = data[:random.randint(0, len(data))]
    return data


def random_fragments(data):
    if len(data) < 2:
        return [data]
    pieces = random.randint(1, min(len(data), 12))
    cuts = sorted(random.sample(range(1, len(data)), pieces - 1))
    bounds = [0, *cuts, len(data)]
    return [data[start:end] for start, end in zip(bounds, bounds[1:])]


def _html_outcome(fragments, legacy_quoting):
    stream = HTMLStream(tokenizer_opts=TokenizerOpts(legacy_quoting=legacy_quoting))
    try:
        for fragment in fragments:
            stream.feed(fragment)
        stream.close()
    except TagMismatchError as exc:
        return ("mismatch", exc.expected, exc.actual, stream.to_test_format())
    return ("ok", stream.to_test_format(), [str(rule) for rule in stream.style_rules])


def _response_outcome(fragments):
    parser = ResponseParser()
    try:
        for fragment in fragments:
            parser.feed(fragment)
        parser.feed_eof()
        if not parser.is_complete():
            return ("incomplete", parser.state.name)
        record = parser.result()
    except TurboStreamError as exc:
        return ("error", type(exc).__name__)
    return ("ok", record.status_code, dict(record.headers), record.body)


def check_html(html):
    legacy_quoting = random.random() < 0.3
    expected = _html_outcome([html], legacy_quoting)
    actual = _html_outcome(random_fragments(html), legacy_quoting)
    if actual != expected:
        msg = f"fragmented parse differs: {actual!r} != {expected!r}"
        raise AssertionError(msg)


def check_response(data):
    expected = _response_outcome([data])
    actual = _response_outcome(random_fragments(data))
    if actual != expected:
        msg = f"fragmented parse differs: {actual!r} != {expected!r}"
        raise AssertionError(msg)


def run_fuzzer(target, num_tests, seed=None, verbose=False, save_failures=False):
    """Run the fuzzer against one of the parsers."""
    if seed is not None:
        random.seed(seed)

    if target == "html":
        generate, check = generate_fuzzed_html, check_html
    else:
        generate, check = generate_fuzzed_response, check_response

    crashes = []
    hangs = []
    successes = 0

    print(f"Fuzzing {target} parser with {num_tests} test cases...")
    start_time = time.time()

    for i in range(num_tests):
        data = generate()

        if verbose and i % 100 == 0:
            print(f"  Test {i}/{num_tests}...")

        try:
            start = time.perf_counter()
            check(data)
            elapsed = time.perf_counter() - start

            if elapsed > 5.0:
                hangs.append({"test_num": i, "input": data, "time": elapsed})
                if verbose:
                    print(f"  HANG: Test {i} took {elapsed:.2f}s")
            else:
                successes += 1

        except Exception as e:
            crashes.append({
                "test_num": i,
                "input": data,
                "error": str(e),
                "traceback": traceback.format_exc(),
            })
            if verbose:
                print(f"  CRASH: Test {i}: {e}")

    elapsed_total = time.time() - start_time

    print(f"\n{'='*60}")
    print(f"FUZZING RESULTS: {target}")
    print(f"{'='*60}")
    print(f"Total tests:    {num_tests}")
    print(f"Successes:      {successes}")
    print(f"Crashes:        {len(crashes)}")
    print(f"Hangs (>5s):    {len(hangs)}")
    print(f"Total time:     {elapsed_total:.2f}s")

    if crashes:
        print(f"\n{'='*60}")
        print("CRASH DETAILS:")
        print(f"{'='*60}")
        for crash in crashes[:10]:
            print(f"\nTest #{crash['test_num']}:")
            print(f"  Input: {crash['input'][:200]!r}...")
            print(f"  Error: {crash['error'][:500]}")
        if len(crashes) > 10:
            print(f"\n... and {len(crashes) - 10} more crashes")

    if hangs:
        print(f"\n{'='*60}")
        print("HANG DETAILS:")
        print(f"{'='*60}")
        for hang in hangs[:5]:
            print(f"\nTest #{hang['test_num']} ({hang['time']:.2f}s):")
            print(f"  Input: {hang['input'][:200]!r}...")

    if save_failures and (crashes or hangs):
        filename = f"fuzz_failures_{target}_{int(time.time())}.txt"
        with open(filename, "w", encoding="utf-8") as f:
            f.write(f"Fuzzing results for {target}\n")
            f.write(f"Seed: {seed}\n\n")
            for crash in crashes:
                f.write(f"=== CRASH #{crash['test_num']} ===\n")
                f.write(f"Input:\n{crash['input']!r}\n")
                f.write(f"Error: {crash['error']}\n")
                f.write(f"Traceback:\n{crash['traceback']}\n\n")
            for hang in hangs:
                f.write(f"=== HANG #{hang['test_num']} ({hang['time']:.2f}s) ===\n")
                f.write(f"Input:\n{hang['input']!r}\n\n")
        print(f"\nFailures saved to {filename}")

    return not crashes and not hangs


def main():
    parser = argparse.ArgumentParser(description="Fuzz the incremental parsers with malformed input")
    parser.add_argument(
        "--target", "-t",
        choices=["html", "response"],
        default="html",
        help="Parser to fuzz (default: html)",
    )
    parser.add_argument(
        "--num-tests", "-n",
        type=int,
        default=1000,
        help="Number of test cases to generate (default: 1000)",
    )
    parser.add_argument(
        "--seed", "-s",
        type=int,
        default=None,
        help="Random seed for reproducibility",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "--save-failures",
        action="store_true",
        help="Save failures to a file",
    )
    parser.add_argument(
        "--sample",
        type=int,
        metavar="N",
        help="Just print N sample fuzzed inputs (no parsing)",
    )

    args = parser.parse_args()

    if args.sample:
        if args.seed:
            random.seed(args.seed)
        generate = generate_fuzzed_html if args.target == "html" else generate_fuzzed_response
        for i in range(args.sample):
            print(f"=== Sample {i+1} ===")
            print(generate())
            print()
        return

    success = run_fuzzer(
        args.target,
        args.num_tests,
        seed=args.seed,
        verbose=args.verbose,
        save_failures=args.save_failures,
    )

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
