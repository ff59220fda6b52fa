"""asyncio transport for ``Request`` / ``ResponseParser``.

The client opens a TCP connection, writes the formatted request and feeds
every fragment read from the socket to a ``ResponseParser``. A closed
connection is reported to the parser with ``feed_eof``; if the parser is
still incomplete at that point the response was cut short and
``IncompleteResponseError`` is raised. There are no retries.
"""

import asyncio
from contextlib import suppress

from .errors import IncompleteResponseError
from .log import get_logger
from .parser import HTMLStream
from .response import ResponseParser

logger = get_logger(__name__)


class ClientOpts:
    __slots__ = ("encoding", "read_size", "timeout")

    def __init__(self, timeout=None, read_size=65536, encoding="utf-8"):
        self.timeout = timeout
        self.read_size = int(read_size)
        # Body charset used when Content-Type does not declare one.
        self.encoding = encoding


async def send(request, opts=None):
    """Send ``request`` and return the parsed ``ResponseRecord``."""
    opts = opts or ClientOpts()
    task = _exchange(request, opts)
    if opts.timeout:
        return await asyncio.wait_for(task, opts.timeout)
    return await task


async def fetch_html(request, opts=None, **parser_kwargs):
    """Send ``request`` and parse the response body as HTML.

    Returns ``(response, document)`` where ``document`` is a closed
    ``HTMLStream``.
    """
    opts = opts or ClientOpts()
    response = await send(request, opts)
    document = HTMLStream(response.decode_body(response.charset or opts.encoding), **parser_kwargs)
    return response, document


async def _exchange(request, opts):
    logger.debug("Connecting to %s:%d", request.host, request.port)
    reader, writer = await asyncio.open_connection(request.host, request.port)
    try:
        writer.write(request.to_bytes())
        await writer.drain()
        logger.debug("Sent %r", request)

        parser = ResponseParser()
        while not parser.is_complete():
            fragment = await reader.read(opts.read_size)
            if not fragment:
                logger.debug("Connection closed by %s:%d", request.host, request.port)
                parser.feed_eof()
                break
            logger.debug("Received %d byte fragment", len(fragment))
            parser.feed(fragment)

        if not parser.is_complete():
            msg = f"Connection closed before the response was complete (parser state {parser.state.name})"
            raise IncompleteResponseError(msg)
        return parser.result()
    finally:
        writer.close()
        # The peer may already have reset the connection.
        with suppress(ConnectionError):
            await writer.wait_closed()
