import unittest

from turbostream.chunked import ChunkedBodyDecoder, ChunkState
from turbostream.errors import ChunkSizeError

WIKIPEDIA = "4\r\nWiki\r\n5\r\npedia\r\n0\r\n\r\n"


class TestChunkedBodyDecoder(unittest.TestCase):
    def test_single_shot(self):
        decoder = ChunkedBodyDecoder()
        decoder.receive_all(WIKIPEDIA)
        assert decoder.content() == "Wikipedia"
        assert decoder.is_finished()
        assert decoder.state == ChunkState.DONE

    def test_one_character_at_a_time(self):
        decoder = ChunkedBodyDecoder()
        for c in WIKIPEDIA:
            decoder.receive(c)
        assert decoder.content() == "Wikipedia"
        assert decoder.is_finished()

    def test_every_two_way_split(self):
        for index in range(1, len(WIKIPEDIA)):
            decoder = ChunkedBodyDecoder()
            decoder.receive_all(WIKIPEDIA[:index])
            decoder.receive_all(WIKIPEDIA[index:])
            assert decoder.content() == "Wikipedia", index
            assert decoder.is_finished(), index

    def test_hex_sizes(self):
        body = "a" * 26 + "b" * 255
        data = f"1A\r\n{body[:26]}\r\nff\r\n{body[26:]}\r\n0\r\n\r\n"
        decoder = ChunkedBodyDecoder()
        decoder.receive_all(data)
        assert decoder.content() == body

    def test_chunk_data_may_contain_crlf(self):
        decoder = ChunkedBodyDecoder()
        decoder.receive_all("4\r\na\r\nb\r\n0\r\n\r\n")
        assert decoder.content() == "a\r\nb"

    def test_finished_as_soon_as_zero_size_is_announced(self):
        decoder = ChunkedBodyDecoder()
        decoder.receive_all("3\r\nabc\r\n0\r")
        assert decoder.is_finished()
        assert decoder.content() == "abc"

    def test_missing_final_crlf_is_tolerated(self):
        decoder = ChunkedBodyDecoder()
        decoder.receive_all("3\r\nabc\r\n0\r\n")
        assert decoder.is_finished()
        assert decoder.content() == "abc"

    def test_input_after_terminal_chunk_is_ignored(self):
        decoder = ChunkedBodyDecoder()
        decoder.receive_all(WIKIPEDIA + "garbage")
        assert decoder.content() == "Wikipedia"

    def test_not_finished_mid_chunk(self):
        decoder = ChunkedBodyDecoder()
        decoder.receive_all("5\r\npe")
        assert not decoder.is_finished()
        assert decoder.content() == "pe"
        assert decoder.state == ChunkState.READING_CHUNK

    def test_content_only_grows(self):
        decoder = ChunkedBodyDecoder()
        seen = 0
        for c in WIKIPEDIA:
            decoder.receive(c)
            assert len(decoder.content()) >= seen
            seen = len(decoder.content())

    def test_invalid_size_character(self):
        decoder = ChunkedBodyDecoder()
        with self.assertRaises(ChunkSizeError) as ctx:
            decoder.receive_all("4x\r\n")
        assert ctx.exception.char == "x"

    def test_non_ascii_digit_in_size(self):
        decoder = ChunkedBodyDecoder()
        with self.assertRaises(ChunkSizeError) as ctx:
            decoder.receive_all("\u0663\r\nabc\r\n0\r\n\r\n")
        assert ctx.exception.char == "\u0663"


if __name__ == "__main__":
    unittest.main()
