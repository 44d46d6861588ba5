"""Tests for the best-effort stats document decoder."""

import asyncio

from uwsgi_stats.decoder import decode_snapshot, read_document


class TestReadDocument:
    def test_single_chunk(self, chunked):
        doc = asyncio.run(read_document(chunked(b'{"pid": 1}')))
        assert doc == {"pid": 1}

    def test_document_split_across_chunks(self, chunked, sample_payload, sample_stats):
        parts = [sample_payload[i:i + 7] for i in range(0, len(sample_payload), 7)]
        doc = asyncio.run(read_document(chunked(*parts)))
        assert doc == sample_stats

    def test_trailing_bytes_are_ignored(self, chunked):
        doc = asyncio.run(read_document(chunked(b'  {"pid": 1}{"pid": 2} garbage')))
        assert doc == {"pid": 1}

    def test_stops_reading_after_first_document(self):
        consumed = []

        async def gen():
            for part in (b'{"pid": 1}', b"never read"):
                consumed.append(part)
                yield part

        doc = asyncio.run(read_document(gen()))
        assert doc == {"pid": 1}
        assert consumed == [b'{"pid": 1}']

    def test_returns_while_peer_is_still_sending(self):
        async def gen():
            yield b'{"pid": 100}\n{"pid"'
            await asyncio.Event().wait()

        doc = asyncio.run(asyncio.wait_for(read_document(gen()), 2))
        assert doc == {"pid": 100}

    def test_brackets_inside_strings(self, chunked):
        doc = asyncio.run(
            read_document(chunked(b'{"cwd": "/a}b]", "v": "x\\"}', b'{", "n": [1]} tail'))
        )
        assert doc == {"cwd": "/a}b]", "v": 'x"}{', "n": [1]}

    def test_complete_but_malformed_container(self, chunked):
        assert asyncio.run(read_document(chunked(b"{pid: 1} more"))) is None

    def test_bare_scalar_document(self, chunked):
        assert asyncio.run(read_document(chunked(b"42"))) == 42

    def test_empty_stream(self, chunked):
        assert asyncio.run(read_document(chunked())) is None
        assert asyncio.run(read_document(chunked(b"", b"  \n"))) is None

    def test_truncated_document(self, chunked):
        assert asyncio.run(read_document(chunked(b'{"pid": 1, "workers": [{"id"'))) is None

    def test_malformed_document(self, chunked):
        assert asyncio.run(read_document(chunked(b"this is not json}"))) is None


class TestDecodeSnapshot:
    def test_non_object_document_gives_empty_snapshot(self, chunked):
        snapshot = asyncio.run(decode_snapshot(chunked(b"[1, 2, 3]")))
        assert snapshot.pid == 0
        assert snapshot.workers == []

    def test_truncated_document_gives_empty_snapshot(self, chunked):
        snapshot = asyncio.run(decode_snapshot(chunked(b'{"pid": 100, "load"')))
        assert snapshot.pid == 0
