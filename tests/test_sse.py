"""Tests for SSE frame decoding."""

import httpx
import pytest
from httpx_sse import SSEError

from halp.utils.sse import SSEFrame, iter_frames
from helpers import byte_chunks, sse_response


async def frames_of(body: bytes, chunk_size: int = 0) -> list:
    content = byte_chunks(body, chunk_size) if chunk_size else body
    return [frame async for frame in iter_frames(sse_response(content))]


@pytest.mark.asyncio
async def test_single_frame():
    frames = await frames_of(b'data: {"text": "hello"}\n\n')
    assert [f.data for f in frames] == ['{"text": "hello"}']


@pytest.mark.asyncio
async def test_multiple_frames():
    frames = await frames_of(b"data: first\n\ndata: second\n\n")
    assert [f.data for f in frames] == ["first", "second"]


@pytest.mark.asyncio
async def test_event_line_sets_event_name():
    frames = await frames_of(b"event: content_block_delta\ndata: {}\n\ndata: b\n\n")
    assert frames[0].event == "content_block_delta"
    assert frames[0].data == "{}"
    assert frames[1].event != "content_block_delta"


@pytest.mark.asyncio
async def test_comment_lines_ignored():
    frames = await frames_of(b": ping\n\ndata: x\n: keep-alive\n\n")
    assert [f.data for f in frames] == ["x"]


@pytest.mark.asyncio
async def test_multiline_data_joined():
    frames = await frames_of(b"data: line1\ndata: line2\n\n")
    assert frames[0].data == "line1\nline2"


@pytest.mark.asyncio
async def test_crlf_line_endings():
    frames = await frames_of(b"data: one\r\n\r\ndata: two\r\n\r\n")
    assert [f.data for f in frames] == ["one", "two"]


@pytest.mark.asyncio
async def test_id_and_retry_fields_ignored():
    frames = await frames_of(b"id: 7\nretry: 1000\ndata: x\n\n")
    assert [f.data for f in frames] == ["x"]


@pytest.mark.asyncio
async def test_frame_without_data_is_dropped():
    assert await frames_of(b"event: ping\n\ndata: x\n\n") == [SSEFrame(data="x", event="message")]


@pytest.mark.asyncio
async def test_utf8_split_across_chunks():
    payload = "data: café ✓\n\n".encode("utf-8")
    split = payload.index("é".encode("utf-8")) + 1
    frames = await frames_of(payload, chunk_size=split)
    assert frames[0].data == "café ✓"
    assert frames[0].has_invalid_text == False


@pytest.mark.asyncio
async def test_invalid_utf8_is_flagged():
    frames = await frames_of(b'data: {"content": "ls \xff\xfe"}\n\ndata: ok\n\n')
    assert frames[0].has_invalid_text == True
    assert frames[1].has_invalid_text == False


@pytest.mark.asyncio
async def test_wrong_content_type_rejected():
    response = httpx.Response(200, headers={"content-type": "application/json"}, content=b"{}")
    with pytest.raises(SSEError):
        [frame async for frame in iter_frames(response)]


def test_done_signal_detection():
    assert SSEFrame(data="[DONE]").is_done_signal == True
    assert SSEFrame(data='{"done": true}').is_done_signal == False


@pytest.mark.asyncio
@pytest.mark.parametrize("size", [1, 2, 3, 7, 64])
async def test_chunk_size_invariant(size):
    body = b'event: a\ndata: {"n": 1}\n\n: ping\n\ndata: {"n": 2}\n\ndata: [DONE]\n\n'
    frames = await frames_of(body, chunk_size=size)
    assert [f.data for f in frames] == ['{"n": 1}', '{"n": 2}', "[DONE]"]
    assert frames[0].event == "a"
