"""Decode a streamed NDJSON body into cumulative response text."""

from __future__ import annotations

import codecs
import json
import logging
from collections.abc import AsyncIterable, AsyncIterator

from llmhub.l1_entities.errors import GenerationError

log = logging.getLogger('llmhub.stream')


async def decode_ndjson_stream(chunks: AsyncIterable[bytes | str]) -> AsyncIterator[str]:
    """Yield the running concatenation of every ``response`` fragment.

    Each yielded value strictly extends the previous one. Malformed lines are
    logged and skipped. An empty chunk ends the stream; a record with an
    ``error`` field raises GenerationError.
    """
    decoder = codecs.getincrementaldecoder('utf-8')(errors='replace')
    pending = ''
    accumulated = ''

    async for chunk in chunks:
        if not chunk:
            break
        text = chunk if isinstance(chunk, str) else decoder.decode(chunk)
        lines = (pending + text).split('\n')
        pending = lines.pop()
        for line in lines:
            fragment = _parse_line(line)
            if fragment:
                accumulated += fragment
                yield accumulated

    pending += decoder.decode(b'', final=True)
    fragment = _parse_line(pending)
    if fragment:
        accumulated += fragment
        yield accumulated


def _parse_line(line: str) -> str:
    line = line.strip()
    if not line:
        return ''
    try:
        record = json.loads(line)
    except json.JSONDecodeError as e:
        log.warning('Skipping malformed stream line (%s): %.200s', e, line)
        return ''
    if not isinstance(record, dict):
        log.warning('Skipping non-object stream line: %.200s', line)
        return ''
    if 'error' in record:
        raise GenerationError(f'Generation service error: {record["error"]}')
    fragment = record.get('response')
    if not isinstance(fragment, str):
        log.warning('Stream line has no response text: %.200s', line)
        return ''
    return fragment
