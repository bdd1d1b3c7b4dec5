from __future__ import annotations

import json
from typing import Any, AsyncIterator

from fastapi.responses import JSONResponse, StreamingResponse

from core.resource import Error, Resource


async def last_envelope(stream: AsyncIterator[Resource[Any]]) -> Resource[Any]:
    """Consuma lo stream e ritorna lo stato terminale."""
    last = None
    async for envelope in stream:
        last = envelope
    return last


async def envelope_response(stream: AsyncIterator[Resource[Any]]) -> JSONResponse:
    envelope = await last_envelope(stream)
    status_code = 502 if isinstance(envelope, Error) else 200
    return JSONResponse(envelope.to_dict(), status_code=status_code)


async def _ndjson(stream: AsyncIterator[Resource[Any]]) -> AsyncIterator[str]:
    async for envelope in stream:
        yield json.dumps(envelope.to_dict(), ensure_ascii=False) + "\n"


def ndjson_response(stream: AsyncIterator[Resource[Any]]) -> StreamingResponse:
    return StreamingResponse(_ndjson(stream), media_type="application/x-ndjson")
