# To run the server: uvicorn ringabell.server:app --host 0.0.0.0 --port 8000

import logging
from typing import Optional

from fastapi import FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from .audio_fingerprinter import Recognizer
from .config import Config, load_config
from .exceptions import MalformedAudioError, PreconditionViolation
from .index import SearchResult
from .log import setup_logging

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


async def _read_upload(audio: UploadFile, max_bytes: int) -> bytes:
    buf = bytearray()
    while True:
        chunk = await audio.read(CHUNK_SIZE)
        if not chunk:
            break
        buf.extend(chunk)
        if len(buf) > max_bytes:
            raise HTTPException(status_code=413, detail="File too large")
    return bytes(buf)


def create_app(
    config: Optional[Config] = None,
    recognizer: Optional[Recognizer] = None,
) -> FastAPI:
    config = config or Config()
    recognizer = recognizer or Recognizer(config=config)

    app = FastAPI(title="ringabell")
    app.state.recognizer = recognizer

    @app.exception_handler(MalformedAudioError)
    @app.exception_handler(PreconditionViolation)
    async def bad_audio(request: Request, exc: Exception):
        logger.warning("Rejected %s: %s", request.url.path, exc)
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.get("/songs")
    def list_songs():
        return {"songs": recognizer.index.labels()}

    @app.post("/register")
    async def register(
        audio: UploadFile = File(...),
        name: Optional[str] = Form(None),
    ):
        data = await _read_upload(audio, config.max_upload_bytes)
        song_name = name or audio.filename or "unnamed_audio_file"

        await run_in_threadpool(recognizer.register, song_name, data)
        return {"songName": song_name, "registered": len(recognizer.index)}

    @app.post("/search", response_model=SearchResult)
    async def search(audio: UploadFile = File(...)):
        data = await _read_upload(audio, config.max_upload_bytes)
        return await run_in_threadpool(recognizer.search_result, data)

    return app


def _default_app() -> FastAPI:
    config = load_config()
    setup_logging(config.log_level)
    return create_app(config)


app = _default_app()
