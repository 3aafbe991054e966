from typing import Literal, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .config import HashConfig
from .diffusion import measure_diffusion
from .engine import HashEngine, hash_trace
from .errors import HashError, InvalidInput

app = FastAPI(title="mdhash")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

Encoding = Literal["text", "bits", "hex"]


class HashInput(BaseModel):
    input: str
    encoding: Encoding = "text"
    config: Optional[dict] = None
    iv: Optional[str] = None  # hex


class DiffusionInput(BaseModel):
    first: str
    second: str
    encoding: Encoding = "text"
    compare: Literal["digests", "messages"] = "digests"
    config: Optional[dict] = None
    iv: Optional[str] = None  # hex


def decode_input(value: str, encoding: str):
    if encoding == "bits":
        return value
    if encoding == "hex":
        try:
            return bytes.fromhex(value)
        except ValueError as exc:
            raise InvalidInput(f"invalid hex input: {exc}") from exc
    return value.encode()


def build_engine(options: Optional[dict], iv: Optional[str]) -> HashEngine:
    iv_value = decode_input(iv, "hex") if iv is not None else None
    return HashEngine(iv=iv_value, **(options or {}))


@app.exception_handler(HashError)
async def hash_error_handler(request: Request, exc: HashError):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.post("/api/hash")
async def generate_digest(data: HashInput):
    engine = build_engine(data.config, data.iv)
    message = decode_input(data.input, data.encoding)
    return hash_trace(message, engine.config, iv=engine.initial_state)


@app.post("/api/diffusion")
async def compare_inputs(data: DiffusionInput):
    first = decode_input(data.first, data.encoding)
    second = decode_input(data.second, data.encoding)
    if data.compare == "messages":
        report = measure_diffusion(first, second)
    else:
        engine = build_engine(data.config, data.iv)
        report = measure_diffusion(engine.fork().hash(first), engine.fork().hash(second))
    result = report.as_dict()
    result["report"] = report.render()
    return result


@app.get("/api/config")
async def default_config() -> HashConfig:
    return HashConfig()
