from dataclasses import asdict
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..core.engine import IntentsEngine
from ..core.errors import IntentError
from .deps import engine_dependency, http_error, payload_bytes


router = APIRouter(prefix="/commands")


class PreviewRequest(BaseModel):
    intent: str = Field(min_length=1, description="Command text, e.g. 'send 20 dai to vitalik'")


class PreviewResponse(BaseModel):
    intent: str
    kind: str
    to: str
    value: str
    data: str
    call_data: str
    command: Dict[str, Any]


class TranslateRequest(BaseModel):
    call_data: str = Field(min_length=2, description="Hex execute(address,uint256,bytes) payload")


class TranslateResponse(BaseModel):
    intent: str


class VerifyRequest(BaseModel):
    intent: str = Field(min_length=1)
    call_data: str = Field(min_length=2)


class VerifyResponse(BaseModel):
    valid: bool
    expected_call_data: Optional[str] = None


def _command_dict(command: Any) -> Dict[str, Any]:
    return {key: str(value) if isinstance(value, int) else value for key, value in asdict(command).items()}


@router.post("/preview")
def post_preview(req: PreviewRequest, engine: IntentsEngine = Depends(engine_dependency)) -> PreviewResponse:
    try:
        preview = engine.preview(req.intent)
    except IntentError as e:
        raise http_error(e)
    return PreviewResponse(intent=req.intent, command=_command_dict(preview.command), **preview.to_dict())


@router.post("/translate")
def post_translate(req: TranslateRequest, engine: IntentsEngine = Depends(engine_dependency)) -> TranslateResponse:
    try:
        return TranslateResponse(intent=engine.translate(payload_bytes(req.call_data)))
    except IntentError as e:
        raise http_error(e)


@router.post("/verify")
def post_verify(req: VerifyRequest, engine: IntentsEngine = Depends(engine_dependency)) -> VerifyResponse:
    try:
        valid = engine.verify(req.intent, payload_bytes(req.call_data))
        expected = None if valid else "0x" + engine.preview(req.intent).call_data.hex()
    except IntentError as e:
        raise http_error(e)
    return VerifyResponse(valid=valid, expected_call_data=expected)
