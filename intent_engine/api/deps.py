from fastapi import HTTPException

from ..core.amounts import hex_to_bytes
from ..core.engine import IntentsEngine, get_engine
from ..core.errors import IntentError, Unauthorized


def engine_dependency() -> IntentsEngine:
    return get_engine()


def http_error(exc: IntentError) -> HTTPException:
    status = 403 if isinstance(exc, Unauthorized) else 400
    return HTTPException(status_code=status, detail=exc.to_dict())


def payload_bytes(text: str) -> bytes:
    return hex_to_bytes(text.strip())
