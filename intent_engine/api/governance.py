from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Header
from pydantic import BaseModel, Field

from ..core.engine import IntentsEngine
from ..core.errors import IntentError, Unauthorized
from ..core.governance import is_governance
from ..providers.names import EnsNameService, StaticNameService
from ..providers.rpc import JsonRpcLedger
from .deps import engine_dependency, http_error

router = APIRouter(prefix="/governance")


class AliasRequest(BaseModel):
    asset: str = Field(description="Asset address")
    name: str = Field(min_length=1, description="Alias to register (stored lowercased)")


class BulkAliasRequest(BaseModel):
    assets: List[str] = Field(min_length=1, description="Assets whose name() and symbol() become aliases")


class PairRequest(BaseModel):
    token_a: str
    token_b: str
    pool: str


class NameServiceRequest(BaseModel):
    backend: str = Field(description="static or ens")
    names: Dict[str, str] = Field(default_factory=dict, description="Table for the static backend")


@router.put("/aliases")
def put_alias(
    req: AliasRequest,
    x_caller_address: str = Header(default=""),
    engine: IntentsEngine = Depends(engine_dependency),
) -> Dict[str, Any]:
    try:
        engine.set_name(x_caller_address, req.asset, req.name)
    except IntentError as e:
        raise http_error(e)
    return {"success": True, "name": req.name.lower(), "asset": req.asset}


@router.put("/aliases/bulk")
def put_aliases_bulk(
    req: BulkAliasRequest,
    x_caller_address: str = Header(default=""),
    engine: IntentsEngine = Depends(engine_dependency),
) -> Dict[str, Any]:
    try:
        registered = engine.set_names(x_caller_address, req.assets)
    except IntentError as e:
        raise http_error(e)
    return {"success": True, "registered": registered}


@router.put("/pairs")
def put_pair(
    req: PairRequest,
    x_caller_address: str = Header(default=""),
    engine: IntentsEngine = Depends(engine_dependency),
) -> Dict[str, Any]:
    try:
        engine.set_pair(x_caller_address, req.token_a, req.token_b, req.pool)
    except IntentError as e:
        raise http_error(e)
    return {"success": True, "pool": req.pool}


@router.put("/name-service")
def put_name_service(
    req: NameServiceRequest,
    x_caller_address: str = Header(default=""),
    engine: IntentsEngine = Depends(engine_dependency),
) -> Dict[str, Any]:
    # Callers are checked before the request body is looked at
    if not is_governance(x_caller_address, engine.governance):
        raise http_error(Unauthorized(f"{x_caller_address or 'anonymous'} is not the governance principal"))

    backend = req.backend.lower()
    try:
        if backend == "ens" and isinstance(engine.ledger, JsonRpcLedger):
            service = EnsNameService(engine.ledger)
        elif backend == "static":
            service = StaticNameService(req.names)
        else:
            raise IntentError(f"Name service {req.backend!r} is not available")
        engine.set_name_service(x_caller_address, service)
    except IntentError as e:
        raise http_error(e)
    return {"success": True, "name_service": service.name}


@router.get("/events")
def get_events(engine: IntentsEngine = Depends(engine_dependency)) -> Dict[str, Any]:
    return {"events": [event.to_dict() for event in engine.events.all()]}
