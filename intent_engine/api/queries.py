from typing import Any, Dict

from fastapi import APIRouter, Depends

from ..core.engine import IntentsEngine
from ..core.errors import IntentError
from .deps import engine_dependency, http_error

router = APIRouter()


@router.get("/names/{name}")
def get_name(name: str, engine: IntentsEngine = Depends(engine_dependency)) -> Dict[str, Any]:
    """Resolve a name to its owner, receiver and node"""
    try:
        record = engine.what_is_the_address_of(name)
    except IntentError as e:
        raise http_error(e)
    return {"name": name.lower(), "owner": record.owner, "receiver": record.receiver, "node": record.node}


@router.get("/balances/{name}/{asset}")
def get_balance(name: str, asset: str, engine: IntentsEngine = Depends(engine_dependency)) -> Dict[str, Any]:
    try:
        raw, adjusted = engine.what_is_the_balance_of(name, asset)
    except IntentError as e:
        raise http_error(e)
    return {"name": name.lower(), "asset": asset.lower(), "balance": str(raw), "balance_adjusted": str(adjusted)}


@router.get("/supply/{asset}")
def get_supply(asset: str, engine: IntentsEngine = Depends(engine_dependency)) -> Dict[str, Any]:
    try:
        raw, adjusted = engine.what_is_the_total_supply_of(asset)
    except IntentError as e:
        raise http_error(e)
    return {"asset": asset.lower(), "supply": str(raw), "supply_adjusted": str(adjusted)}
