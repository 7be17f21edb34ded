"""
Graph REST routes.

All routes are mounted under /api by main.py.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from vsgraph.compiler import CompileOptions, CycleError, ValidationError, emit, schedule
from vsgraph.compiler.deserialiser import json_to_graph
from vsgraph.compiler.schema import SchemaError, validate
from vsgraph.config import load_settings
from vsgraph.noderegistry.NodeRegistry import palette

logger = logging.getLogger(__name__)

router = APIRouter()


# ── GET /palette ──────────────────────────────────────────────────────────────

@router.get("/palette")
async def get_palette() -> List[Dict[str, Any]]:
    return palette()


# ── POST /compile ─────────────────────────────────────────────────────────────

class CompileBody(BaseModel):
    graph: Dict[str, Any]
    strict: Optional[bool] = None


# Plain def: FastAPI runs it in the threadpool.
@router.post("/compile")
def compile_graph_route(body: CompileBody) -> Dict[str, Any]:
    try:
        validate(body.graph)
    except SchemaError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    graph = json_to_graph(body.graph)
    strict = load_settings().strict if body.strict is None else body.strict

    try:
        order = schedule(graph.nodes, graph.connections, CompileOptions(strict=strict))
    except ValidationError as exc:
        logger.info(f"Rejected graph '{graph.name}': {exc}")
        raise HTTPException(
            status_code=422,
            detail={"error": "ValidationError", "reason": exc.reason.value, "message": str(exc)},
        )
    except CycleError as exc:
        logger.info(f"Rejected graph '{graph.name}': {exc}")
        raise HTTPException(
            status_code=422,
            detail={"error": "CycleError", "node_id": exc.node.id, "message": str(exc)},
        )

    return {
        "name": graph.name,
        "script": emit(order, graph.connections),
        "order": [n.id for n in order],
    }
