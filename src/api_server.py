#!/usr/bin/env python3
"""
Block Graph - Scene API

Serves blocks, edge transforms and full render scenes for the graph
documents stored in the data directory. Every request reads its source
again, so edits to a document show up on the next request.

Endpoints that touch the data directory are plain functions, which
FastAPI runs in its threadpool.

Usage:
    pip install -e .
    python src/api_server.py
    # or: BLOCKGRAPH_DATA_DIR=./data uvicorn api_server:app --app-dir src --reload --port 8085
"""

import os
from pathlib import Path

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from edge_resolver import resolve_edges
from graph_importer import DEFAULT_DATA_DIR, load_blocks
from graph_models import (
    Block,
    DanglingEdgeError,
    GraphSourceError,
    MalformedSourceError,
    SourceFetchError,
    SourceNotFoundError,
    SourcePathError,
    Transform,
)
from graph_scene import Scene


app = FastAPI(
    title="Block Graph Scene API",
    description="Blocks, edges and render scenes for 3D graph documents",
    version="1.0.0"
)

# Enable CORS for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.data_dir = Path(os.environ.get("BLOCKGRAPH_DATA_DIR", DEFAULT_DATA_DIR))


ERROR_STATUS = {
    SourceNotFoundError: 404,
    SourcePathError: 400,
    SourceFetchError: 422,
    MalformedSourceError: 422,
    DanglingEdgeError: 422,
}


def http_error(error: GraphSourceError) -> HTTPException:
    # Most specific class wins
    status = next((ERROR_STATUS[cls] for cls in type(error).__mro__ if cls in ERROR_STATUS), 400)
    return HTTPException(status_code=status, detail=str(error))


def data_dir() -> Path:
    return Path(app.state.data_dir)


# Response models
class SourceList(BaseModel):
    data_dir: str
    total_sources: int
    sources: list[str]


# Endpoints

@app.get("/")
async def root():
    """API info endpoint."""
    return {
        "service": "blockgraph-scene-api",
        "version": "1.0.0",
        "endpoints": {
            "/api/sources": "Graph documents available in the data directory",
            "/api/blocks/{source_id}": "Blocks of one graph document",
            "/api/edges/{source_id}": "Edge transforms of one graph document",
            "/api/scene/{source_id}": "Render primitives and settings for one graph document",
        }
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "data_dir_exists": data_dir().is_dir(),
    }


@app.get("/api/sources", response_model=SourceList)
def get_sources():
    """List every JSON document under the data directory."""
    base = data_dir()
    if not base.is_dir():
        raise HTTPException(status_code=503, detail=f"Data directory {base} not found")

    sources = sorted(p.relative_to(base).as_posix() for p in base.rglob("*.json"))
    return SourceList(data_dir=str(base), total_sources=len(sources), sources=sources)


@app.get("/api/blocks/{source_id:path}", response_model=dict[str, Block])
def get_blocks(source_id: str):
    """Blocks keyed by vertex key."""
    try:
        return load_blocks(source_id, data_dir())
    except GraphSourceError as e:
        raise http_error(e) from e


@app.get("/api/edges/{source_id:path}", response_model=dict[str, Transform])
def get_edges(source_id: str, preserve_sign: bool = Query(default=False)):
    """Edge transforms keyed by edge key."""
    try:
        blocks = load_blocks(source_id, data_dir())
        return resolve_edges(source_id, blocks, data_dir(), preserve_sign)
    except GraphSourceError as e:
        raise http_error(e) from e


@app.get("/api/scene/{source_id:path}")
def get_scene(source_id: str, preserve_sign: bool = Query(default=False)):
    """
    Full render scene: blocks, edges, the ordered primitive list and the
    camera/light/animation settings.
    """
    try:
        scene = Scene.load(source_id, data_dir(), preserve_sign)
    except GraphSourceError as e:
        raise http_error(e) from e

    payload = scene.to_payload()
    scene.dispose()
    return payload


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8085)
