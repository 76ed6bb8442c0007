"""FastAPI application driving sculpting sessions."""

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, ValidationError
from typing import Dict, List, Optional
import structlog

from ..config import SessionConfig, settings
from ..core.brushes import BRUSHES, get_brush
from ..core.deformation import build_brush_patch
from ..core.session import SculptSession
from ..core.thumbnail import render_thumbnail
from ..utils.logging import configure_logging

configure_logging(settings.log_level, settings.log_format)

logger = structlog.get_logger()

app = FastAPI(
    title="Terrain Sculpt API",
    description="Heightmap sculpting sessions driven by grid pointer events",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# In-memory session registry
sessions: Dict[str, SculptSession] = {}


# Request/Response models
class SessionCreateRequest(BaseModel):
    """Request to start a new sculpting session."""

    divisions: int = Field(settings.default_divisions, description="Grid divisions per axis")
    world_size: float = Field(settings.world_size, description="Terrain edge length")
    resolution_multiplier: int = Field(
        settings.resolution_multiplier, description="Render vertices per grid cell"
    )
    strength: float = Field(settings.default_strength, description="Initial brush strength")


class BrushSelectRequest(BaseModel):
    brush_id: Optional[str] = Field(None, description="Catalog brush id, null to deselect")


class StrengthRequest(BaseModel):
    strength: float = Field(description="Brush strength in (0, 1]")


class PointerRequest(BaseModel):
    """A pointer event resolved to a grid cell."""

    x: int = Field(description="Grid cell x")
    z: int = Field(description="Grid cell z")
    alternate: bool = Field(False, description="Alternate modifier held (lower instead of raise)")


class ResizeRequest(BaseModel):
    divisions: int = Field(description="New grid divisions per axis")


class BrushInfo(BaseModel):
    id: str
    name: str
    footprint_cells: int


class DeformationResponse(BaseModel):
    applied: bool
    vertices_changed: int
    clipped: bool
    modified: bool


class ResizeResponse(BaseModel):
    resized: bool
    confirmation_required: bool
    divisions: int


def get_session_or_404(session_id: str) -> SculptSession:
    """Get session by ID or raise 404."""
    session = sessions.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


def _brush_or_404(brush_id: str):
    try:
        return get_brush(brush_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Terrain Sculpt API",
        "version": "0.1.0",
        "status": "running",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "sessions": len(sessions)}


# Brush catalog

@app.get("/brushes", response_model=List[BrushInfo])
async def list_brushes():
    """List the brush catalog in toolbar order."""
    return [
        BrushInfo(id=brush.id, name=brush.name, footprint_cells=brush.footprint_cells)
        for brush in BRUSHES
    ]


@app.get("/brushes/{brush_id}/kernel")
async def get_brush_kernel(
    brush_id: str,
    rotation: int = Query(0, ge=0, le=3),
    multiplier: int = Query(1, ge=1, le=settings.max_resolution_multiplier),
):
    """Brush kernel after rotation and upsampling."""
    brush = _brush_or_404(brush_id)
    patch = build_brush_patch(brush, rotation, (0, 0), multiplier)
    return {
        "brush_id": brush.id,
        "rotation": rotation,
        "multiplier": multiplier,
        "footprint": list(patch.footprint),
        "kernel": patch.heights.tolist(),
    }


@app.get("/brushes/{brush_id}/thumbnail")
async def get_brush_thumbnail(
    brush_id: str,
    resolution: int = Query(settings.thumbnail_resolution, ge=2, le=1024),
):
    """Grayscale thumbnail of a brush as nested pixel rows."""
    brush = _brush_or_404(brush_id)
    image = render_thumbnail(brush.kernel(), resolution)
    return {"brush_id": brush.id, "resolution": resolution, "pixels": image.tolist()}


# Sessions

@app.post("/sessions")
async def create_session(request: SessionCreateRequest):
    """Start a sculpting session with a flat terrain."""
    if len(sessions) >= settings.max_sessions:
        raise HTTPException(status_code=429, detail="Too many open sessions")

    try:
        config = SessionConfig(**request.model_dump())
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))

    session = SculptSession(config)
    sessions[session.id] = session
    return session.summary()


@app.get("/sessions/{session_id}")
async def get_session(session_id: str):
    return get_session_or_404(session_id).summary()


@app.delete("/sessions/{session_id}")
async def delete_session(session_id: str):
    get_session_or_404(session_id)
    del sessions[session_id]
    logger.info("Sculpt session closed", session_id=session_id)
    return {"deleted": session_id}


@app.post("/sessions/{session_id}/brush")
async def select_brush(session_id: str, request: BrushSelectRequest):
    session = get_session_or_404(session_id)
    if request.brush_id is not None:
        _brush_or_404(request.brush_id)
    session.select_brush(request.brush_id)
    return session.summary()


@app.post("/sessions/{session_id}/strength")
async def set_strength(session_id: str, request: StrengthRequest):
    session = get_session_or_404(session_id)
    try:
        session.set_strength(request.strength)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return session.summary()


@app.post("/sessions/{session_id}/rotate")
async def rotate_brush(session_id: str):
    session = get_session_or_404(session_id)
    session.rotate()
    return session.summary()


@app.post("/sessions/{session_id}/hover")
async def hover(session_id: str, request: PointerRequest):
    """Move the pointer over a cell; returns the ghost preview if a brush is selected."""
    session = get_session_or_404(session_id)
    try:
        preview = session.hover((request.x, request.z), request.alternate)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return {"preview": preview.to_dict() if preview else None}


@app.post("/sessions/{session_id}/leave")
async def leave(session_id: str):
    session = get_session_or_404(session_id)
    session.leave()
    return session.summary()


@app.post("/sessions/{session_id}/click", response_model=DeformationResponse)
async def click(session_id: str, request: PointerRequest):
    """Apply the selected brush at a cell."""
    session = get_session_or_404(session_id)
    try:
        result = session.click((request.x, request.z), request.alternate)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return DeformationResponse(
        applied=result.applied,
        vertices_changed=result.vertices_changed,
        clipped=result.clipped,
        modified=session.modified,
    )


@app.get("/sessions/{session_id}/preview")
async def get_preview(session_id: str):
    preview = get_session_or_404(session_id).preview()
    return {"preview": preview.to_dict() if preview else None}


@app.post("/sessions/{session_id}/reset")
async def reset_terrain(session_id: str):
    session = get_session_or_404(session_id)
    session.reset()
    return session.summary()


@app.post("/sessions/{session_id}/resize", response_model=ResizeResponse)
async def request_resize(session_id: str, request: ResizeRequest):
    """Resize the grid; a sculpted terrain needs confirmation first."""
    session = get_session_or_404(session_id)
    try:
        outcome = session.request_resize(request.divisions)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return ResizeResponse(**outcome.__dict__)


@app.post("/sessions/{session_id}/resize/confirm", response_model=ResizeResponse)
async def confirm_resize(session_id: str):
    session = get_session_or_404(session_id)
    if session.pending_divisions is None:
        raise HTTPException(status_code=409, detail="No resize pending")
    outcome = session.confirm_resize()
    return ResizeResponse(**outcome.__dict__)


@app.post("/sessions/{session_id}/resize/cancel")
async def cancel_resize(session_id: str):
    session = get_session_or_404(session_id)
    session.cancel_resize()
    return session.summary()


@app.get("/sessions/{session_id}/heightmap")
async def get_heightmap(session_id: str):
    """Current heights of the render mesh, rows along z."""
    session = get_session_or_404(session_id)
    return {
        "segments": session.heightmap.segments,
        "heights": session.heightmap.heights.tolist(),
        "stats": session.heightmap.stats(),
        "modified": session.modified,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
