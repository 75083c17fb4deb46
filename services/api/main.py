"""
FTG API Service - FastAPI backend for grouping feedback lines and exporting reports
"""

from pathlib import Path
from typing import List, Optional

import structlog
from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from services.embed_cluster.embedder import LineEmbedder, get_embedder
from services.export.exporter import ReportExporter
from services.ingest.reader import extract_first_column
from services.pipeline.run_pipeline import process_lines
from shared import config
from shared.errors import EmbeddingError, ExportWriteError, InputReadError, ReductionError
from shared.schemas import ExportReport, GroupMap, ProcessResult

logger = structlog.get_logger()

app = FastAPI(
    title="FTG API",
    description="Feedback Theme Grouper - group free-text responses and export word clouds",
    version="0.1.0"
)

# CORS for UI access
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Embedder (lazy init)
_embedder: Optional[LineEmbedder] = None


def get_line_embedder() -> LineEmbedder:
    """Get the shared embedder."""
    global _embedder
    if _embedder is None:
        _embedder = get_embedder(config.EMBED_BACKEND, config.OLLAMA_URL)
    return _embedder


# ============================================================================
# Models
# ============================================================================

class ProcessRequest(BaseModel):
    lines: List[str] = Field(..., min_length=1)
    min_cluster_size: int = Field(config.MIN_CLUSTER_SIZE, ge=2)
    min_samples: int = Field(config.MIN_SAMPLES, ge=1)
    n_components: int = Field(config.N_COMPONENTS, ge=1)


class FromCsvRequest(BaseModel):
    path: str


class FromCsvResponse(BaseModel):
    lines: List[str]
    count: int


class ExportRequest(BaseModel):
    groups: GroupMap
    output_dir: Optional[str] = None


# ============================================================================
# Endpoints
# ============================================================================

@app.get("/health")
async def health():
    return {"status": "ok", "embed_backend": config.EMBED_BACKEND}


@app.post("/api/process", response_model=ProcessResult)
def process(request: ProcessRequest, embedder: LineEmbedder = Depends(get_line_embedder)):
    """Embed, reduce, cluster and group the given lines."""
    try:
        return process_lines(
            request.lines,
            embedder,
            n_components=request.n_components,
            min_cluster_size=request.min_cluster_size,
            min_samples=request.min_samples,
        )
    except EmbeddingError as e:
        logger.error("Embedding failed", error=str(e))
        raise HTTPException(status_code=502, detail=str(e))
    except ReductionError as e:
        logger.warning("Reduction failed", precondition=e.precondition)
        raise HTTPException(status_code=422, detail=str(e))


@app.post("/api/from-csv", response_model=FromCsvResponse)
def from_csv(request: FromCsvRequest):
    """Read responses from the first column of a CSV file on the server."""
    try:
        lines = extract_first_column(request.path)
    except InputReadError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return FromCsvResponse(lines=lines, count=len(lines))


@app.post("/api/export", response_model=ExportReport)
def export(request: ExportRequest):
    """Write the cluster CSV and word clouds to output_dir."""
    destination = Path(request.output_dir) if request.output_dir else config.OUTPUT_DIR
    try:
        return ReportExporter().export(request.groups, destination)
    except ExportWriteError as e:
        logger.error("Export failed", error=str(e))
        raise HTTPException(status_code=500, detail=str(e))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
