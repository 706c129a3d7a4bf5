# ============================================================================
# api/main.py
# ============================================================================
"""
FastAPI Backend for the Lab Report Ingestion Engine

Accepts an uploaded lab-report PDF and returns the extracted values.
Persisting the result is the caller's job.

Run:
    uvicorn api.main:app --port 8000
"""

import logging
from contextlib import asynccontextmanager
from typing import Dict, List, Optional

from fastapi import FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from lab_ingestion import LabReportParser, __version__
from lab_ingestion.config import logging_settings
from lab_ingestion.utils.exceptions import AssetDownloadError
from lab_ingestion.utils.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging and fetch OCR language data at startup so the first upload is fast."""
    setup_logging(
        level=logging_settings.LOG_LEVEL,
        log_file=logging_settings.LOG_FILE,
        format_json=logging_settings.LOG_JSON,
    )
    parser = LabReportParser()
    app.state.parser = parser

    try:
        await parser.tessdata.ensure_languages()
        logger.info("Tesseract language data ready")
    except AssetDownloadError as e:
        logger.warning(f"Tesseract language data pre-load failed (will retry on first use): {e}")
    yield


app = FastAPI(
    title="Lab Report Ingestion API",
    description="Extracts lab values from uploaded lab-report PDFs",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# Models
# ============================================================================

class ImportResponse(BaseModel):
    reportDate: str
    values: Dict[str, float]
    unrecognizedItems: List[str]
    source: Optional[str] = None
    label: Optional[str] = None


# ============================================================================
# Endpoints
# ============================================================================

def _get_parser(request: Request) -> LabReportParser:
    parser = getattr(request.app.state, "parser", None)
    if parser is None:
        parser = LabReportParser()
        request.app.state.parser = parser
    return parser


@app.get("/api/health")
async def health():
    """Health check for monitoring."""
    return {"status": "healthy"}


@app.post("/api/analyses/import-pdf", response_model=ImportResponse)
async def import_pdf(
    request: Request,
    file: UploadFile = File(...),
    label: Optional[str] = Form(None),
):
    """
    Extract lab values from an uploaded PDF.

    Unreadable documents still return 200; the reason is in unrecognizedItems.
    """
    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")

    logger.info(f"Import requested: {file.filename} ({len(content)} bytes)")

    result = await _get_parser(request).parse(content, label=label)
    return ImportResponse(**result.to_dict())
