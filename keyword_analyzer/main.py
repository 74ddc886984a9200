import logging
from typing import List, Optional, Tuple
from urllib.parse import quote

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError

from .analyzer import analyze_keywords
from .config import config
from .errors import DecodeFailure, EmptyResult, MissingColumn
from .models import (
    AnalysisResult,
    AnalyzeResponse,
    FilterConfig,
    HealthResponse,
    KeywordRecord,
    SourceInfo,
)
from .normalize import parse_keyword_export
from .report import generate_markdown_report, report_filename

logging.basicConfig(level=config.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="keyword-analyzer",
    description="Google Ads Keyword Planner export analysis and reporting",
    version="0.1.0",
)


def _filter_config(must_include: Optional[str], exclude: Optional[str], keyword_length: Optional[str]) -> FilterConfig:
    try:
        return FilterConfig(
            must_include=must_include,
            exclude=exclude,
            keyword_length=keyword_length,
        )
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors()[0]["msg"]) from exc


def content_disposition(filename: str) -> str:
    """Attachment header with an ASCII fallback name and an RFC 5987 UTF-8 name."""
    fallback = "".join(ch if 32 <= ord(ch) < 127 and ch not in '"\\' else "_" for ch in filename)
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"


async def _read_export(file: UploadFile) -> Tuple[List[KeywordRecord], SourceInfo]:
    if config.require_csv_extension and not (file.filename or "").lower().endswith(".csv"):
        raise HTTPException(status_code=422, detail="Please select a CSV file")

    try:
        raw = await file.read(config.max_upload_bytes + 1)
    except OSError as exc:
        logger.error("Upload read failed: %s", exc)
        raise HTTPException(status_code=400, detail="Could not read file") from exc

    if len(raw) > config.max_upload_bytes:
        raise HTTPException(status_code=413, detail="File is too large")

    try:
        records, report = await run_in_threadpool(parse_keyword_export, raw)
    except DecodeFailure as exc:
        logger.warning("Undecodable upload %r (best guess %s)", file.filename, exc.detected)
        raise HTTPException(status_code=400, detail=exc.message) from exc
    except MissingColumn as exc:
        logger.warning("Upload %r has no %r column; headers: %s", file.filename, exc.column, exc.headers)
        raise HTTPException(status_code=422, detail=exc.message) from exc
    except EmptyResult as exc:
        raise HTTPException(status_code=422, detail=exc.message) from exc

    source = SourceInfo(
        filename=file.filename,
        encoding=report["encoding"],
        detected_encoding=report["detected"],
        delimiter=report["delimiter"],
        rows=report["rows"],
        skipped_rows=report["skipped_rows"],
    )
    return records, source


async def _analyze(
    file: UploadFile,
    must_include: Optional[str],
    exclude: Optional[str],
    keyword_length: Optional[str],
) -> Tuple[AnalysisResult, SourceInfo]:
    # Snapshot filters before reading the upload so the run sees one configuration.
    filters = _filter_config(must_include, exclude, keyword_length)
    records, source = await _read_export(file)
    return analyze_keywords(records, filters), source


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.post("/analyze", response_model=AnalyzeResponse)
async def analyze(
    file: UploadFile = File(...),
    must_include: Optional[str] = Form(default=None),
    exclude: Optional[str] = Form(default=None),
    keyword_length: Optional[str] = Form(default=None),
):
    analysis, source = await _analyze(file, must_include, exclude, keyword_length)
    return AnalyzeResponse(source=source, analysis=analysis)


@app.post("/report", response_class=PlainTextResponse)
async def report(
    file: UploadFile = File(...),
    must_include: Optional[str] = Form(default=None),
    exclude: Optional[str] = Form(default=None),
    keyword_length: Optional[str] = Form(default=None),
):
    analysis, source = await _analyze(file, must_include, exclude, keyword_length)
    markdown = generate_markdown_report(analysis, source.filename or "keywords.csv")
    filename = report_filename(source.filename or "keywords.csv")
    return PlainTextResponse(
        markdown,
        media_type="text/markdown",
        headers={"Content-Disposition": content_disposition(filename)},
    )
