"""
Pay Stub Extractor API
FastAPI application for extracting pay data from pay stub PDFs
"""
from fastapi import FastAPI, UploadFile, File, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from functools import lru_cache
from typing import List, Optional
import os
import uuid
import logging

from models import BatchExtractionResponse, ExtractionResponse, HealthResponse, TextExtractionRequest
from services.errors import (
    ElementNotFound,
    FieldNotFound,
    PatternConfigError,
    PayDataError,
    RuleInputMissing,
    RuleParseError,
    RuleReadError,
    RuleSchemaError,
    TableNotFound,
    UnsupportedStrategy,
)
from services.field_extractors.base_field_extractor import ExtractionStrategy
from services.pay_data_service import PayDataService
import aiofiles

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

VERSION = "1.0.0"

# Initialize FastAPI app
app = FastAPI(
    title="Pay Stub Extractor",
    description="API for extracting check, earnings, tax, deduction and deposit data from pay stub PDFs",
    version=VERSION
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify exact origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Ensure uploads directory exists
UPLOAD_DIR = os.path.join(os.path.dirname(__file__), "uploads")
os.makedirs(UPLOAD_DIR, exist_ok=True)

# Error category -> HTTP status
STATUS_BY_CATEGORY = {
    RuleInputMissing.category: 400,
    RuleReadError.category: 400,
    RuleParseError.category: 400,
    RuleSchemaError.category: 400,
    PatternConfigError.category: 400,
    UnsupportedStrategy.category: 400,
    TableNotFound.category: 422,
    FieldNotFound.category: 422,
    ElementNotFound.category: 422,
}


def status_for(error: Exception) -> int:
    if isinstance(error, PayDataError):
        return STATUS_BY_CATEGORY.get(error.category, 500)
    if isinstance(error, FileNotFoundError):
        return 404
    if isinstance(error, ValueError):
        return 400
    return 500


@lru_cache(maxsize=None)
def get_pay_data_service(strategy: str = ExtractionStrategy.REGEX.value,
                         pdf_backend: Optional[str] = None) -> PayDataService:
    """One service per strategy/backend; rules are loaded on first use and reused"""
    return PayDataService(strategy=strategy, pdf_backend=pdf_backend)


async def save_upload(file: UploadFile) -> str:
    """Write an uploaded file to the uploads directory under a unique name"""
    temp_path = os.path.join(UPLOAD_DIR, f"{uuid.uuid4()}.pdf")
    async with aiofiles.open(temp_path, 'wb') as f:
        content = await file.read()
        await f.write(content)
    return temp_path


def remove_upload(temp_path: str):
    if os.path.exists(temp_path):
        try:
            os.remove(temp_path)
        except OSError as e:
            logger.warning(f"Failed to remove temp file: {e}")


@app.get("/", response_model=HealthResponse)
async def root():
    """Root endpoint - health check"""
    return HealthResponse(
        status="healthy",
        version=VERSION
    )


@app.get("/api/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint"""
    return HealthResponse(
        status="healthy",
        version=VERSION
    )


@app.post("/api/extract", response_model=ExtractionResponse)
async def extract_pay_stub(
    file: UploadFile = File(...),
    strategy: str = ExtractionStrategy.REGEX.value,
    pdf_backend: Optional[str] = None
):
    """
    Extract pay data from a pay stub PDF

    Args:
        file: PDF file to process
        strategy: "regex" or "position-index"
        pdf_backend: "pdfplumber" or "pdfminer"

    Returns:
        ExtractionResponse with the extracted pay data
    """
    # Validate file type
    if not file.filename or not file.filename.lower().endswith('.pdf'):
        raise HTTPException(
            status_code=400,
            detail="Only PDF files are supported"
        )

    temp_path = await save_upload(file)

    try:
        logger.info(f"Processing file: {file.filename}")
        service = get_pay_data_service(strategy, pdf_backend)
        pay_data = service.extract_file(temp_path)

        logger.info(f"Successfully extracted data from {file.filename}")

        return ExtractionResponse(
            success=True,
            message=f"Successfully extracted data from {file.filename}",
            filename=file.filename,
            strategy=service.strategy.value,
            data=pay_data
        )

    except Exception as e:
        status = status_for(e)
        logger.error(f"Error processing {file.filename}: {e}")
        raise HTTPException(status_code=status, detail=str(e))

    finally:
        remove_upload(temp_path)


@app.post("/api/extract/text", response_model=ExtractionResponse)
async def extract_pay_stub_text(request: TextExtractionRequest):
    """
    Extract pay data from already converted pay stub text (regex rules)

    Args:
        request: text with columns joined by " | " and rows by newlines

    Returns:
        ExtractionResponse with the extracted pay data
    """
    try:
        service = get_pay_data_service(ExtractionStrategy.REGEX.value)
        pay_data = service.extract_document(request.text)
    except Exception as e:
        logger.error(f"Error extracting pay data from text: {e}")
        raise HTTPException(status_code=status_for(e), detail=str(e))

    return ExtractionResponse(
        success=True,
        message="Successfully extracted data from text",
        strategy=ExtractionStrategy.REGEX.value,
        data=pay_data
    )


@app.post("/api/extract-batch", response_model=BatchExtractionResponse)
async def extract_batch(
    files: List[UploadFile] = File(...),
    strategy: str = ExtractionStrategy.REGEX.value,
    pdf_backend: Optional[str] = None
):
    """
    Extract pay data from multiple pay stub PDFs

    A failing file is reported in its own result and does not stop the batch.

    Args:
        files: List of PDF files to process

    Returns:
        BatchExtractionResponse with results for each file
    """
    try:
        service = get_pay_data_service(strategy, pdf_backend)
    except Exception as e:
        logger.error(f"Unable to set up extraction: {e}")
        raise HTTPException(status_code=status_for(e), detail=str(e))

    results = []

    for file in files:
        if not file.filename or not file.filename.lower().endswith('.pdf'):
            results.append(ExtractionResponse(
                success=False,
                message="Only PDF files are supported",
                filename=file.filename
            ))
            continue

        temp_path = await save_upload(file)
        try:
            pay_data = service.extract_file(temp_path)
            results.append(ExtractionResponse(
                success=True,
                message=f"Successfully extracted data from {file.filename}",
                filename=file.filename,
                strategy=service.strategy.value,
                data=pay_data
            ))
        except Exception as e:
            logger.error(f"Error processing {file.filename}: {e}")
            results.append(ExtractionResponse(
                success=False,
                message=str(e),
                filename=file.filename,
                strategy=service.strategy.value,
                error_category=getattr(e, "category", type(e).__name__)
            ))
        finally:
            remove_upload(temp_path)

    successful = sum(1 for r in results if r.success)
    return BatchExtractionResponse(
        total_files=len(files),
        successful=successful,
        failed=len(results) - successful,
        results=results
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
