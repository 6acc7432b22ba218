"""
FastAPI server for candidate queries and CV processing.

Run:
    python run_app.py api
Docs:
    http://localhost:8000/docs
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.routes import router
from cv_pipeline.cv_processor import InvalidTransitionError, UploadNotFoundError
from services.candidate_queries import InvalidQueryError
from services.candidate_store import StoreError
from utils.logger import get_logger

logger = get_logger(__name__)

app = FastAPI(
    title="CV Intake API",
    description="Date-bucketed candidate queries, per-day counts and CV upload processing.",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)


@app.exception_handler(InvalidQueryError)
async def invalid_query_handler(request: Request, exc: InvalidQueryError):
    return JSONResponse(status_code=400, content={"error": str(exc)})


@app.exception_handler(UploadNotFoundError)
async def not_found_handler(request: Request, exc: UploadNotFoundError):
    return JSONResponse(status_code=404, content={"error": str(exc)})


@app.exception_handler(InvalidTransitionError)
async def invalid_transition_handler(request: Request, exc: InvalidTransitionError):
    return JSONResponse(status_code=409, content={"error": str(exc)})


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    logger.error("Store error on %s: %s %s", request.url.path, exc, exc.details)
    return JSONResponse(status_code=500, content={"error": str(exc), "details": exc.details})


app.include_router(router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
