from contextlib import asynccontextmanager
from fastapi import FastAPI, UploadFile, File, Form, HTTPException, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from pydantic import ValidationError
from typing import List, Optional
from pathlib import Path
import logging

from config import DATABASE_URL, UPLOAD_DIR, ALLOWED_ORIGINS, HOST, PORT, LOG_LEVEL
from database import Database
from models import Candidate, CandidateIn, DashboardStats, ReferralConflictError
from storage import save_resume

# Setup logging
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

INVALID_DATA = "Invalid candidate data."
NOT_FOUND = "Candidate not found."


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.db = Database(DATABASE_URL)
    logger.info("🚀 Candidate service started")
    try:
        yield
    finally:
        app.state.db.close()


# Create FastAPI app
app = FastAPI(
    title="Candidate Records",
    description="Record job candidates, their resumes and referral sources",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
)

# Create uploads directory
Path(UPLOAD_DIR).mkdir(parents=True, exist_ok=True)


def get_db(request: Request) -> Database:
    return request.app.state.db


def get_upload_dir() -> str:
    return UPLOAD_DIR


@app.exception_handler(HTTPException)
async def error_response(request: Request, exc: HTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


@app.exception_handler(StarletteHTTPException)
async def route_not_found(request: Request, exc: StarletteHTTPException):
    # Raised by the router and static files, never by the handlers below
    if exc.status_code in (404, 405):
        logger.warning(f"❌ No route matched for {request.method} {request.url.path}")
        return PlainTextResponse("Route not found", status_code=404)
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def invalid_request(request: Request, exc: RequestValidationError):
    logger.warning(f"Rejected {request.method} {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=400, content={"error": INVALID_DATA})


def validated(candidate: CandidateIn) -> CandidateIn:
    try:
        return candidate.check_referrals()
    except ReferralConflictError as e:
        raise HTTPException(status_code=400, detail=e.message)


@app.get("/")
def read_root():
    return {"message": "Candidate Records API is running!"}


@app.post("/candidates", response_model=Candidate, status_code=201)
def create_candidate(
    name: str = Form(...),
    specialization: str = Form(...),
    location: str = Form(...),
    years_experience: str = Form(...),
    remark: Optional[str] = Form(None),
    employee_referral: str = Form("false"),
    employee_id: Optional[str] = Form(None),
    consultancy_referral: str = Form("false"),
    consultancy_name: Optional[str] = Form(None),
    resume: Optional[UploadFile] = File(None),
    db: Database = Depends(get_db),
    upload_dir: str = Depends(get_upload_dir),
):
    """Add a candidate, with an optional resume file"""
    try:
        candidate = CandidateIn(
            name=name,
            specialization=specialization,
            location=location,
            years_experience=years_experience,
            remark=remark,
            employee_referral=employee_referral,
            employee_id=employee_id,
            consultancy_referral=consultancy_referral,
            consultancy_name=consultancy_name,
        )
    except ValidationError as e:
        logger.warning(f"Rejected candidate form: {e.errors()}")
        raise HTTPException(status_code=400, detail=INVALID_DATA)
    validated(candidate)

    try:
        resume_url = ""
        if resume is not None and resume.filename:
            resume_url = save_resume(resume.file, resume.filename, upload_dir)
        return db.create_candidate(candidate, resume_url)
    except Exception as e:
        logger.error(f"Error creating candidate: {e}")
        raise HTTPException(status_code=500, detail="An error occurred while saving the candidate.")


@app.get("/candidates", response_model=List[Candidate])
def get_all_candidates(db: Database = Depends(get_db)):
    """Get all candidates from database"""
    try:
        return db.list_candidates()
    except Exception as e:
        logger.error(f"Error fetching candidates: {e}")
        raise HTTPException(status_code=500, detail="An error occurred while fetching candidates.")


@app.get("/dashboard-stats", response_model=DashboardStats)
def dashboard_stats(db: Database = Depends(get_db)):
    try:
        return db.get_dashboard_stats()
    except Exception as e:
        logger.error(f"Dashboard stats error: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch dashboard stats.")


@app.put("/candidates/{candidate_id}", response_model=Candidate)
def update_candidate(candidate_id: int, candidate: CandidateIn, db: Database = Depends(get_db)):
    """Replace every field of an existing candidate"""
    validated(candidate)
    try:
        updated = db.update_candidate(candidate_id, candidate)
    except Exception as e:
        logger.error(f"Error updating candidate {candidate_id}: {e}")
        raise HTTPException(status_code=500, detail="An error occurred while updating the candidate.")

    if updated is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return updated


@app.delete("/candidates/{candidate_id}")
def delete_candidate(candidate_id: int, db: Database = Depends(get_db)):
    try:
        deleted = db.delete_candidate(candidate_id)
    except Exception as e:
        logger.error(f"Error deleting candidate {candidate_id}: {e}")
        raise HTTPException(status_code=500, detail="An error occurred while deleting the candidate.")

    if not deleted:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return {"message": "Candidate deleted successfully."}


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "Candidate Records"}


# Uploaded resumes are served back verbatim
app.mount("/uploads", StaticFiles(directory=UPLOAD_DIR), name="uploads")


def run():
    import uvicorn
    logger.info("Starting Candidate Records API...")
    uvicorn.run(app, host=HOST, port=PORT)


if __name__ == "__main__":
    run()
