from functools import lru_cache
import logging
from typing import Dict, List, Optional, Tuple

from fastapi import FastAPI, Header, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from gradeplanner.config.logging import configure_logging
from gradeplanner.config.settings import settings
from gradeplanner.core.catalog import CatalogError, Subject, SubjectCatalog, catalog_key
from gradeplanner.core.evaluator import FormulaEvaluator, SubjectNotFound
from gradeplanner.core.gpa import GRADE_POINTS, CGPASummary, Course, Projection, project_required_gpa, summarize
from gradeplanner.core.grades import GradeResult
from gradeplanner.core.predictor import PredictionResult, Predictor
from gradeplanner.core.scores import clamp_values
from gradeplanner.services.appwrite_service import AppwriteService, AppwriteServiceError, catalog_provider


configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="GradePlanner API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_allowed_origins),
    allow_origin_regex=settings.cors_allow_origin_regex,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class ScoresPayload(BaseModel):
    level: str = "foundation"
    subject_key: str
    values: Dict[str, float] = Field(default_factory=dict)


class PredictPayload(ScoresPayload):
    target_grade: Optional[str] = None


class CoursePayload(BaseModel):
    name: str = ""
    credits: float = Field(default=4, ge=0)
    grade: str = "10"


class CGPAPayload(BaseModel):
    courses: List[CoursePayload]
    current_cgpa: float = Field(default=0, ge=0, le=10)
    credits_completed: float = Field(default=0, ge=0)
    subjects_completed: int = Field(default=0, ge=0)
    target_cgpa: Optional[float] = Field(default=None, ge=0, le=10)
    future_credits: float = Field(default=0, ge=0)


@lru_cache(maxsize=1)
def get_catalog() -> SubjectCatalog:
    return catalog_provider()


def _catalog() -> SubjectCatalog:
    try:
        return get_catalog()
    except AppwriteServiceError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    except CatalogError as exc:
        logger.error("remote catalog rejected: %s", exc)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc


def _required_uid(x_user_id: Optional[str]) -> str:
    if not x_user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing x-user-id header")
    return x_user_id


def _subject_or_404(catalog: SubjectCatalog, level: str, subject_key: str) -> Subject:
    subject = catalog.find(level, subject_key)
    if subject is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=SubjectNotFound(level, subject_key).message)
    return subject


def _grade_dict(result: GradeResult) -> Dict:
    return {"score": result.score, "letter": result.letter, "points": result.points}


def _prediction_dict(result: PredictionResult) -> Dict:
    return {
        "required": result.required,
        "possible": result.possible,
        "final_grade": result.final_grade,
        "guaranteed": result.guaranteed,
    }


def _courses(payload: CGPAPayload) -> List[Course]:
    courses = []
    for index, course in enumerate(payload.courses, start=1):
        if course.grade not in GRADE_POINTS:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"Unsupported grade: {course.grade}",
            )
        courses.append(
            Course(id=str(index), name=course.name or f"Course {index}", credits=course.credits, grade=course.grade)
        )
    return courses


def _summary_dict(summary: CGPASummary, projection: Optional[Projection]) -> Dict:
    body = {
        "semester_gpa": round(summary.semester_gpa, 2),
        "cumulative_cgpa": round(summary.cumulative_cgpa, 2),
        "total_credits": summary.total_credits,
        "total_subjects": summary.total_subjects,
        "distribution": summary.distribution,
        "tier": summary.tier,
    }
    if projection is not None:
        body["projection"] = {
            "required_gpa": None if projection.required_gpa is None else round(projection.required_gpa, 2),
            "possible": projection.possible,
        }
    return body


def _summarize(payload: CGPAPayload) -> Tuple[CGPASummary, Optional[Projection]]:
    summary = summarize(
        _courses(payload),
        payload.current_cgpa,
        payload.credits_completed,
        payload.subjects_completed,
    )
    projection = None
    if payload.target_cgpa is not None:
        projection = project_required_gpa(payload.target_cgpa, payload.future_credits, summary)
    return summary, projection


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/catalog/{level}")
def list_catalog(level: str, branch: Optional[str] = None) -> Dict:
    catalog = _catalog()
    subjects = catalog.subjects_for(level, branch)
    body: Dict = {
        "catalog_key": catalog_key(level, branch),
        "subjects": [
            {
                "key": subject.key,
                "name": subject.name,
                "fields": [
                    {"id": item.id, "label": item.label, "min": item.min, "max": item.max}
                    for item in subject.fields
                ],
                "formula": str(subject.formula),
            }
            for subject in subjects
        ],
    }
    if not subjects:
        body["message"] = SubjectCatalog.empty_message(level, branch)
    return body


@app.post("/grades/evaluate")
def evaluate_grade(payload: ScoresPayload) -> Dict:
    catalog = _catalog()
    subject = _subject_or_404(catalog, payload.level, payload.subject_key)
    result = FormulaEvaluator(catalog).grade(payload.level, subject.key, clamp_values(subject, payload.values))
    return _grade_dict(result)


@app.post("/grades/predict")
def predict_grade(payload: PredictPayload) -> Dict:
    catalog = _catalog()
    subject = _subject_or_404(catalog, payload.level, payload.subject_key)
    predictor = Predictor(catalog)
    values = clamp_values(subject, payload.values)
    if payload.target_grade:
        result = predictor.predict_required_score(payload.level, subject.key, values, payload.target_grade.upper())
        return {payload.target_grade.upper(): _prediction_dict(result)}
    results = predictor.predict_all(payload.level, subject.key, values)
    return {grade: _prediction_dict(result) for grade, result in results.items()}


@app.post("/cgpa/summary")
def cgpa_summary(payload: CGPAPayload) -> Dict:
    summary, projection = _summarize(payload)
    return _summary_dict(summary, projection)


@app.post("/results/grades")
def save_grade_result(payload: ScoresPayload, x_user_id: Optional[str] = Header(default=None)) -> Dict:
    uid = _required_uid(x_user_id)
    catalog = _catalog()
    subject = _subject_or_404(catalog, payload.level, payload.subject_key)
    values = clamp_values(subject, payload.values)
    result = FormulaEvaluator(catalog).grade(payload.level, subject.key, values)
    try:
        service = AppwriteService.from_settings()
        return service.save_grade_result(uid, payload.level, subject.key, values, result)
    except AppwriteServiceError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@app.get("/results/grades")
def list_grade_results(x_user_id: Optional[str] = Header(default=None)) -> List[Dict]:
    uid = _required_uid(x_user_id)
    try:
        return AppwriteService.from_settings().list_grade_results(uid)
    except AppwriteServiceError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@app.post("/results/cgpa")
def save_cgpa_result(payload: CGPAPayload, x_user_id: Optional[str] = Header(default=None)) -> Dict:
    uid = _required_uid(x_user_id)
    summary, projection = _summarize(payload)
    try:
        saved = AppwriteService.from_settings().save_cgpa_snapshot(uid, summary)
    except AppwriteServiceError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return {**_summary_dict(summary, projection), "id": saved["id"]}


@app.get("/results/cgpa")
def cached_cgpa(x_user_id: Optional[str] = Header(default=None)) -> Dict:
    uid = _required_uid(x_user_id)
    try:
        value = AppwriteService.from_settings().get_cached_cgpa(uid)
    except AppwriteServiceError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return {"cumulative_cgpa": value}
