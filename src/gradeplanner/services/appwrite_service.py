from datetime import datetime, timezone
import json
import logging
from typing import Any, Dict, List, Mapping, Optional

from appwrite.client import Client
from appwrite.exception import AppwriteException
from appwrite.id import ID
from appwrite.query import Query
from appwrite.services.databases import Databases

from gradeplanner.config.settings import settings
from gradeplanner.core.catalog import SubjectCatalog
from gradeplanner.core.gpa import CGPASummary
from gradeplanner.core.grades import GradeResult
from gradeplanner.core.subjects_data import default_catalog

logger = logging.getLogger(__name__)

CATALOG_PAGE_SIZE = 100


class AppwriteServiceError(Exception):
    pass


class AppwriteService:
    def __init__(
        self,
        endpoint: str,
        project_id: str,
        api_key: str,
        database_id: str,
        subjects_collection_id: str,
        profiles_collection_id: str,
        grade_results_collection_id: str,
        cgpa_snapshots_collection_id: str,
    ) -> None:
        if not endpoint:
            raise AppwriteServiceError("Missing APPWRITE_ENDPOINT in environment")
        if not project_id:
            raise AppwriteServiceError("Missing APPWRITE_PROJECT_ID in environment")
        if not api_key:
            raise AppwriteServiceError("Missing APPWRITE_API_KEY in environment")
        if not database_id:
            raise AppwriteServiceError("Missing APPWRITE_DATABASE_ID in environment")

        self.database_id = database_id
        self.subjects_collection_id = subjects_collection_id
        self.profiles_collection_id = profiles_collection_id
        self.grade_results_collection_id = grade_results_collection_id
        self.cgpa_snapshots_collection_id = cgpa_snapshots_collection_id

        client = Client()
        client.set_endpoint(endpoint.rstrip("/"))
        client.set_project(project_id)
        client.set_key(api_key)

        self.db = Databases(client)

    @classmethod
    def from_settings(cls) -> "AppwriteService":
        return cls(
            endpoint=settings.appwrite_endpoint,
            project_id=settings.appwrite_project_id,
            api_key=settings.appwrite_api_key,
            database_id=settings.appwrite_database_id,
            subjects_collection_id=settings.appwrite_subjects_collection_id,
            profiles_collection_id=settings.appwrite_profiles_collection_id,
            grade_results_collection_id=settings.appwrite_grade_results_collection_id,
            cgpa_snapshots_collection_id=settings.appwrite_cgpa_snapshots_collection_id,
        )

    @staticmethod
    def _now_iso() -> str:
        return datetime.now(timezone.utc).isoformat()

    @staticmethod
    def _decode_json(value: Any) -> Any:
        if isinstance(value, str):
            try:
                return json.loads(value)
            except json.JSONDecodeError as exc:
                raise AppwriteServiceError(f"Invalid JSON attribute: {exc}") from exc
        return value

    def _list_documents(self, collection_id: str, queries: List[str]) -> List[Dict]:
        try:
            result = self.db.list_documents(self.database_id, collection_id, queries=queries)
            return list(result.get("documents", []))
        except AppwriteException as exc:
            logger.warning("listing %s failed: %s", collection_id, exc)
            raise AppwriteServiceError(str(exc)) from exc

    def _create_document(self, collection_id: str, data: Dict, document_id: Optional[str] = None) -> Dict:
        try:
            return self.db.create_document(
                self.database_id,
                collection_id,
                document_id or ID.unique(),
                data,
            )
        except AppwriteException as exc:
            logger.warning("creating document in %s failed: %s", collection_id, exc)
            raise AppwriteServiceError(str(exc)) from exc

    def _update_document(self, collection_id: str, document_id: str, data: Dict) -> Dict:
        try:
            return self.db.update_document(self.database_id, collection_id, document_id, data)
        except AppwriteException as exc:
            logger.warning("updating %s/%s failed: %s", collection_id, document_id, exc)
            raise AppwriteServiceError(str(exc)) from exc

    def list_subject_records(self) -> List[Dict]:
        records: List[Dict] = []
        offset = 0
        while True:
            docs = self._list_documents(
                self.subjects_collection_id,
                [
                    Query.order_asc("catalog_key"),
                    Query.limit(CATALOG_PAGE_SIZE),
                    Query.offset(offset),
                ],
            )
            for doc in docs:
                records.append(
                    {
                        "catalog_key": doc.get("catalog_key"),
                        "key": doc.get("key"),
                        "name": doc.get("name", doc.get("key")),
                        "fields": self._decode_json(doc.get("fields", "[]")),
                        "formula": self._decode_json(doc.get("formula", "{}")),
                    }
                )
            if len(docs) < CATALOG_PAGE_SIZE:
                return records
            offset += CATALOG_PAGE_SIZE

    def load_catalog(self) -> SubjectCatalog:
        records = self.list_subject_records()
        catalog = SubjectCatalog.from_records(records)
        logger.info("loaded %d remote subjects across %d catalog keys", len(records), len(catalog.keys()))
        return catalog

    def ensure_user_profile(self, uid: str, email: str = "") -> None:
        profile = self.get_profile(uid)
        if profile:
            return
        self._create_document(
            self.profiles_collection_id,
            {
                "uid": uid,
                "email": email,
                "created_at": self._now_iso(),
                "cgpa": None,
            },
            document_id=uid,
        )

    def get_profile(self, uid: str) -> Dict:
        try:
            return self.db.get_document(self.database_id, self.profiles_collection_id, uid)
        except AppwriteException as exc:
            if getattr(exc, "code", None) == 404:
                return {}
            raise AppwriteServiceError(str(exc)) from exc

    def save_grade_result(
        self,
        uid: str,
        level: str,
        subject_key: str,
        values: Mapping[str, float],
        result: GradeResult,
    ) -> Dict:
        doc = self._create_document(
            self.grade_results_collection_id,
            {
                "user_id": uid,
                "level": level,
                "subject_key": subject_key,
                "values": json.dumps(dict(values)),
                "score": result.score,
                "letter_grade": result.letter,
                "grade_point": result.points,
                "created_at": self._now_iso(),
            },
        )
        return {
            "id": doc["$id"],
            "level": level,
            "subject_key": subject_key,
            "score": result.score,
            "letter_grade": result.letter,
            "grade_point": result.points,
        }

    def list_grade_results(self, uid: str) -> List[Dict]:
        docs = self._list_documents(
            self.grade_results_collection_id,
            [
                Query.equal("user_id", [uid]),
                Query.order_desc("created_at"),
            ],
        )
        return [
            {
                "id": doc["$id"],
                "level": doc.get("level"),
                "subject_key": doc.get("subject_key"),
                "values": self._decode_json(doc.get("values") or "{}"),
                "score": doc.get("score"),
                "letter_grade": doc.get("letter_grade"),
                "grade_point": doc.get("grade_point"),
                "created_at": doc.get("created_at"),
            }
            for doc in docs
        ]

    def save_cgpa_snapshot(self, uid: str, summary: CGPASummary) -> Dict:
        doc = self._create_document(
            self.cgpa_snapshots_collection_id,
            {
                "user_id": uid,
                "semester_gpa": summary.semester_gpa,
                "cumulative_cgpa": summary.cumulative_cgpa,
                "total_credits": summary.total_credits,
                "total_subjects": summary.total_subjects,
                "tier": summary.tier,
                "created_at": self._now_iso(),
            },
        )
        self.ensure_user_profile(uid)
        self._update_document(self.profiles_collection_id, uid, {"cgpa": summary.cumulative_cgpa})
        return {"id": doc["$id"], "cumulative_cgpa": summary.cumulative_cgpa}

    def get_cached_cgpa(self, uid: str) -> Optional[float]:
        profile = self.get_profile(uid)
        value = profile.get("cgpa")
        if value is None:
            return None
        return float(value)


def catalog_provider() -> SubjectCatalog:
    if settings.catalog_source == "appwrite":
        return AppwriteService.from_settings().load_catalog()
    return default_catalog()
