from dataclasses import dataclass
import os
from dotenv import load_dotenv


load_dotenv()


def _split_csv(value: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    appwrite_endpoint: str = os.getenv("APPWRITE_ENDPOINT", "")
    appwrite_project_id: str = os.getenv("APPWRITE_PROJECT_ID", "")
    appwrite_api_key: str = os.getenv("APPWRITE_API_KEY", "")
    appwrite_database_id: str = os.getenv("APPWRITE_DATABASE_ID", "")

    appwrite_subjects_collection_id: str = os.getenv("APPWRITE_SUBJECTS_COLLECTION_ID", "subjects")
    appwrite_profiles_collection_id: str = os.getenv("APPWRITE_PROFILES_COLLECTION_ID", "profiles")
    appwrite_grade_results_collection_id: str = os.getenv("APPWRITE_GRADE_RESULTS_COLLECTION_ID", "grade_results")
    appwrite_cgpa_snapshots_collection_id: str = os.getenv("APPWRITE_CGPA_SNAPSHOTS_COLLECTION_ID", "cgpa_snapshots")

    # "builtin" serves the bundled catalog, "appwrite" loads subject records remotely
    catalog_source: str = os.getenv("CATALOG_SOURCE", "builtin").strip().lower()

    cors_allowed_origins: tuple[str, ...] = _split_csv(
        os.getenv("CORS_ALLOWED_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173")
    )
    cors_allow_origin_regex: str = os.getenv(
        "CORS_ALLOW_ORIGIN_REGEX",
        r"^https?:\/\/(localhost|127\.0\.0\.1)(:\d+)?$",
    )

    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Settings()
