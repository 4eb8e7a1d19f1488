from typing import List

from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    debug: bool = True
    log_level: str = "INFO"
    upload_max_file_size_mb: int = 20

    # Headerless inference
    inference_sample_rows: int = 5

    # Document extraction
    document_extensions: List[str] = ["pdf", "txt"]
    extraction_service_url: str = ""  # Empty uses the local PDF/text extractors
    extraction_timeout_seconds: int = 60

    # Persistence API that stores accepted contacts
    contacts_api_url: str = "http://localhost:5000/api/contacts"
    contacts_api_token: str = ""
    submission_timeout_seconds: int = 30
    import_concurrency: int = 1  # Submissions in flight at once

    model_config = ConfigDict(env_file=".env", extra="ignore")


settings = Settings()
