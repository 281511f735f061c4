from pathlib import Path
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    data_path: Path = Path.home() / "RecoveryDesk"
    api_prefix: str = "/api/v1"
    host: str = "127.0.0.1"
    port: int = 8000
    job_id_prefix: str = "JOB"
    job_id_width: int = 3
    document_number_width: int = 4
    # The intake screen used to wipe every collection on load. Off unless asked for.
    wipe_on_intake_load: bool = False
    # Remove the job's documents and unreferenced customers on single-job delete.
    purge_orphans_on_delete: bool = False

    @property
    def db_path(self) -> Path:
        return self.data_path / "db.sqlite"

    model_config = {"env_prefix": "RECOVERY_"}


settings = Settings()
