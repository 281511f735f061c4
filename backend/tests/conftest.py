import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from recovery_desk.config import settings
from recovery_desk.database import enable_wal, get_db, init_db
from recovery_desk.main import app
from recovery_desk.schemas.record import HardDiskRecord
from recovery_desk.services.collections import RecordCollections
from recovery_desk.services.store import MemoryStore


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def records(store):
    return RecordCollections(store)


@pytest.fixture
def make_hard_disk():
    def _make(job_id="JOB001", **overrides):
        data = {
            "job_id": job_id,
            "serial_number": "WX41A1234567",
            "model": "WD Blue",
            "capacity": "1TB",
            "complaint": "Not detected",
            "customer_name": "Asha Rao",
            "phone_number": "9876543210",
            "received_date": "2024-03-01",
            "created_at": "2024-03-01T09:30:00Z",
        }
        data.update(overrides)
        return HardDiskRecord(**data)
    return _make


@pytest.fixture
def tmp_data_dir(tmp_path):
    data_path = tmp_path / "RecoveryDesk"
    data_path.mkdir()
    return data_path


@pytest.fixture
def test_db(tmp_data_dir):
    db_path = tmp_data_dir / "db.sqlite"
    engine = create_engine(
        f"sqlite:///{db_path}",
        connect_args={"check_same_thread": False},
    )
    event.listen(engine, "connect", enable_wal)
    TestSession = sessionmaker(bind=engine, autoflush=False, autocommit=False)

    init_db(db_path)

    def override_get_db():
        db = TestSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestSession
    app.dependency_overrides.clear()
    engine.dispose()


@pytest.fixture
def client(tmp_data_dir, test_db):
    original_data_path = settings.data_path
    settings.data_path = tmp_data_dir
    c = TestClient(app)
    yield c
    settings.data_path = original_data_path
