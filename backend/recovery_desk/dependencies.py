from fastapi import Depends
from sqlalchemy.orm import Session

from recovery_desk.database import get_db
from recovery_desk.services.collections import RecordCollections
from recovery_desk.services.store import SQLiteStore


def get_records(db: Session = Depends(get_db)) -> RecordCollections:
    return RecordCollections(SQLiteStore(db))
