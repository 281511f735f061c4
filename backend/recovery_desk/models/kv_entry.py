from sqlalchemy import Column, LargeBinary, Text
from recovery_desk.database import Base


class KVEntry(Base):
    __tablename__ = "kv_store"

    key = Column(Text, primary_key=True)
    value = Column(LargeBinary, nullable=False)
    updated_at = Column(Text, nullable=False)
