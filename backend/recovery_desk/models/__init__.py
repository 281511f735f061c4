from recovery_desk.models.kv_entry import KVEntry

__all__ = ["KVEntry"]
