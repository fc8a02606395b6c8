from .connection import MongoConnection, describe_connection_string, mask_connection_string
from .repository import Repository, UpdateOutcome, to_object_id

__all__ = [
    "MongoConnection",
    "describe_connection_string",
    "mask_connection_string",
    "Repository",
    "UpdateOutcome",
    "to_object_id",
]
