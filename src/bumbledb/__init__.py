"""Embedded document store: one NDJSON file per collection.

Layout:
    <data_dir>/
        <collection>.ndjson              # one JSON document per line
        <collection>.ndjson.in-progress  # transient, only during update/delete

Usage:
    db = open_database(".data")
    users = db.collection("users")
    users.insert_many([{"id": 1, "address": {"country": "Pakistan"}}])
    users.find({"address.country": "Pakistan"}).to_list()
    users.find_one({"id": 1})
    users.update({"id": 1}, {"id": 1, "address": {"country": "Croatia"}})
    users.delete({"id": 1})

Reads are full scans. Inserts append; update/delete rewrite the file into a
temp file and rename it over the original, so a crash never leaves a
half-written collection. Mutators on one collection are serialized within a
process; separate processes are not coordinated.
"""

from bumbledb.collection import Collection, Cursor
from bumbledb.config import BumbleConfig, init_config, load_config
from bumbledb.database import Database, open_database
from bumbledb.errors import BumbleDBError, CorruptLineError, InvalidCollectionName
from bumbledb.query import MISSING, matches, resolve

__all__ = [
    "MISSING",
    "BumbleConfig",
    "BumbleDBError",
    "Collection",
    "CorruptLineError",
    "Cursor",
    "Database",
    "InvalidCollectionName",
    "init_config",
    "load_config",
    "matches",
    "open_database",
    "resolve",
]
