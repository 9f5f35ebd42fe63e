"""Seed the portal collections from JSON exports.

Each of users.json, camps.json, news.json and documents.json replaces the
contents of its collection; missing files are skipped.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError
from pymongo.database import Database

from portal.app.config import settings
from portal.app.models.camps import CampRecord
from portal.app.models.documents import DocumentRecord
from portal.app.models.news import NewsRecord
from portal.app.models.users import UserRecord
from portal.app.utils.logging import logger
from portal.app.utils.mongo import ensure_indexes, mongo_manager
from portal.app.utils.security import hash_password

PLACEHOLDER_CONTACT = {"phone": "N/A", "email": "n/a@example.com", "responsible": "N/A"}


def _user(raw: Dict[str, Any]) -> UserRecord:
    data = dict(raw)
    password = data.pop("password", None)
    if password:
        data["password_hash"] = hash_password(password)
    return UserRecord.model_validate(data)


def _camp(raw: Dict[str, Any]) -> CampRecord:
    data = dict(raw)
    data.setdefault("contact", PLACEHOLDER_CONTACT)
    return CampRecord.model_validate(data)


def _document(raw: Dict[str, Any]) -> DocumentRecord:
    data = dict(raw)
    # older exports used the multer field names
    for legacy, current in (
        ("filename", "storedName"),
        ("originalname", "originalName"),
        ("mimetype", "mimeType"),
        ("size", "sizeBytes"),
        ("uploadDate", "uploadedAt"),
    ):
        if legacy in data and current not in data:
            data[current] = data.pop(legacy)
    return DocumentRecord.model_validate(data)


SEEDS: List[tuple] = [
    ("users.json", settings.USERS_COLLECTION, _user),
    ("camps.json", settings.CAMPS_COLLECTION, _camp),
    ("news.json", settings.NEWS_COLLECTION, NewsRecord.model_validate),
    ("documents.json", settings.DOCUMENTS_COLLECTION, _document),
]


def seed_collection(
    database: Database,
    path: Path,
    collection_name: str,
    build: Callable[[Dict[str, Any]], Any],
) -> Optional[int]:
    """Replace one collection with the records in ``path``; None when the file is absent."""
    if not path.exists():
        logger.log_step("seed_file_missing", {"path": str(path)})
        return None

    raw_records = json.loads(path.read_text(encoding="utf-8"))
    records = [build(raw).to_mongo() for raw in raw_records]

    collection = database[collection_name]
    collection.delete_many({})
    if records:
        collection.insert_many(records)

    logger.log_step("seed_collection_loaded", {
        "collection": collection_name,
        "count": len(records),
    })
    return len(records)


def seed_database(database: Database, data_dir: Path) -> Dict[str, Optional[int]]:
    ensure_indexes(database)
    return {
        collection_name: seed_collection(database, data_dir / filename, collection_name, build)
        for filename, collection_name, build in SEEDS
    }


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=settings.seed_data_path,
        help="directory holding the JSON exports",
    )
    args = parser.parse_args(argv)

    print(f"Connecting to MongoDB database: {settings.DATABASE_NAME}")
    if not mongo_manager.ping():
        print("✗ Error: MongoDB is not reachable")
        return 1

    try:
        results = seed_database(mongo_manager.db, args.data_dir)
    except (OSError, ValueError, ValidationError) as e:
        print(f"✗ Error: {str(e)}")
        logger.log_error("seed_script_failed", {"error": str(e)})
        return 1
    finally:
        mongo_manager.close()

    for collection_name, count in results.items():
        if count is None:
            print(f"- {collection_name}: skipped (no file)")
        else:
            print(f"✓ {collection_name}: {count} records")
    return 0


if __name__ == "__main__":
    sys.exit(main())
