import tempfile
import unittest
from pathlib import Path
from typing import Dict, List

import mongomock
from bson import ObjectId
from fastapi.testclient import TestClient

from portal.app.dependencies import get_database, get_storage_root
from portal.app.main import app
from portal.app.models.users import UserRole
from portal.app.utils.mongo import ensure_indexes
from portal.app.utils.security import Caller, create_access_token


def make_caller(role: UserRole = UserRole.admin) -> Caller:
    return Caller(user_id=str(ObjectId()), email=f"{role.value}@example.org", role=role)


def bearer(caller: Caller) -> Dict[str, str]:
    token = create_access_token(user_id=caller.user_id, email=caller.email, role=caller.role)
    return {"Authorization": f"Bearer {token}"}


class PortalTestCase(unittest.TestCase):
    """Fresh mongomock database and storage root for every test."""

    def setUp(self):
        self.mongo_client = mongomock.MongoClient()
        self.database = self.mongo_client["scout_portal_test"]
        ensure_indexes(self.database)
        self._storage = tempfile.TemporaryDirectory()
        self.storage_root = Path(self._storage.name)
        self.admin = make_caller(UserRole.admin)
        self.member = make_caller(UserRole.user)

    def tearDown(self):
        self._storage.cleanup()
        self.mongo_client.close()

    def blobs(self, folder: str) -> List[Path]:
        directory = self.storage_root / folder
        if not directory.exists():
            return []
        return sorted(path for path in directory.iterdir() if path.is_file())


class PortalApiTestCase(PortalTestCase):
    """Adds a TestClient wired to the test database and storage root."""

    def setUp(self):
        super().setUp()
        app.dependency_overrides[get_database] = lambda: self.database
        app.dependency_overrides[get_storage_root] = lambda: self.storage_root
        self.client = TestClient(app)
        self.admin_headers = bearer(self.admin)
        self.member_headers = bearer(self.member)

    def tearDown(self):
        app.dependency_overrides.clear()
        super().tearDown()
