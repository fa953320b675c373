import json
import unittest
import os
import tempfile
import shutil

from carrental.errors import DuplicateKeyError, NotFoundError
from carrental.storage.json_store import JsonStore, empty_database


class TestJsonStore(unittest.TestCase):
    """Test suite for the JSON document store."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.db_path = os.path.join(self.temp_dir, "data", "db.json")
        self.store = JsonStore(self.db_path)

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def _read_file(self):
        with open(self.db_path, 'r') as f:
            return json.load(f)

    def test_creates_missing_file(self):
        """Test a fresh store writes an empty database."""
        self.assertTrue(os.path.exists(self.db_path))
        self.assertEqual(self._read_file(), empty_database())

    def test_insert_persists_and_reloads(self):
        self.store.insert("vehicles", {"id": "v1", "license_plate": "ABC123"})

        self.assertEqual(self._read_file()["vehicles"], [{"id": "v1", "license_plate": "ABC123"}])
        reopened = JsonStore(self.db_path)
        self.assertEqual(reopened.get("vehicles", "v1"), {"id": "v1", "license_plate": "ABC123"})

    def test_reads_return_copies(self):
        self.store.insert("vehicles", {"id": "v1", "license_plate": "ABC123", "features": []})

        document = self.store.get("vehicles", "v1")
        document["features"].append("GPS")

        self.assertEqual(self.store.get("vehicles", "v1")["features"], [])

    def test_transaction_commits_together(self):
        with self.store.transaction() as txn:
            txn.insert("vehicles", {"id": "v1", "license_plate": "ABC123", "status": "Available"})
            txn.insert("bookings", {"id": "b1", "booking_code": "CR1", "vehicle_id": "v1"})
            txn.update("vehicles", {"id": "v1", "license_plate": "ABC123", "status": "Rented"})

        self.assertEqual(self.store.get("vehicles", "v1")["status"], "Rented")
        self.assertEqual(self._read_file()["bookings"][0]["booking_code"], "CR1")

    def test_failed_commit_leaves_nothing(self):
        """Test a unique key violation discards every staged write."""
        self.store.insert("bookings", {"id": "b1", "booking_code": "CR1"})

        with self.assertRaises(DuplicateKeyError):
            with self.store.transaction() as txn:
                txn.insert("vehicles", {"id": "v1", "license_plate": "ABC123"})
                txn.insert("bookings", {"id": "b2", "booking_code": "CR1"})

        self.assertIsNone(self.store.get("vehicles", "v1"))
        self.assertIsNone(self.store.get("bookings", "b2"))
        self.assertEqual(self._read_file()["vehicles"], [])

    def test_exception_inside_block_discards_writes(self):
        with self.assertRaises(RuntimeError):
            with self.store.transaction() as txn:
                txn.insert("vehicles", {"id": "v1", "license_plate": "ABC123"})
                raise RuntimeError("boom")

        self.assertEqual(self.store.all("vehicles"), [])

    def test_update_missing_document(self):
        with self.assertRaises(NotFoundError):
            self.store.update("vehicles", {"id": "ghost"})

    def test_delete(self):
        self.store.insert("vehicles", {"id": "v1", "license_plate": "ABC123"})
        self.store.delete("vehicles", "v1")

        self.assertIsNone(self.store.get("vehicles", "v1"))
        with self.assertRaises(NotFoundError):
            self.store.delete("vehicles", "v1")

    def test_duplicate_id(self):
        self.store.insert("vehicles", {"id": "v1", "license_plate": "ABC123"})

        with self.assertRaises(DuplicateKeyError):
            self.store.insert("vehicles", {"id": "v1", "license_plate": "XYZ999"})

    def test_unique_plate_may_be_reused_after_delete(self):
        self.store.insert("vehicles", {"id": "v1", "license_plate": "ABC123"})
        with self.store.transaction() as txn:
            txn.delete("vehicles", "v1")
            txn.insert("vehicles", {"id": "v2", "license_plate": "ABC123"})

        self.assertEqual([doc["id"] for doc in self.store.all("vehicles")], ["v2"])

    def test_find(self):
        self.store.insert("vehicles", {"id": "v1", "license_plate": "ABC123", "seats": 5})
        self.store.insert("vehicles", {"id": "v2", "license_plate": "XYZ999", "seats": 7})

        found = self.store.find("vehicles", lambda doc: doc["seats"] > 5)

        self.assertEqual([doc["id"] for doc in found], ["v2"])

    def test_unknown_collection(self):
        with self.assertRaises(KeyError):
            self.store.all("drivers")


class TestInMemoryStore(unittest.TestCase):
    """Test suite for a store without a backing file."""

    def test_no_file_written(self):
        cwd = os.getcwd()
        temp_dir = tempfile.mkdtemp()
        try:
            os.chdir(temp_dir)
            store = JsonStore()
            store.insert("vehicles", {"id": "v1", "license_plate": "ABC123"})
            self.assertEqual(os.listdir(temp_dir), [])
            self.assertEqual(store.get("vehicles", "v1")["license_plate"], "ABC123")
        finally:
            os.chdir(cwd)
            shutil.rmtree(temp_dir)


if __name__ == '__main__':
    unittest.main()
