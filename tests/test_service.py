"""
Task Lifecycle Manager Test Suite
=================================

Tests for the lifecycle rules:
- Create defaults and round trip
- Update overwrite, including the completed=False coercion
- Not-found results for get, update and delete
- Timestamp stamping and monotonicity
- Listing completeness

Author: jetgause
Created: 2025-12-10
"""

import unittest
from datetime import datetime, timedelta
from unittest.mock import Mock

from taskmanager.errors import ErrorKind
from taskmanager.service import TaskLifecycleManager
from taskmanager.store import InMemoryTaskStore


class SteppingClock:
    """Clock advancing by a fixed step on every call."""

    def __init__(self, start=None, step=timedelta(seconds=1)):
        self.current = start or datetime(2025, 12, 10, 9, 0, 0)
        self.step = step

    def __call__(self):
        now = self.current
        self.current = self.current + self.step
        return now


class TestTaskLifecycleManager(unittest.TestCase):
    """Test suite for TaskLifecycleManager."""

    def setUp(self):
        """Set up test fixtures."""
        self.store = InMemoryTaskStore()
        self.clock = SteppingClock()
        self.manager = TaskLifecycleManager(self.store, clock=self.clock)

    def _create(self, title="Task", description="Description", completed=None):
        result = self.manager.create(title, description, completed)
        self.assertTrue(result.ok)
        return result.value

    # ==================== Create / read ====================

    def test_create_and_get_round_trip(self):
        """Test a created task reads back unchanged."""
        for completed in (True, False):
            created = self._create("Round trip", "Body", completed)

            result = self.manager.get_by_id(created.id)

            self.assertTrue(result.ok)
            self.assertEqual(result.value.id, created.id)
            self.assertEqual(result.value.title, "Round trip")
            self.assertEqual(result.value.description, "Body")
            self.assertEqual(result.value.completed, completed)

    def test_create_defaults_completed_to_false(self):
        """Test omitting completed on create stores False."""
        created = self._create(completed=None)

        self.assertIs(created.completed, False)

    def test_create_accepts_empty_description(self):
        """Test an empty description is stored as-is."""
        created = self._create(description="")

        self.assertEqual(created.description, "")

    def test_create_stamps_equal_timestamps(self):
        """Test creation sets both timestamps to the same instant."""
        created = self._create()

        self.assertEqual(created.created_at, datetime(2025, 12, 10, 9, 0, 0))
        self.assertEqual(created.created_at, created.updated_at)

    def test_get_unknown_id_is_not_found(self):
        """Test reading an id never created."""
        result = self.manager.get_by_id(42)

        self.assertFalse(result.ok)
        self.assertEqual(result.error.kind, ErrorKind.NOT_FOUND)
        self.assertEqual(result.error.task_id, 42)
        self.assertEqual(result.error.message, "Task with ID 42 not found")

    # ==================== Update ====================

    def test_update_overwrites_fields(self):
        """Test update replaces title, description and completed."""
        created = self._create("Old", "Old body", False)

        result = self.manager.update(created.id, "New", "New body", True)

        self.assertTrue(result.ok)
        loaded = self.manager.get_by_id(created.id).value
        self.assertEqual(loaded.title, "New")
        self.assertEqual(loaded.description, "New body")
        self.assertTrue(loaded.completed)

    def test_update_without_completed_coerces_to_false(self):
        """Test an omitted completed on update resets a completed task to False."""
        created = self._create(completed=True)

        result = self.manager.update(created.id, "Title", "Body", None)

        self.assertTrue(result.ok)
        self.assertIs(result.value.completed, False)
        self.assertIs(self.manager.get_by_id(created.id).value.completed, False)

    def test_update_keeps_created_at_and_advances_updated_at(self):
        """Test update refreshes updated_at only."""
        created = self._create()
        previous_updated = created.updated_at

        updated = self.manager.update(created.id, "T2", "D2", False).value

        self.assertEqual(updated.created_at, created.created_at)
        self.assertGreater(updated.updated_at, previous_updated)
        self.assertLessEqual(updated.created_at, updated.updated_at)

    def test_update_advances_even_with_frozen_clock(self):
        """Test updated_at strictly increases when the clock does not move."""
        frozen = datetime(2025, 12, 10, 9, 0, 0)
        manager = TaskLifecycleManager(InMemoryTaskStore(), clock=lambda: frozen)
        created = manager.create("T", "D").value

        first = manager.update(created.id, "T", "D").value
        second = manager.update(created.id, "T", "D").value

        self.assertGreater(first.updated_at, created.updated_at)
        self.assertGreater(second.updated_at, first.updated_at)
        self.assertEqual(second.created_at, frozen)

    def test_update_unknown_id_is_not_found(self):
        """Test updating an id never created."""
        result = self.manager.update(7, "T", "D", True)

        self.assertFalse(result.ok)
        self.assertEqual(result.error.kind, ErrorKind.NOT_FOUND)
        self.assertEqual(self.store.list(), [])

    # ==================== Delete ====================

    def test_delete_then_get_is_not_found(self):
        """Test a deleted task is gone."""
        created = self._create()

        result = self.manager.delete(created.id)

        self.assertTrue(result.ok)
        self.assertIsNone(result.value)
        self.assertEqual(self.manager.get_by_id(created.id).error.kind, ErrorKind.NOT_FOUND)

    def test_delete_unknown_id_is_not_found(self):
        """Test deleting an id never created."""
        result = self.manager.delete(99)

        self.assertFalse(result.ok)
        self.assertEqual(result.error.kind, ErrorKind.NOT_FOUND)

    def test_delete_twice(self):
        """Test the second delete of the same id reports not found."""
        created = self._create()

        self.assertTrue(self.manager.delete(created.id).ok)
        self.assertFalse(self.manager.delete(created.id).ok)

    # ==================== Listing ====================

    def test_list_empty(self):
        """Test listing with no tasks."""
        result = self.manager.list_all()

        self.assertTrue(result.ok)
        self.assertEqual(result.value, [])

    def test_list_returns_every_created_task(self):
        """Test listing after N creates returns exactly those N ids."""
        ids = {self._create(f"Task {i}").id for i in range(5)}

        listed = self.manager.list_all().value

        self.assertEqual(len(listed), 5)
        self.assertEqual({record.id for record in listed}, ids)
        for record in listed:
            self.assertLessEqual(record.created_at, record.updated_at)

    # ==================== Store failures ====================

    def test_store_errors_propagate(self):
        """Test store exceptions are not turned into results."""
        store = Mock()
        store.get.side_effect = ConnectionError("database unavailable")
        manager = TaskLifecycleManager(store)

        with self.assertRaises(ConnectionError):
            manager.get_by_id(1)

    def test_delete_checks_existence_before_deleting(self):
        """Test delete does not call the store's delete for a missing id."""
        store = Mock()
        store.exists.return_value = False
        manager = TaskLifecycleManager(store)

        manager.delete(3)

        store.exists.assert_called_once_with(3)
        store.delete.assert_not_called()


class TestTaskResult(unittest.TestCase):
    """Test suite for TaskResult helpers."""

    def test_unwrap_failure_raises(self):
        manager = TaskLifecycleManager(InMemoryTaskStore())

        with self.assertRaises(LookupError):
            manager.get_by_id(1).unwrap()

    def test_unwrap_success(self):
        manager = TaskLifecycleManager(InMemoryTaskStore())
        created = manager.create("T", "D").unwrap()

        self.assertEqual(manager.get_by_id(created.id).unwrap().title, "T")


if __name__ == "__main__":
    unittest.main(verbosity=2)
