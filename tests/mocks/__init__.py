"""Mock implementations for testing."""

from tests.mocks.banner import RecordingNavigator, RecordingSurface
from tests.mocks.stores import FailingDocumentStore

__all__ = ["FailingDocumentStore", "RecordingNavigator", "RecordingSurface"]
