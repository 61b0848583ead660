import unittest

from deadstock.database.base import Base
from deadstock.database.engine import build_engine
from deadstock.database.session import session_factory_for
from deadstock.models.session_entry import SessionEntry  # noqa: F401
from deadstock.schemas.pharmacy import PharmacyProfile
from deadstock.services.session_service import (
    MissingSessionError,
    SessionStore,
    load_session_context,
    promote_pharmacy,
    save_temp_pharmacy_id,
)


def memory_session_store():
    engine = build_engine("sqlite:///:memory:")
    Base.metadata.create_all(bind=engine)
    return SessionStore(session_factory_for(engine))


class SessionStoreTest(unittest.TestCase):
    def setUp(self):
        self.store = memory_session_store()

    def test_values_are_scoped_by_session_key(self):
        self.store.set("tab-1", "pharmacy_id", "42")
        self.store.set("tab-2", "pharmacy_id", "99")
        self.store.set("tab-1", "pharmacy_id", "43")

        self.assertEqual(self.store.get("tab-1", "pharmacy_id"), "43")
        self.assertEqual(self.store.get("tab-2", "pharmacy_id"), "99")
        self.assertEqual(self.store.items("tab-1"), {"pharmacy_id": "43"})

        self.store.delete("tab-1", "pharmacy_id")
        self.assertIsNone(self.store.get("tab-1", "pharmacy_id"))

    def test_clear_removes_only_that_session(self):
        self.store.set("tab-1", "pharmacy_id", "42")
        self.store.set("tab-1", "temp_pharmacy_id", "43")
        self.store.set("tab-2", "pharmacy_id", "99")

        self.store.clear("tab-1")

        self.assertEqual(self.store.items("tab-1"), {})
        self.assertEqual(self.store.items("tab-2"), {"pharmacy_id": "99"})

    def test_empty_session_requires_profile_completion(self):
        context = load_session_context(self.store, "tab-1")
        self.assertIsNone(context.pharmacy_id)
        self.assertEqual(context.city, "")
        with self.assertRaises(MissingSessionError):
            context.require_pharmacy_id()

    def test_promotion_moves_temp_id_to_permanent(self):
        context = load_session_context(self.store, "tab-1")
        save_temp_pharmacy_id(self.store, context, 1700000000123456)
        self.assertEqual(load_session_context(self.store, "tab-1").temp_pharmacy_id, 1700000000123456)

        profile = PharmacyProfile(id="1700000000123456", name="El Ezaby", city="Cairo")
        promote_pharmacy(self.store, context, 1700000000123456, profile)

        reloaded = load_session_context(self.store, "tab-1")
        self.assertEqual(reloaded.pharmacy_id, 1700000000123456)
        self.assertIsNone(reloaded.temp_pharmacy_id)
        self.assertEqual(reloaded.profile.city, "Cairo")
        self.assertEqual(reloaded.require_pharmacy_id(), 1700000000123456)

    def test_unreadable_values_are_ignored(self):
        self.store.set("tab-1", "pharmacy_id", "not-a-number")
        self.store.set("tab-1", "pharmacy_profile", "{broken")
        context = load_session_context(self.store, "tab-1")
        self.assertIsNone(context.pharmacy_id)
        self.assertIsNone(context.profile)


if __name__ == "__main__":
    unittest.main()
