import json
import os
import sys
import unittest
from datetime import datetime, timedelta

# Ensure project src/ is on sys.path for imports
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
src_path = os.path.join(ROOT, "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from accounts.activity import filter_activities  # noqa: E402
from accounts import session as session_mod  # noqa: E402
from accounts.session import SessionManager  # noqa: E402
from db.models import Preferences, UserRecord  # noqa: E402
from db.storage import CURRENT_USER_KEY, REGISTERED_USERS_KEY, MemoryStorage  # noqa: E402
from utils.results import Status  # noqa: E402


class FakeClock:
    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def tick(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


def stored_users(storage: MemoryStorage):
    return json.loads(storage.data[REGISTERED_USERS_KEY])


class SessionTestCase(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.clock = FakeClock(datetime(2025, 3, 1, 9, 0, 0))
        self.storage = MemoryStorage()
        self.manager = SessionManager(self.storage, clock=self.clock)
        await self.manager.start()

    async def _register(self, email="a@b.com", password="Pass1234"):
        return await self.manager.register("Ana", "Bravo", email, password, "3001234567")

    # ---------- Startup ----------

    async def test_start_seeds_demo_accounts(self):
        self.assertFalse(self.manager.is_loading)
        self.assertFalse(self.manager.is_authenticated)
        emails = [u.email for u in self.manager.registered_users]
        self.assertEqual(emails, ["admin@organi.live", "usuario@test.com"])
        # seed is written back so the next start finds it
        self.assertEqual(len(stored_users(self.storage)), 2)

    async def test_corrupt_user_list_is_reseeded(self):
        storage = MemoryStorage({REGISTERED_USERS_KEY: "{not json"})
        manager = SessionManager(storage, clock=self.clock)
        await manager.start()
        self.assertEqual(len(manager.registered_users), 2)
        self.assertEqual(len(stored_users(storage)), 2)

    async def test_corrupt_session_is_dropped(self):
        for raw in ("garbage", "{}", json.dumps({"uid": "x"})):
            storage = MemoryStorage({CURRENT_USER_KEY: raw})
            manager = SessionManager(storage, clock=self.clock)
            await manager.start()
            self.assertIsNone(manager.user)
            self.assertNotIn(CURRENT_USER_KEY, storage.data)

    async def test_session_record_with_password_is_rejected(self):
        await self.manager.login("admin@organi.live", "123456")
        data = json.loads(self.storage.data[CURRENT_USER_KEY])
        data["pwd"] = "123456"
        self.storage.data[CURRENT_USER_KEY] = json.dumps(data)

        manager = SessionManager(self.storage, clock=self.clock)
        await manager.start()
        self.assertFalse(manager.is_authenticated)

    async def test_utc_stamped_session_mixes_with_new_activity(self):
        await self.manager.login("usuario@test.com", "password123")
        data = json.loads(self.storage.data[CURRENT_USER_KEY])
        data["last_access"] = "2025-01-01T00:00:00.000Z"
        data["activity"][0]["timestamp"] = "2025-01-01T00:00:00.000Z"
        self.storage.data[CURRENT_USER_KEY] = json.dumps(data)

        manager = SessionManager(self.storage, clock=self.clock)
        await manager.start()
        self.assertIsNone(manager.user.activity[0].timestamp.tzinfo)

        await manager.add_activity("profile", "Edited")
        history = filter_activities(manager.user.activity, now=self.clock.now)
        self.assertEqual([a.type for a in history], ["profile", "login"])

        recent = filter_activities(manager.user.activity, days=90, now=self.clock.now)
        self.assertEqual(len(recent), 2)

    async def test_session_survives_restart(self):
        await self.manager.login("usuario@test.com", "password123")
        manager = SessionManager(self.storage, clock=self.clock)
        await manager.start()
        self.assertTrue(manager.is_authenticated)
        self.assertEqual(manager.user, self.manager.user)

    # ---------- Registration ----------

    async def test_register_grows_list_by_one_with_fresh_id(self):
        before = self.manager.registered_users
        result = await self._register()
        self.assertTrue(result.ok)

        after = self.manager.registered_users
        self.assertEqual(len(after), len(before) + 1)
        self.assertNotIn(result.value.uid, {u.uid for u in before})
        self.assertEqual(result.value.registered_at, self.clock.now)
        self.assertEqual(len(stored_users(self.storage)), len(after))

    async def test_ids_stay_unique_within_one_millisecond(self):
        # the fake clock never moves, so every id comes from the same instant
        r1 = await self._register("one@b.com")
        r2 = await self._register("two@b.com")
        r3 = await self._register("three@b.com")
        uids = [r.value.uid for r in (r1, r2, r3)]
        self.assertEqual(len(set(uids)), 3)
        self.assertEqual(uids, sorted(uids))

    async def test_register_rejects_taken_email(self):
        await self._register()
        before = self.manager.registered_users
        result = await self._register()
        self.assertEqual(result.status, Status.FAILURE)
        self.assertEqual(result.error, session_mod.EMAIL_TAKEN)
        self.assertEqual(self.manager.registered_users, before)
        self.assertFalse(self.manager.email_available("a@b.com"))
        self.assertTrue(self.manager.email_available("c@d.com"))

    # ---------- Login / logout ----------

    async def test_login_logout_scenario(self):
        await self._register()

        ok = await self.manager.login("a@b.com", "Pass1234")
        self.assertTrue(ok.ok)
        self.assertFalse(hasattr(ok.value, "pwd"))
        self.assertNotIn("pwd", json.loads(self.storage.data[CURRENT_USER_KEY]))

        users_before = self.manager.registered_users
        bad = await self.manager.login("a@b.com", "wrong")
        self.assertFalse(bad.ok)
        self.assertEqual(bad.error, session_mod.INVALID_CREDENTIALS)
        self.assertEqual(self.manager.registered_users, users_before)

        await self.manager.logout()
        self.assertIsNone(self.manager.user)
        self.assertNotIn(CURRENT_USER_KEY, self.storage.data)
        self.assertEqual(self.manager.registered_users, users_before)

        again = await self.manager.login("a@b.com", "Pass1234")
        self.assertTrue(again.ok)

    async def test_login_fills_defaults_and_records_activity(self):
        result = await self.manager.login("admin@organi.live", "123456")
        user = result.value
        self.assertEqual(user.display_name, "Admin System")
        self.assertEqual(user.initials, "AS")
        self.assertEqual(user.last_access, self.clock.now)
        self.assertEqual(user.stats.points, 850)
        self.assertEqual(user.preferences, Preferences())
        self.assertEqual([a.type for a in user.activity], ["login"])

    async def test_login_defaults_for_blank_names(self):
        blank = UserRecord(
            uid=7,
            email="blank@b.com",
            pwd="x",
            first_name="",
            last_name="",
            phone="",
            registered_at=self.clock.now,
        )
        storage = MemoryStorage(
            {REGISTERED_USERS_KEY: json.dumps([blank.to_dict()])}
        )
        manager = SessionManager(storage, clock=self.clock)
        await manager.start()
        user = (await manager.login("blank@b.com", "x")).value
        self.assertEqual(user.first_name, session_mod.DEFAULT_FIRST_NAME)
        self.assertEqual(user.last_name, session_mod.DEFAULT_LAST_NAME)
        self.assertEqual(user.phone, session_mod.DEFAULT_PHONE)

    async def test_login_is_case_sensitive(self):
        result = await self.manager.login("ADMIN@organi.live", "123456")
        self.assertFalse(result.ok)

    async def test_logout_when_anonymous_is_noop(self):
        await self.manager.logout()
        await self.manager.logout()
        self.assertFalse(self.manager.is_authenticated)

    # ---------- Profile ----------

    async def test_update_user_requires_login(self):
        result = await self.manager.update_user(city="Bogotá")
        self.assertEqual(result.error, session_mod.NOT_LOGGED_IN)

    async def test_update_user_rejects_unknown_and_read_only_fields(self):
        with self.assertRaises(ValueError):
            await self.manager.update_user(pwd="hacked")
        with self.assertRaises(ValueError):
            await self.manager.update_user(uid=99)

    async def test_update_user_is_idempotent_and_mirrors_record(self):
        await self.manager.login("usuario@test.com", "password123")

        once = await self.manager.update_user(city="Medellín", first_name="Tess")
        stored_once = dict(self.storage.data)
        twice = await self.manager.update_user(city="Medellín", first_name="Tess")

        self.assertEqual(once.value, twice.value)
        self.assertEqual(stored_once, self.storage.data)

        record = next(u for u in self.manager.registered_users if u.uid == 2)
        self.assertEqual(record.city, "Medellín")
        self.assertEqual(record.first_name, "Tess")
        self.assertEqual(record.pwd, "password123")

    async def test_update_preferences_merges_groups(self):
        await self.manager.login("usuario@test.com", "password123")
        result = await self.manager.update_preferences(
            theme="dark", notifications={"sms": True}
        )
        prefs = result.value.preferences
        self.assertEqual(prefs.theme, "dark")
        self.assertEqual(prefs.notifications, {"email": True, "push": True, "sms": True})
        self.assertEqual(prefs.privacy, Preferences().privacy)

        stored = json.loads(self.storage.data[CURRENT_USER_KEY])
        self.assertEqual(stored["preferences"]["theme"], "dark")

        with self.assertRaises(ValueError):
            await self.manager.update_preferences(font="comic")

    # ---------- Activity & password ----------

    async def test_add_activity_prepends(self):
        self.assertFalse((await self.manager.add_activity("order", "x")).ok)

        await self.manager.login("usuario@test.com", "password123")
        self.clock.tick(minutes=5)
        entry = (
            await self.manager.add_activity(
                "order", "Order placed", "3 items", details={"total": 42}
            )
        ).value
        self.assertEqual(self.manager.user.activity[0], entry)
        self.assertEqual([a.type for a in self.manager.user.activity], ["order", "login"])
        self.assertEqual(entry.details, {"total": 42})

    async def test_change_password(self):
        await self.manager.login("usuario@test.com", "password123")

        wrong = await self.manager.change_password("nope", "NewPass123")
        self.assertFalse(wrong.ok)

        ok = await self.manager.change_password("password123", "NewPass123")
        self.assertTrue(ok.ok)
        self.assertEqual(self.manager.user.activity[0].type, "security")

        await self.manager.logout()
        self.assertFalse((await self.manager.login("usuario@test.com", "password123")).ok)
        self.assertTrue((await self.manager.login("usuario@test.com", "NewPass123")).ok)


if __name__ == "__main__":
    unittest.main()
