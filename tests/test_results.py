import asyncio
import os
import sys
import unittest
from unittest import mock

# Ensure project src/ is on sys.path for imports
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
src_path = os.path.join(ROOT, "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from utils.config import load_settings  # noqa: E402
from utils.pure import format_price, generate_markdown_table  # noqa: E402
from utils.results import Result, Status, Submission  # noqa: E402


class SubmissionTestCase(unittest.IsolatedAsyncioTestCase):
    async def test_pending_then_success(self):
        gate = asyncio.Event()

        async def operation():
            await gate.wait()
            return "done"

        submission = Submission()
        self.assertEqual(submission.status, Status.IDLE)

        task = asyncio.create_task(submission.run(operation))
        await asyncio.sleep(0)
        self.assertTrue(submission.pending)
        self.assertIsNone(submission.result)

        gate.set()
        result = await task
        self.assertEqual(result, Result.success("done"))
        self.assertEqual(submission.status, Status.SUCCESS)

    async def test_pending_during_delay(self):
        submission = Submission(delay=0.05)
        task = asyncio.create_task(submission.run(lambda: 1))
        await asyncio.sleep(0)
        self.assertEqual(submission.status, Status.PENDING)
        self.assertEqual((await task).value, 1)

    async def test_failure_result_is_passed_through(self):
        submission = Submission()
        result = await submission.run(lambda: Result.failure("Invalid credentials"))
        self.assertEqual(submission.status, Status.FAILURE)
        self.assertEqual(result.error, "Invalid credentials")

    async def test_exception_becomes_generic_failure(self):
        def boom():
            raise RuntimeError("disk on fire")

        submission = Submission()
        result = await submission.run(boom)
        self.assertFalse(result.ok)
        self.assertEqual(result.error, Submission.GENERIC_ERROR)

        submission.reset()
        self.assertEqual(submission.status, Status.IDLE)
        self.assertIsNone(submission.result)


class HelpersTestCase(unittest.TestCase):
    def test_format_price(self):
        self.assertEqual(format_price(12500), "$12,500")
        self.assertEqual(format_price(12.5), "$12.50")

    def test_markdown_table(self):
        table = generate_markdown_table(["A", "B"], [["1", "2"]], ["l", "r"])
        self.assertEqual(table, "| A | B |\n| :--- | ---: |\n| 1 | 2 |")
        self.assertEqual(generate_markdown_table(["A"], []), "")
        # first row doubles as the header, columns centered by default
        self.assertEqual(
            generate_markdown_table(None, [["Name", "Ana"], ["Cart", 2]]),
            "| Name | Ana |\n| :---: | :---: |\n| Cart | 2 |",
        )
        with self.assertRaises(ValueError):
            generate_markdown_table(["A", "B"], [["1", "2"]], ["l"])

    def test_load_settings_from_environment(self):
        env = {
            "STORE_EMAIL": " hola@organi.live ",
            "CATALOG_SHEET_URL": "",
            "SIMULATED_DELAY": "not-a-number",
            "FETCH_TIMEOUT": "3",
        }
        with mock.patch.dict(os.environ, env, clear=True), mock.patch(
            "utils.config._load_env"
        ):
            settings = load_settings()
        self.assertEqual(settings.email, "hola@organi.live")
        self.assertIsNone(settings.catalog_url)
        self.assertEqual(settings.simulated_delay, 2.0)
        self.assertEqual(settings.fetch_timeout, 3.0)
        self.assertEqual(settings.db_path, "data/store.sqlite")


if __name__ == "__main__":
    unittest.main()
