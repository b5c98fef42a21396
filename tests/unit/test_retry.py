import asyncio
import unittest

import httpx

from followsync.services.retry import RetryPolicy, exponential_backoff, is_transient, with_backoff
from followsync.services.trakt_client import (
    TraktAuthError,
    TraktClientError,
    TraktNetworkError,
    TraktUnavailableError,
)


class RecordingSleep:
    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


class FlakyOperation:
    """Fails with the queued exceptions, then returns `result`."""

    def __init__(self, failures, result="ok"):
        self.failures = list(failures)
        self.result = result
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if self.failures:
            raise self.failures.pop(0)
        return self.result


class TestWithBackoff(unittest.IsolatedAsyncioTestCase):
    def policy(self, max_attempts, sleep=None):
        return RetryPolicy(max_attempts=max_attempts, backoff=lambda attempt: attempt * 0.5,
                           sleep=sleep or RecordingSleep())

    async def test_transient_failures_exhaust_every_attempt(self):
        for n in range(1, 5):
            sleep = RecordingSleep()
            last = TraktNetworkError(f"down #{n}")
            op = FlakyOperation([TraktNetworkError("down")] * (n - 1) + [last, TraktNetworkError("extra")])
            with self.assertRaises(TraktNetworkError) as ctx:
                await with_backoff(op, policy=self.policy(n, sleep))
            self.assertEqual(op.calls, n)
            self.assertIs(ctx.exception, last)
            self.assertEqual(sleep.delays, [k * 0.5 for k in range(1, n)])

    async def test_permanent_failure_is_not_retried(self):
        for n in (1, 3, 10):
            op = FlakyOperation([TraktClientError("bad request", 400)])
            with self.assertRaises(TraktClientError):
                await with_backoff(op, policy=self.policy(n))
            self.assertEqual(op.calls, 1)

    async def test_auth_failure_is_permanent(self):
        op = FlakyOperation([TraktAuthError("expired", 401)])
        with self.assertRaises(TraktAuthError):
            await with_backoff(op, policy=self.policy(5))
        self.assertEqual(op.calls, 1)

    async def test_success_on_kth_attempt(self):
        sleep = RecordingSleep()
        op = FlakyOperation([TraktUnavailableError("502", 502), TraktNetworkError("reset")], result={"id": 7})
        result = await with_backoff(op, policy=self.policy(5, sleep))
        self.assertEqual(result, {"id": 7})
        self.assertEqual(op.calls, 3)
        self.assertEqual(sleep.delays, [0.5, 1.0])

    async def test_single_attempt_is_pass_through(self):
        sleep = RecordingSleep()
        op = FlakyOperation([TraktNetworkError("timeout")])
        with self.assertRaises(TraktNetworkError):
            await with_backoff(op, policy=self.policy(1, sleep))
        self.assertEqual(op.calls, 1)
        self.assertEqual(sleep.delays, [])

    async def test_passes_arguments_through(self):
        async def add(a, b, scale=1):
            return (a + b) * scale

        self.assertEqual(await with_backoff(add, 2, 3, scale=10, policy=self.policy(2)), 50)

    async def test_retry_after_extends_delay(self):
        sleep = RecordingSleep()
        op = FlakyOperation([TraktUnavailableError("rate limited", 429, retry_after=7.0)])
        await with_backoff(op, policy=self.policy(3, sleep))
        self.assertEqual(sleep.delays, [7.0])

    async def test_cancel_during_backoff_starts_no_new_attempt(self):
        started = asyncio.Event()
        calls = 0

        async def op():
            nonlocal calls
            calls += 1
            started.set()
            raise TraktNetworkError("down")

        policy = RetryPolicy(max_attempts=5, backoff=lambda attempt: 60.0)
        task = asyncio.create_task(with_backoff(op, policy=policy))
        await started.wait()
        await asyncio.sleep(0)
        task.cancel()
        with self.assertRaises(asyncio.CancelledError):
            await task
        self.assertEqual(calls, 1)


class TestRetryPolicy(unittest.TestCase):
    def test_rejects_zero_attempts(self):
        with self.assertRaises(ValueError):
            RetryPolicy(max_attempts=0)

    def test_exponential_backoff_is_capped(self):
        backoff = exponential_backoff(1.0, 2.0, 30.0)
        self.assertEqual([backoff(k) for k in range(1, 7)], [1.0, 2.0, 4.0, 8.0, 16.0, 30.0])

    def test_classification(self):
        request = httpx.Request("GET", "https://api.trakt.tv/users/me/lists")
        self.assertTrue(is_transient(TraktNetworkError("timeout")))
        self.assertTrue(is_transient(TraktUnavailableError("503", 503)))
        self.assertTrue(is_transient(httpx.ConnectError("refused", request=request)))
        self.assertTrue(is_transient(httpx.ReadTimeout("slow", request=request)))
        self.assertFalse(is_transient(TraktClientError("404", 404)))
        self.assertFalse(is_transient(TraktAuthError("401", 401)))
        self.assertFalse(is_transient(ValueError("bad payload")))


if __name__ == "__main__":
    unittest.main()
