"""
Transport retry policy.
"""

import pytest
from unittest.mock import patch

from agentloop.utils.retry import retry_async


class FlakyError(Exception):
    pass


@pytest.mark.asyncio
async def test_retries_listed_exceptions_until_success():
    attempts = []

    @retry_async(max_attempts=3, min_wait=0, max_wait=0, exceptions=(FlakyError,))
    async def flaky():
        attempts.append(1)
        if len(attempts) < 3:
            raise FlakyError("try again")
        return "ok"

    with patch("agentloop.utils.retry.logger") as mock_logger:
        assert await flaky() == "ok"

    assert len(attempts) == 3
    assert mock_logger.warning.call_count == 2
    assert mock_logger.warning.call_args[0][0] == "transport_retry"
    assert mock_logger.warning.call_args[1]["error_type"] == "FlakyError"


@pytest.mark.asyncio
async def test_gives_up_and_reraises():
    attempts = []

    @retry_async(max_attempts=2, min_wait=0, max_wait=0, exceptions=(FlakyError,))
    async def always_failing():
        attempts.append(1)
        raise FlakyError("still broken")

    with pytest.raises(FlakyError):
        await always_failing()

    assert len(attempts) == 2


@pytest.mark.asyncio
async def test_other_exceptions_are_not_retried():
    attempts = []

    @retry_async(max_attempts=5, min_wait=0, max_wait=0, exceptions=(FlakyError,))
    async def broken():
        attempts.append(1)
        raise KeyError("bug")

    with pytest.raises(KeyError):
        await broken()

    assert len(attempts) == 1
