# tests/test_log.py

import asyncio
import datetime
import os

from storefront.utils.log import Log

DAY_ONE = datetime.datetime(2025, 10, 4, 23, 59)
DAY_TWO = datetime.datetime(2025, 10, 5, 0, 1)


def test_new_day_switches_to_new_file(tmp_path):
    log = Log(log_dir=str(tmp_path))

    async def _run():
        first = await log.get_logger("checkout", DAY_ONE)
        assert await log.get_logger("checkout", DAY_ONE) is first

        closed = []
        original_shutdown = first.shutdown

        async def tracking_shutdown():
            closed.append(True)
            await original_shutdown()

        first.shutdown = tracking_shutdown

        second = await log.get_logger("checkout", DAY_TWO)
        await second.info("после полуночи")
        await log.shutdown()
        return first, second, closed

    first, second, closed = asyncio.run(_run())

    assert second is not first
    assert closed == [True]
    assert log.handlers == {}
    assert os.path.exists(tmp_path / "2025" / "10" / "05.log")
    assert "после полуночи" in (tmp_path / "2025" / "10" / "05.log").read_text(encoding="utf-8")


def test_failed_close_of_old_file_does_not_break_logging(tmp_path):
    log = Log(log_dir=str(tmp_path))

    async def _run():
        first = await log.get_logger("webhook", DAY_ONE)

        async def broken_shutdown():
            raise RuntimeError("disk gone")

        first.shutdown = broken_shutdown
        second = await log.get_logger("webhook", DAY_TWO)
        path = log.handlers["webhook"]["path"]
        await log.shutdown()
        return first, second, path

    first, second, path = asyncio.run(_run())

    assert second is not first
    assert path == os.path.join(str(tmp_path), "2025", "10", "05.log")
    assert "disk gone" in (tmp_path / "2025" / "10" / "05.log").read_text(encoding="utf-8")
