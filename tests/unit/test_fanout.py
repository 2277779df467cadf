"""Unit tests for multi-region enumeration."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from reserved_dal import DalError, StopReason, enumerate_regions
from reserved_dal.models import Page, PageContext


def make_fetcher(*pages: Page | Exception) -> MagicMock:
    """Fetcher returning the given pages (or raising errors) in order."""
    fetcher = MagicMock()
    fetcher.fetch_page = AsyncMock(side_effect=list(pages))
    return fetcher


class TestEnumerateRegions:
    """Test enumerate_regions merging and limits."""

    @pytest.mark.asyncio
    async def test_merges_all_regions(self):
        """Every region's records reach the shared sink."""
        fetchers = {
            "us-east-1": make_fetcher(
                Page(records=["e1"], has_more=True, context=PageContext(token="t")),
                Page(records=["e2"], has_more=False),
            ),
            "eu-west-1": make_fetcher(Page(records=["w1"], has_more=False)),
        }
        seen: list[str] = []

        result = await enumerate_regions(fetchers, lambda r: seen.append(r) is None)

        assert sorted(seen) == ["e1", "e2", "w1"]
        assert result.records_emitted == 3
        assert set(result.regions) == {"us-east-1", "eu-west-1"}
        assert result.regions["us-east-1"].pages_fetched == 2
        assert result.regions["eu-west-1"].stop_reason is StopReason.EXHAUSTED

    @pytest.mark.asyncio
    async def test_each_region_gets_its_own_order(self):
        """Records of one region keep their remote order."""
        fetchers = {
            "us-east-1": make_fetcher(
                Page(records=["a1", "a2"], has_more=True, context=PageContext(token="t")),
                Page(records=["a3"], has_more=False),
            ),
            "us-west-2": make_fetcher(Page(records=["b1", "b2"], has_more=False)),
        }
        seen: list[str] = []

        await enumerate_regions(fetchers, lambda r: seen.append(r) is None)

        assert [r for r in seen if r.startswith("a")] == ["a1", "a2", "a3"]
        assert [r for r in seen if r.startswith("b")] == ["b1", "b2"]

    @pytest.mark.asyncio
    async def test_ceiling_is_global(self):
        """The ceiling bounds records forwarded across all regions."""
        fetchers = {
            region: make_fetcher(Page(records=[f"{region}-{i}" for i in range(5)], has_more=False))
            for region in ("us-east-1", "eu-west-1", "ap-south-1")
        }
        seen: list[str] = []

        result = await enumerate_regions(fetchers, lambda r: seen.append(r) is None, ceiling=4)

        assert len(seen) == 4
        assert result.records_emitted == 4
        for fetcher in fetchers.values():
            assert fetcher.fetch_page.await_args.args[0].page_size == 20

    @pytest.mark.asyncio
    async def test_sink_stop_stops_every_region(self):
        """A stop from the sink is honoured by every region."""
        fetchers = {
            "us-east-1": make_fetcher(
                Page(records=["a1", "a2"], has_more=True, context=PageContext(token="t")),
                Page(records=["a3"], has_more=False),
            ),
            "us-west-2": make_fetcher(
                Page(records=["b1", "b2"], has_more=True, context=PageContext(token="t")),
                Page(records=["b3"], has_more=False),
            ),
        }
        seen: list[str] = []

        def sink(record: str) -> bool:
            seen.append(record)
            return False

        result = await enumerate_regions(fetchers, sink)

        assert len(seen) == 1
        assert result.records_emitted == 1
        assert sorted(result.forwarded.values()) == [0, 1]
        for region_result in result.regions.values():
            assert region_result.stop_reason is StopReason.CANCELLED
        for fetcher in fetchers.values():
            assert fetcher.fetch_page.await_count == 1

    @pytest.mark.asyncio
    async def test_passes_filter_to_every_region(self):
        """The filter is sent unchanged to each region."""
        fetchers = {
            "us-east-1": make_fetcher(Page(records=[], has_more=False)),
            "eu-west-1": make_fetcher(Page(records=[], has_more=False)),
        }

        result = await enumerate_regions(fetchers, lambda r: True, filter="ri-123")

        assert result.records_emitted == 0
        for fetcher in fetchers.values():
            assert fetcher.fetch_page.await_args.args[0].filter == "ri-123"

    @pytest.mark.asyncio
    async def test_region_failure_surfaces_in_group(self):
        """A failing region surfaces its unmodified error in an ExceptionGroup."""
        error = DalError("denied")
        fetchers = {
            "us-east-1": make_fetcher(error),
            "eu-west-1": make_fetcher(Page(records=[], has_more=False)),
        }

        with pytest.raises(ExceptionGroup) as exc_info:
            await enumerate_regions(fetchers, lambda r: True)

        assert exc_info.value.exceptions == (error,)

    @pytest.mark.asyncio
    async def test_forwarded_counts_per_region(self):
        """Per-region forwarded counts add up to the merged total."""
        fetchers = {
            "us-east-1": make_fetcher(Page(records=["a1", "a2", "a3"], has_more=False)),
            "eu-west-1": make_fetcher(Page(records=["b1"], has_more=False)),
        }

        result = await enumerate_regions(fetchers, lambda r: True)

        assert result.forwarded == {"us-east-1": 3, "eu-west-1": 1}
        assert sum(result.forwarded.values()) == result.records_emitted
