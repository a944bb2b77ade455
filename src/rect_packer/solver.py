"""Entry points used by the UI layer: one request in, one PackingResult out."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Optional

from rect_packer.io.schemas import PackingRequest
from rect_packer.models import ComparisonResult, PackingResult
from rect_packer.packing.first_fit import pack_rectangles
from rect_packer.search.engine import StopCheck
from rect_packer.search.neighborhoods import NeighborhoodKind
from rect_packer.search.packer import LocalSearchPacker

logger = logging.getLogger(__name__)


def make_packer(request: PackingRequest, neighborhood: NeighborhoodKind) -> LocalSearchPacker:
    return LocalSearchPacker(
        request.bin_side,
        neighborhood,
        seed=request.seed,
        early_stop_fraction=request.early_stop_fraction,
        initial=request.initial,
    )


def solve(request: PackingRequest, should_stop: Optional[StopCheck] = None) -> PackingResult:
    """
    Run greedy alone, or greedy followed by local search when the request
    names a neighborhood.
    """
    rectangles = request.expand()
    if request.neighborhood is None:
        return pack_rectangles(rectangles, request.bin_side, request.criterion)

    packer = make_packer(request, request.neighborhood)
    return packer.pack(
        rectangles,
        max_iterations=request.max_iterations,
        criterion=request.criterion,
        should_stop=should_stop,
    )


def compare(request: PackingRequest, should_stop: Optional[StopCheck] = None) -> ComparisonResult:
    """Greedy and local search on the same input (geometry neighborhood by default)."""
    rectangles = request.expand()
    greedy = pack_rectangles(rectangles, request.bin_side, request.criterion)

    packer = make_packer(request, request.neighborhood or NeighborhoodKind.GEOMETRY)
    local = packer.pack(
        rectangles,
        max_iterations=request.max_iterations,
        criterion=request.criterion,
        should_stop=should_stop,
    )
    comparison = ComparisonResult(greedy=greedy, local_search=local)
    logger.info(
        f"compare greedy_bins={greedy.total_boxes}, local_bins={local.total_boxes}, "
        f"bins_saved={comparison.bins_saved}"
    )
    return comparison


async def solve_async(request: PackingRequest, should_stop: Optional[StopCheck] = None) -> PackingResult:
    """
    Same as solve(), but hands control back to the event loop between the
    construction phase and the search phase so an interactive caller can
    refresh its progress display. The algorithms themselves never suspend.
    """
    rectangles = request.expand()
    if request.neighborhood is None:
        result = pack_rectangles(rectangles, request.bin_side, request.criterion)
        await asyncio.sleep(0)
        return result

    started = time.perf_counter()
    packer = make_packer(request, request.neighborhood)
    initial, too_large = packer.construct(rectangles, request.criterion)
    await asyncio.sleep(0)

    result = packer.improve(
        initial,
        requested=len(rectangles),
        too_large=len(too_large),
        max_iterations=request.max_iterations,
        should_stop=should_stop,
        started=started,
    )
    await asyncio.sleep(0)
    return result
