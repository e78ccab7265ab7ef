"""Ensemble runner for independent analyses.

Runs several independent analyses concurrently, keeps the ones that
complete, and hands them to the consensus builder. Timeouts and retries
live here, on the caller side; the scoring core never retries or cancels.
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from joshua.config.engine import ConsensusConfig
from joshua.consensus.builder import ConsensusAnalysis, ConsensusBuilder
from joshua.core.logging import get_logger
from joshua.models.analysis import AnalysisRecord
from joshua.observability.metrics import record_analysis_run

logger = get_logger(__name__)

AnalysisRun = Callable[[int], Awaitable[AnalysisRecord]]
"""Coroutine factory producing the analysis for a run index."""


@dataclass
class EnsembleOutcome:
    """Analyses gathered from an ensemble run.

    Attributes:
        analyses: Successful analyses, in run index order.
        failures: Number of runs that failed after all retries.
        errors: Error message per failed run index.
    """

    analyses: list[AnalysisRecord] = field(default_factory=list)
    failures: int = 0
    errors: dict[int, str] = field(default_factory=dict)

    @property
    def requested(self) -> int:
        return len(self.analyses) + self.failures


async def gather_analyses(
    run: AnalysisRun,
    count: int = 3,
    timeout: float = 120.0,
    max_retries: int = 3,
    max_concurrent: int = 3,
    backoff_seconds: float = 1.0,
) -> EnsembleOutcome:
    """Run independent analyses concurrently.

    Args:
        run: Coroutine factory called with the run index (0-based).
        count: Number of analyses to request.
        timeout: Timeout in seconds for a single attempt.
        max_retries: Attempts per run before it counts as failed.
        max_concurrent: Maximum runs in flight at once.
        backoff_seconds: Base of the exponential wait between attempts.

    Returns:
        EnsembleOutcome with the successful analyses and failure count.
    """
    semaphore = asyncio.Semaphore(max_concurrent)

    async def attempt(index: int) -> AnalysisRecord:
        return await asyncio.wait_for(run(index), timeout=timeout)

    async def run_one(index: int) -> AnalysisRecord:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(max_retries),
            wait=wait_exponential(multiplier=backoff_seconds, max=10 * backoff_seconds),
            retry=retry_if_exception_type(Exception),
            reraise=True,
        )
        async with semaphore:
            return await retrying(attempt, index)

    logger.info("ensemble_started", count=count, timeout=timeout, max_retries=max_retries)

    results = await asyncio.gather(
        *(run_one(i) for i in range(count)),
        return_exceptions=True,
    )

    outcome = EnsembleOutcome()
    for index, result in enumerate(results):
        if isinstance(result, BaseException):
            if isinstance(result, asyncio.CancelledError):
                raise result
            status = "timeout" if isinstance(result, TimeoutError) else "error"
            record_analysis_run(status)
            outcome.failures += 1
            outcome.errors[index] = str(result) or type(result).__name__
            logger.warning(
                "analysis_run_failed",
                run_index=index,
                status=status,
                error_type=type(result).__name__,
                error_message=str(result),
            )
        else:
            record_analysis_run("success")
            outcome.analyses.append(result)

    logger.info(
        "ensemble_completed",
        succeeded=len(outcome.analyses),
        failed=outcome.failures,
    )
    return outcome


async def build_ensemble_consensus(
    run: AnalysisRun,
    config: ConsensusConfig | None = None,
    builder: ConsensusBuilder | None = None,
    backoff_seconds: float = 1.0,
) -> ConsensusAnalysis:
    """Gather ``num_analyses`` analyses and reconcile the successful ones.

    Args:
        run: Coroutine factory called with the run index.
        config: Consensus configuration (run count, timeout, retries).
        builder: Builder to reconcile with (defaults to one built from config).
        backoff_seconds: Base of the exponential wait between attempts.

    Returns:
        ConsensusAnalysis over the analyses that completed.

    Raises:
        InsufficientAnalysesError: If fewer than ``min_analyses`` completed.
    """
    config = config or ConsensusConfig()
    builder = builder or ConsensusBuilder(config)

    outcome = await gather_analyses(
        run,
        count=config.num_analyses,
        timeout=config.analysis_timeout_seconds,
        max_retries=config.max_retries,
        max_concurrent=config.max_concurrent_runs,
        backoff_seconds=backoff_seconds,
    )
    return builder.build_consensus(outcome.analyses)
