"""Consensus reconciliation of independent analyses."""

from joshua.consensus.builder import (
    ConsensusAnalysis,
    ConsensusBuilder,
    HighDivergence,
    create_consensus_builder,
    dedupe_case_insensitive,
)
from joshua.consensus.ensemble import (
    AnalysisRun,
    EnsembleOutcome,
    build_ensemble_consensus,
    gather_analyses,
)

__all__ = [
    # Builder
    "ConsensusBuilder",
    "ConsensusAnalysis",
    "HighDivergence",
    "create_consensus_builder",
    "dedupe_case_insensitive",
    # Ensemble
    "AnalysisRun",
    "EnsembleOutcome",
    "gather_analyses",
    "build_ensemble_consensus",
]
