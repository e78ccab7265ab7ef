"""JOSHUA - quantitative risk scoring.

Turns independently scored risk factors into a bounded "seconds to
midnight" metric with an uncertainty band, and reconciles independent
analyses into a consensus.
"""

__version__ = "0.1.0"
