"""
Evaluation Package
==================

Command line harness that loads a jet pattern file and reports tower heights.
"""

from pyroclastic.evaluation.run_sim import evaluate_targets, load_jet_pattern

__all__ = ["evaluate_targets", "load_jet_pattern"]
