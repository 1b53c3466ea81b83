"""
Workflow State Machine Engine

A finite-state-machine engine that drives an application's workflow with
rule-guarded transitions, delayed transitions, rollback and pluggable
state persistence.
"""

__version__ = "1.0.0"
