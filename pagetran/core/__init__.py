"""Core models, errors, scheduling, retry and the pipeline orchestrator."""
