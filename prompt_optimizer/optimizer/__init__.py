"""Orchestration and report synthesis."""

from prompt_optimizer.optimizer.orchestrator import PromptOptimizer

__all__ = ["PromptOptimizer"]
