"""
Prompt Optimizer - deterministic prompt analysis and improvement.

This package classifies a prompt's intent, scores it on the CLEAR quality
dimensions, decides through triage whether deep analysis is warranted, and
rewrites it through an ordered pipeline of text patterns.

Public API:
- PromptOptimizer: Runs the full improvement pipeline
- PatternLibrary: Registry and selection engine for patterns
- LibraryConfig: Disabled patterns, priority overrides and custom settings
- Config: YAML/environment configuration
"""

from prompt_optimizer.config import Config
from prompt_optimizer.intelligence import PatternLibrary
from prompt_optimizer.optimizer.orchestrator import PromptOptimizer
from prompt_optimizer.types import ImprovedPrompt, LibraryConfig

__all__ = [
    "Config",
    "ImprovedPrompt",
    "LibraryConfig",
    "PatternLibrary",
    "PromptOptimizer",
]
