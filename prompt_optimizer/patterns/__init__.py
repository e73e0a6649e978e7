"""Built-in prompt transformation patterns."""

from prompt_optimizer.patterns.actionability_enhancer import ActionabilityEnhancer
from prompt_optimizer.patterns.alternative_phrasing_generator import AlternativePhrasingGenerator
from prompt_optimizer.patterns.ambiguity_detector import AmbiguityDetector
from prompt_optimizer.patterns.assumption_explicitizer import AssumptionExplicitizer
from prompt_optimizer.patterns.base import BasePattern, Pattern, PatternSettings
from prompt_optimizer.patterns.completeness_validator import CompletenessValidator
from prompt_optimizer.patterns.conciseness_filter import ConcisenessFilter
from prompt_optimizer.patterns.context_precision import ContextPrecision
from prompt_optimizer.patterns.conversation_summarizer import ConversationSummarizer
from prompt_optimizer.patterns.dependency_identifier import DependencyIdentifier
from prompt_optimizer.patterns.domain_context_enricher import DomainContextEnricher
from prompt_optimizer.patterns.edge_case_identifier import EdgeCaseIdentifier
from prompt_optimizer.patterns.error_tolerance_enhancer import ErrorToleranceEnhancer
from prompt_optimizer.patterns.implicit_requirement_extractor import ImplicitRequirementExtractor
from prompt_optimizer.patterns.objective_clarifier import ObjectiveClarifier
from prompt_optimizer.patterns.output_format_enforcer import OutputFormatEnforcer
from prompt_optimizer.patterns.prd_structure_enforcer import PRDStructureEnforcer
from prompt_optimizer.patterns.prerequisite_identifier import PrerequisiteIdentifier
from prompt_optimizer.patterns.requirement_prioritizer import RequirementPrioritizer
from prompt_optimizer.patterns.scope_definer import ScopeDefiner
from prompt_optimizer.patterns.step_decomposer import StepDecomposer
from prompt_optimizer.patterns.structure_organizer import StructureOrganizer
from prompt_optimizer.patterns.success_criteria_enforcer import SuccessCriteriaEnforcer
from prompt_optimizer.patterns.success_metrics_enforcer import SuccessMetricsEnforcer
from prompt_optimizer.patterns.technical_context_enricher import TechnicalContextEnricher
from prompt_optimizer.patterns.topic_coherence_analyzer import TopicCoherenceAnalyzer
from prompt_optimizer.patterns.user_persona_enricher import UserPersonaEnricher
from prompt_optimizer.patterns.validation_checklist_creator import ValidationChecklistCreator

# Registration order breaks priority ties
DEFAULT_PATTERN_TYPES: tuple[type[BasePattern], ...] = (
    ConcisenessFilter,
    ObjectiveClarifier,
    TechnicalContextEnricher,
    StructureOrganizer,
    CompletenessValidator,
    ActionabilityEnhancer,
    AmbiguityDetector,
    EdgeCaseIdentifier,
    DependencyIdentifier,
    SuccessMetricsEnforcer,
    SuccessCriteriaEnforcer,
    ValidationChecklistCreator,
    StepDecomposer,
    ScopeDefiner,
    AlternativePhrasingGenerator,
    OutputFormatEnforcer,
    ImplicitRequirementExtractor,
    RequirementPrioritizer,
    AssumptionExplicitizer,
    ErrorToleranceEnhancer,
    PrerequisiteIdentifier,
    DomainContextEnricher,
    UserPersonaEnricher,
    PRDStructureEnforcer,
    ContextPrecision,
    ConversationSummarizer,
    TopicCoherenceAnalyzer,
)


def default_patterns() -> list[BasePattern]:
    """Fresh instances of every built-in pattern in registration order."""
    return [pattern_type() for pattern_type in DEFAULT_PATTERN_TYPES]


__all__ = [
    "BasePattern",
    "DEFAULT_PATTERN_TYPES",
    "Pattern",
    "PatternSettings",
    "default_patterns",
]
