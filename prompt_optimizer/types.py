"""Data types and models for the prompt intelligence pipeline."""

from typing import Any, Literal, get_args

from pydantic import BaseModel, Field

Intent = Literal[
    "code-generation",
    "planning",
    "refinement",
    "debugging",
    "documentation",
    "testing",
    "migration",
    "security-review",
    "summarization",
    "prd-generation",
]
ALL_INTENTS: tuple[str, ...] = get_args(Intent)

Mode = Literal["fast", "deep"]
PatternMode = Literal["fast", "deep", "both"]
Impact = Literal["low", "medium", "high"]
Dimension = Literal["clarity", "efficiency", "structure", "completeness", "actionability"]
Rating = Literal["excellent", "good", "needs-improvement", "poor"]


class IntentCharacteristics(BaseModel):
    """Structural traits of a prompt observed during intent classification."""

    has_code_context: bool = Field(default=False, description="Code snippets or code-like syntax")
    has_technical_terms: bool = Field(default=False, description="Mentions APIs, databases, etc.")
    is_open_ended: bool = Field(default=False, description="Phrased as a question or vague ask")
    needs_structure: bool = Field(
        default=False, description="Lacks at least two of objective, requirements, constraints"
    )

    model_config = {"frozen": True}


class IntentAnalysis(BaseModel):
    """Result of intent classification."""

    primary_intent: Intent = Field(description="Winning intent label")
    confidence: int = Field(ge=0, le=100, description="Bounded signal-strength percentage")
    characteristics: IntentCharacteristics = Field(default_factory=IntentCharacteristics)
    suggested_mode: Mode | None = Field(default=None, description="Mode the prompt seems to need")
    scores: dict[str, int] = Field(
        default_factory=dict, description="Raw keyword vote per intent"
    )

    model_config = {"frozen": True}


class PatternContext(BaseModel):
    """Read-only snapshot handed to every pattern invoked in one run."""

    mode: Mode = Field(description="Active analysis mode")
    original_prompt: str = Field(description="The untouched input prompt")
    intent: IntentAnalysis = Field(description="Intent classification of the original prompt")
    pattern_settings: dict[str, dict[str, Any]] = Field(
        default_factory=dict, description="Custom settings keyed by pattern id"
    )

    model_config = {"frozen": True}


class Improvement(BaseModel):
    """What a single pattern changed."""

    dimension: Dimension
    description: str
    impact: Impact


class PatternResult(BaseModel):
    """Outcome of applying one pattern to one prompt."""

    enhanced_prompt: str
    improvement: Improvement
    applied: bool


class ConcisenessDetails(BaseModel):
    """Evidence behind the conciseness score."""

    pleasantries_count: int = 0
    verbosity_count: int = 0
    signal_to_noise: float = Field(default=0.0, ge=0.0, le=1.0)
    issues: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)


class LogicDetails(BaseModel):
    """Evidence behind the logic score."""

    has_coherent_flow: bool = False
    suggested_order: list[str] = Field(default_factory=list)
    issues: list[str] = Field(default_factory=list)


class ExplicitnessDetails(BaseModel):
    """The five presence checks that make up explicitness."""

    has_persona: bool = False
    has_output_format: bool = False
    has_tone_style: bool = False
    has_success_criteria: bool = False
    has_examples: bool = False
    missing: list[str] = Field(default_factory=list)


class AdaptivenessDetails(BaseModel):
    """Deep-mode evidence for alternative approaches."""

    alternative_phrasings: list[str] = Field(default_factory=list)
    alternative_structures: list[str] = Field(default_factory=list)


class ReflectivenessDetails(BaseModel):
    """Deep-mode evidence for self-review and verification."""

    validation_checklist: list[str] = Field(default_factory=list)
    edge_cases: list[str] = Field(default_factory=list)
    potential_issues: list[str] = Field(default_factory=list)


class QualityScore(BaseModel):
    """CLEAR quality scores for a prompt, each bounded to 0-100."""

    mode: Mode = Field(default="fast", description="Mode the prompt was scored in")
    conciseness: int = Field(ge=0, le=100, description="Signal without noise")
    logic: int = Field(ge=0, le=100, description="Coherent sequencing, no conflicting fragments")
    explicitness: int = Field(ge=0, le=100, description="Persona, format, tone, criteria, examples")
    adaptiveness: int | None = Field(
        default=None, ge=0, le=100, description="Alternative-approach language (deep only)"
    )
    reflectiveness: int | None = Field(
        default=None, ge=0, le=100, description="Self-review language (deep only)"
    )
    overall: int = Field(ge=0, le=100, description="Weighted combination of the dimensions")
    rating: Rating = Field(description="Threshold band on overall")

    conciseness_details: ConcisenessDetails = Field(default_factory=ConcisenessDetails)
    logic_details: LogicDetails = Field(default_factory=LogicDetails)
    explicitness_details: ExplicitnessDetails = Field(default_factory=ExplicitnessDetails)
    adaptiveness_details: AdaptivenessDetails | None = None
    reflectiveness_details: ReflectivenessDetails | None = None

    def dimensions(self) -> dict[str, int]:
        """Return the scored dimensions as a name -> score mapping."""
        scores = {
            "conciseness": self.conciseness,
            "logic": self.logic,
            "explicitness": self.explicitness,
        }
        if self.adaptiveness is not None:
            scores["adaptiveness"] = self.adaptiveness
        if self.reflectiveness is not None:
            scores["reflectiveness"] = self.reflectiveness
        return scores


class TriageThresholds(BaseModel):
    """Cutoffs used to escalate a prompt to deep analysis."""

    conciseness_min: int = Field(default=60, ge=0, le=100)
    logic_min: int = Field(default=60, ge=0, le=100)
    explicitness_min: int = Field(default=50, ge=0, le=100)
    secondary_indicator_threshold: int = Field(
        default=2, ge=1, description="Secondary indicators needed to escalate on their own"
    )
    min_word_count: int = Field(
        default=8, ge=1, description="Prompts shorter than this count as very low word count"
    )


class TriageResult(BaseModel):
    """Whether fast heuristics suffice or deep analysis should run."""

    needs_deep_analysis: bool
    reasons: list[str] = Field(default_factory=list)
    secondary_indicators: list[str] = Field(default_factory=list)


class LibraryConfig(BaseModel):
    """Pattern library configuration, treated as an immutable value."""

    disabled: tuple[str, ...] = Field(default=(), description="Pattern ids to exclude")
    priority_overrides: dict[str, int] = Field(
        default_factory=dict,
        alias="priorityOverrides",
        description="Pattern id -> priority; values outside 1-10 are ignored",
    )
    custom_settings: dict[str, dict[str, Any]] = Field(
        default_factory=dict,
        alias="customSettings",
        description="Pattern id -> settings overrides",
    )

    model_config = {"frozen": True, "populate_by_name": True}

    @classmethod
    def from_mapping(cls, data: dict[str, Any] | None) -> "LibraryConfig":
        """Build from either ``{"patterns": {...}}`` or the bare patterns mapping."""
        if not data:
            return cls()
        if "patterns" in data and isinstance(data["patterns"], dict):
            data = data["patterns"]
        return cls.model_validate(data)


class PromptAnalysis(BaseModel):
    """Structured report produced alongside the improved prompt."""

    strengths: list[str] = Field(default_factory=list)
    gaps: list[str] = Field(default_factory=list)
    ambiguities: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)


class AppliedPattern(BaseModel):
    """Summary of a pattern that changed the prompt."""

    id: str
    name: str
    dimension: Dimension
    description: str
    impact: Impact


class ImprovedPrompt(BaseModel):
    """Final result of one improve() call."""

    original: str = Field(description="Prompt as received")
    improved: str = Field(description="Prompt after the pattern pipeline")
    mode: Mode
    intent: IntentAnalysis
    analysis: PromptAnalysis
    triage_result: TriageResult
    clear_scores: QualityScore | None = Field(
        default=None, description="CLEAR scores of the original prompt (deep mode only)"
    )
    improvements: list[Improvement] = Field(default_factory=list)
    applied_patterns: list[AppliedPattern] = Field(default_factory=list)
    failed_patterns: list[str] = Field(
        default_factory=list, description="Ids of patterns that raised during apply"
    )
    recommendation: str | None = None
