"""Tests for individual patterns and the pattern contract."""

import pytest

from prompt_optimizer.patterns import DEFAULT_PATTERN_TYPES, default_patterns
from prompt_optimizer.patterns.base import check_intent_map, impact_for, mode_matches
from prompt_optimizer.patterns.conciseness_filter import ConcisenessFilter
from prompt_optimizer.patterns.context_precision import ContextPrecision
from prompt_optimizer.patterns.conversation_summarizer import VERIFY_NOTE, ConversationSummarizer
from prompt_optimizer.patterns.dependency_identifier import DependencyIdentifier
from prompt_optimizer.patterns.edge_case_identifier import EdgeCaseIdentifier
from prompt_optimizer.patterns.objective_clarifier import ObjectiveClarifier
from prompt_optimizer.patterns.output_format_enforcer import OutputFormatEnforcer
from prompt_optimizer.patterns.requirement_prioritizer import RequirementPrioritizer
from prompt_optimizer.patterns.step_decomposer import StepDecomposer
from prompt_optimizer.patterns.topic_coherence_analyzer import TopicCoherenceAnalyzer
from prompt_optimizer.patterns.validation_checklist_creator import ValidationChecklistCreator
from prompt_optimizer.types import ALL_INTENTS

IDEMPOTENCE_PROMPTS = (
    "Create a login page",
    "Please could you maybe help me create a login page if possible",
    "Build a React dashboard with user authentication, a payment API and a PostgreSQL "
    "database, then deploy it",
    "Write a PRD for a mobile app that lets customers track orders.\n"
    "Features:\n- order history\n- push notifications",
    "Make it better and fast. The API should be secure and scalable.",
    "Output: JSON list\n\nObjective: parse the uploaded CSV files",
    "Migrate the legacy billing service from Python 2 to Python 3 without downtime",
)

FORBIDDEN_TEMPLATE_WORDS = ("please", "maybe", "could you", "if possible")


def test_pattern_ids_are_unique():
    ids = [pattern.id for pattern in default_patterns()]

    assert len(ids) == len(set(ids)) == len(DEFAULT_PATTERN_TYPES)


@pytest.mark.parametrize("pattern", default_patterns(), ids=lambda p: p.id)
def test_pattern_metadata(pattern):
    assert pattern.name
    assert pattern.description
    assert 1 <= pattern.priority <= 10
    assert pattern.applicable_intents <= set(ALL_INTENTS)
    assert pattern.mode in ("fast", "deep", "both")


@pytest.mark.parametrize("pattern", default_patterns(), ids=lambda p: p.id)
def test_second_pass_is_a_no_op(pattern, make_context):
    """A pattern applied to its own output finds its marker and skips."""
    for intent in sorted(pattern.applicable_intents):
        for prompt in IDEMPOTENCE_PROMPTS:
            context = make_context(prompt, intent=intent, mode="deep")
            first = pattern.apply(prompt, context)
            if not first.applied:
                assert first.enhanced_prompt == prompt
                continue
            second = pattern.apply(first.enhanced_prompt, context)
            assert not second.applied, f"{pattern.id} re-applied for {intent}: {prompt!r}"
            assert second.enhanced_prompt == first.enhanced_prompt


@pytest.mark.parametrize("pattern", default_patterns(), ids=lambda p: p.id)
def test_rendered_text_has_no_filler(pattern, make_context):
    for intent in sorted(pattern.applicable_intents):
        for prompt in IDEMPOTENCE_PROMPTS[2:]:
            result = pattern.apply(prompt, make_context(prompt, intent=intent, mode="deep"))
            added = result.enhanced_prompt.lower().replace(prompt.lower(), "")
            for word in FORBIDDEN_TEMPLATE_WORDS:
                assert word not in added, f"{pattern.id} renders {word!r}"


def test_conciseness_filter_strips_pleasantries(make_context):
    prompt = "Please could you maybe help me create a login page if possible"
    result = ConcisenessFilter().apply(prompt, make_context(prompt))

    assert result.applied
    assert result.enhanced_prompt == "Help me create a login page"
    assert result.improvement.dimension == "efficiency"


def test_conciseness_filter_leaves_concise_prompt(make_context):
    result = ConcisenessFilter().apply("Create a login page", make_context("Create a login page"))

    assert not result.applied
    assert result.enhanced_prompt == "Create a login page"


def test_objective_clarifier_prepends_objective(make_context):
    result = ObjectiveClarifier().apply("Create a login page", make_context("Create a login page"))

    assert result.applied
    assert result.enhanced_prompt.startswith("# Objective\nCreate a login page")
    assert result.improvement.impact == "high"


def test_dependency_guard_short_circuits(make_context):
    prompt = "Plan the checkout rollout.\nDependencies:\n- API service"
    result = DependencyIdentifier().apply(prompt, make_context(prompt, "planning", "deep"))

    assert not result.applied
    assert result.enhanced_prompt == prompt


def test_dependency_identifier_groups_dependencies(make_context):
    prompt = "Plan a checkout flow with a payment API and analytics tracking"
    result = DependencyIdentifier().apply(prompt, make_context(prompt, "planning", "deep"))

    assert result.applied
    assert "### Dependencies" in result.enhanced_prompt
    assert "**Technical Dependencies:**" in result.enhanced_prompt
    assert "Payment provider integration" in result.enhanced_prompt


def test_custom_settings_cap_output(make_context):
    prompt = "Build a form that uploads files to the API"
    settings = {"edge-case-identifier": {"maxEdgeCases": 2}}
    result = EdgeCaseIdentifier().apply(prompt, make_context(prompt, settings=settings))

    assert result.enhanced_prompt.count("- **") == 2


def test_invalid_custom_settings_fall_back_to_defaults(make_context, caplog):
    prompt = "Build a form that uploads files to the API"
    settings = {"edge-case-identifier": {"maxEdgeCases": 100}}
    result = EdgeCaseIdentifier().apply(prompt, make_context(prompt, settings=settings))

    assert 2 < result.enhanced_prompt.count("- **") <= 8
    assert "Invalid settings for pattern edge-case-identifier" in caplog.text


def test_output_format_suggestions_respect_cap(make_context):
    prompt = "Create a login page"
    settings = {"output-format-enforcer": {"max_suggestions": 2}}
    result = OutputFormatEnforcer().apply(prompt, make_context(prompt, settings=settings))
    section = result.enhanced_prompt.split("Choose the output format:")[1]

    assert len([line for line in section.splitlines() if line.startswith("- ")]) == 2


def test_step_decomposer_judges_original_prompt(make_context):
    original = "Create a login page"
    grown = original + "\n\n## Notes\nand then also more text"
    result = StepDecomposer().apply(grown, make_context(original))

    assert not result.applied


def test_step_decomposer_numbers_steps(make_context):
    prompt = "Build a REST API endpoint for orders and then add pagination"
    result = StepDecomposer().apply(prompt, make_context(prompt))

    assert result.applied
    assert "### Implementation Steps" in result.enhanced_prompt
    assert "1. Define API contract (request/response)" in result.enhanced_prompt


def test_requirement_prioritizer_uses_feature_list(make_context):
    prompt = "Write a PRD for order tracking.\nFeatures:\n- order history\n- notifications"
    result = RequirementPrioritizer().apply(prompt, make_context(prompt, "prd-generation", "deep"))

    assert result.applied
    assert "> **Priority Framework:**" in result.enhanced_prompt
    assert "P0" in result.enhanced_prompt


def test_edge_cases_ignore_sections_added_earlier(make_context):
    original = "Fix the bug where the api returns 500 on empty input"
    grown = original + "\n\n### Prerequisites\n- Test configuration files present"
    result = EdgeCaseIdentifier().apply(grown, make_context(original, "debugging", "deep"))

    assert "Malicious files" not in result.enhanced_prompt


def test_checklist_triggers_ignore_sections_added_earlier(make_context):
    original = "Fix the bug where the api returns 500 on empty input"
    grown = original + "\n\n### Prerequisites\n- Test configuration files present"
    context = make_context(original, "debugging", "deep")
    result = ValidationChecklistCreator().apply(grown, context)

    assert "File uploads work for valid files" not in result.enhanced_prompt


def test_context_precision_lists_missing_context(make_context):
    prompt = "Write a function that parses dates"
    result = ContextPrecision().apply(prompt, make_context(prompt))

    assert result.applied
    assert "### Context Needed" in result.enhanced_prompt
    assert "What are the expected inputs and outputs?" in result.enhanced_prompt
    assert "Which file(s)" in result.enhanced_prompt


def test_context_precision_respects_cap(make_context):
    prompt = "Write a function that parses dates"
    settings = {"context-precision": {"maxContextGaps": 2}}
    result = ContextPrecision().apply(prompt, make_context(prompt, settings=settings))

    assert result.enhanced_prompt.count("_Suggestion:") == 2


def test_context_precision_skips_detailed_bug_report(make_context):
    prompt = (
        "Fix TypeError: x is undefined at line 4. Steps: open the page. "
        "Expected the list but got nothing."
    )
    result = ContextPrecision().apply(prompt, make_context(prompt, "debugging"))

    assert not result.applied


def test_context_precision_version_question_can_be_disabled(make_context):
    prompt = "Update the payment module to the latest version"
    default = ContextPrecision().apply(prompt, make_context(prompt))
    settings = {"context-precision": {"checkVersionInfo": False}}
    disabled = ContextPrecision().apply(prompt, make_context(prompt, settings=settings))

    assert "Which version" in default.enhanced_prompt
    assert "Which version" not in disabled.enhanced_prompt


def test_conversation_summarizer_extracts_requirements(make_context):
    prompt = (
        "We need a way to track team expenses. Users can upload receipts. "
        "I want monthly reports so that managers can approve budgets faster. "
        "It must not require a separate login."
    )
    result = ConversationSummarizer().apply(prompt, make_context(prompt, "summarization", "deep"))
    text = result.enhanced_prompt

    assert result.applied
    assert text.startswith("### Extracted Requirements")
    assert "**Goals:**\n- managers can approve budgets faster" in text
    assert "- upload receipts" in text
    assert "**Constraints:**\n- require a separate login" in text
    assert "Verify these" not in text
    assert text.endswith(prompt)


def test_conversation_summarizer_skips_plain_requests(make_context):
    prompt = "Summarize the meeting notes into key points"
    result = ConversationSummarizer().apply(prompt, make_context(prompt, "summarization", "deep"))

    assert not result.applied


def test_conversation_summarizer_flags_low_confidence(make_context):
    prompt = "What if we add dark mode? Also a compact layout."
    result = ConversationSummarizer().apply(prompt, make_context(prompt, "planning", "deep"))

    assert result.applied
    assert VERIFY_NOTE in result.enhanced_prompt


def test_topic_coherence_groups_topics(make_context):
    prompt = "The login page needs a new layout. Cache the dashboard queries to cut latency."
    result = TopicCoherenceAnalyzer().apply(prompt, make_context(prompt, "planning", "deep"))
    text = result.enhanced_prompt

    assert result.applied
    assert "1. **User Interface**" in text
    assert "2. **Authentication**" in text
    assert "3. **Performance**" in text
    assert "4. **Analytics**" in text
    assert "#### Performance\n- Cache the dashboard queries to cut latency" in text
    assert text.endswith(prompt)


def test_topic_coherence_skips_single_topic(make_context):
    prompt = "Summarize the release notes"
    result = TopicCoherenceAnalyzer().apply(prompt, make_context(prompt, "summarization", "deep"))

    assert not result.applied


def test_topic_coherence_respects_minimum_topics(make_context):
    prompt = "The login page needs a new layout. Cache the dashboard queries to cut latency."
    settings = {"topic-coherence-analyzer": {"min_topics_for_organization": 5}}
    context = make_context(prompt, "planning", "deep", settings=settings)

    assert not TopicCoherenceAnalyzer().apply(prompt, context).applied


def test_topic_coherence_reads_original_prompt(make_context):
    original = "The login page needs a new layout. Cache the dashboard queries to cut latency."
    grown = original + "\n\nAdd unit test coverage."
    result = TopicCoherenceAnalyzer().apply(grown, make_context(original, "planning", "deep"))

    assert result.applied
    assert "**Testing**" not in result.enhanced_prompt


def test_check_intent_map_rejects_incomplete_tables():
    with pytest.raises(ValueError, match="not exhaustive"):
        check_intent_map({"planning": ()}, "Incomplete")


def test_check_intent_map_rejects_unknown_intents():
    table = {intent: () for intent in ALL_INTENTS}
    table["poetry"] = ()

    with pytest.raises(ValueError, match="poetry"):
        check_intent_map(table, "Unknown")


@pytest.mark.parametrize(
    "count,impact", [(0, "low"), (1, "low"), (2, "medium"), (3, "medium"), (4, "high")]
)
def test_impact_for(count, impact):
    assert impact_for(count) == impact


def test_mode_matches():
    assert mode_matches("both", "fast")
    assert mode_matches("deep", "deep")
    assert not mode_matches("deep", "fast")
