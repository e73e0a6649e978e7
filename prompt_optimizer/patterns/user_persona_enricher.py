"""Adds a target-user section to product and planning prompts."""

from prompt_optimizer.intelligence.text_utils import has_any
from prompt_optimizer.patterns.base import BasePattern, PatternSettings, append_section
from prompt_optimizer.types import PatternContext, PatternResult

USER_CONTEXT = (
    "user persona",
    "target user",
    "end user",
    "user profile",
    "audience",
    "stakeholder",
    "as a user",
    "users can",
    "users will",
    "for users",
    "customer",
    "developer",
    "admin",
    "target audience",
)

FEATURE_WORDS = (
    "feature",
    "build",
    "create",
    "implement",
    "functionality",
    "should",
    "must",
    "requirement",
)

# First matching row names the primary user
USER_TYPES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("api", "sdk", "library"), "Developers integrating with the system"),
    (("admin", "manage", "dashboard"), "Administrators managing the system"),
    (("e-commerce", "shop", "buy"), "Customers making purchases"),
    (("content", "blog", "cms"), "Content creators and editors"),
    (("mobile", "app"), "Mobile app users"),
)
UNKNOWN_USER = "[Define primary user type]"


class UserPersonaSettings(PatternSettings):
    infer_user_type: bool = True


class UserPersonaEnricher(BasePattern):
    """Appends ``### Target Users`` when a feature request names no audience.

    Impact is always medium when applied.
    """

    id = "user-persona-enricher"
    name = "User Persona Enricher"
    description = "Adds missing user context and personas"
    applicable_intents = frozenset({"prd-generation", "planning"})
    mode = "deep"
    priority = 6
    dimension = "completeness"
    settings_model = UserPersonaSettings

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        if has_any(prompt, USER_CONTEXT):
            return self.unchanged(prompt, "User context already present")
        if not has_any(prompt, FEATURE_WORDS):
            return self.unchanged(prompt, "Content does not require user persona")

        user = infer_user_type(prompt) if self.settings(context).infer_user_type else UNKNOWN_USER
        section = "\n".join(
            [
                "### Target Users",
                f"**Primary User:** {user}",
                "- Goals: [What they want to achieve]",
                "- Pain Points: [Current frustrations]",
                "- Context: [When and how they will use this]",
            ]
        )
        return self.changed(
            prompt,
            append_section(prompt, section),
            "Added user persona context (who will use this)",
            "medium",
        )


def infer_user_type(prompt: str) -> str:
    for keywords, user in USER_TYPES:
        if has_any(prompt, keywords):
            return user
    return UNKNOWN_USER
