"""
Model Catalog and Selector

Static table of the models codeforge can dispatch to (one per provider) and
a pure selection function that picks the single best model for a request.

Selection precedence (first match wins, ties broken by catalog order):
1. complex/enterprise work:
   laravel or fullstack -> architecture-capable model,
   otherwise -> general-purpose model with the largest context window
2. PHP/Laravel target -> first model whose capability tags list the framework
3. simple work or streaming -> fastest, then cheapest model
4. default -> general-purpose high-capability model
"""

from dataclasses import dataclass, field

from codeforge.models.contracts.generation import GenerationOptions
from codeforge.models.enums import CapabilityType, ComplexityTier, Provider, SpeedTier


@dataclass(frozen=True)
class ModelCapability:
    """Operation type a model is good at, and for which stacks."""

    type: CapabilityType
    frameworks: tuple[str, ...] = ()
    languages: tuple[str, ...] = ()


@dataclass(frozen=True)
class ModelDescriptor:
    """Static metadata about one selectable model."""

    id: str
    name: str
    provider: Provider
    vendor_model: str  # Model name sent on the wire
    capabilities: tuple[ModelCapability, ...] = field(default_factory=tuple)
    max_tokens: int = 8192  # Context window
    cost_per_token: float = 0.0
    speed: SpeedTier = SpeedTier.MEDIUM
    complexity: ComplexityTier = ComplexityTier.MEDIUM

    def has_capability(self, capability: CapabilityType | str) -> bool:
        return any(cap.type == capability for cap in self.capabilities)

    def supports(self, framework: str) -> bool:
        """True if any capability lists the framework or language."""
        name = framework.lower()
        return any(name in cap.frameworks or name in cap.languages for cap in self.capabilities)


MODEL_CATALOG: tuple[ModelDescriptor, ...] = (
    ModelDescriptor(
        id="gpt-4",
        name="GPT-4",
        provider=Provider.OPENAI,
        vendor_model="gpt-4",
        capabilities=(
            ModelCapability(
                type=CapabilityType.CODE_GENERATION,
                frameworks=("react", "vue", "angular", "laravel", "node"),
                languages=("typescript", "javascript", "php", "python"),
            ),
            ModelCapability(
                type=CapabilityType.CODE_REVIEW,
                frameworks=("react", "vue", "angular", "laravel"),
                languages=("typescript", "javascript", "php"),
            ),
            ModelCapability(
                type=CapabilityType.DEBUGGING,
                frameworks=("react", "vue", "angular", "laravel", "node"),
                languages=("typescript", "javascript", "php", "python"),
            ),
            ModelCapability(
                type=CapabilityType.OPTIMIZATION,
                frameworks=("react", "vue", "angular"),
                languages=("typescript", "javascript"),
            ),
        ),
        max_tokens=8192,
        cost_per_token=0.00003,
        speed=SpeedTier.MEDIUM,
        complexity=ComplexityTier.COMPLEX,
    ),
    ModelDescriptor(
        id="claude-3-sonnet",
        name="Claude 3 Sonnet",
        provider=Provider.ANTHROPIC,
        vendor_model="claude-3-sonnet-20240229",
        capabilities=(
            ModelCapability(
                type=CapabilityType.CODE_GENERATION,
                frameworks=("react", "vue", "laravel"),
                languages=("typescript", "javascript", "php"),
            ),
            ModelCapability(
                type=CapabilityType.ARCHITECTURE,
                frameworks=("react", "vue", "laravel"),
                languages=("typescript", "javascript", "php"),
            ),
        ),
        max_tokens=200000,
        cost_per_token=0.000015,
        speed=SpeedTier.MEDIUM,
        complexity=ComplexityTier.COMPLEX,
    ),
    ModelDescriptor(
        id="gemini-pro",
        name="Gemini Pro",
        provider=Provider.GOOGLE,
        vendor_model="gemini-pro",
        capabilities=(
            ModelCapability(
                type=CapabilityType.CODE_GENERATION,
                frameworks=("react", "vue", "angular"),
                languages=("typescript", "javascript"),
            ),
        ),
        max_tokens=30720,
        cost_per_token=0.0000005,
        speed=SpeedTier.FAST,
        complexity=ComplexityTier.MEDIUM,
    ),
    ModelDescriptor(
        id="mixtral-8x7b",
        name="Mixtral 8x7B",
        provider=Provider.GROQ,
        vendor_model="mixtral-8x7b-32768",
        capabilities=(
            ModelCapability(
                type=CapabilityType.CODE_GENERATION,
                frameworks=("react", "vue"),
                languages=("typescript", "javascript"),
            ),
        ),
        max_tokens=32768,
        cost_per_token=0.0000002,
        speed=SpeedTier.FAST,
        complexity=ComplexityTier.SIMPLE,
    ),
)

PHP_FRAMEWORKS = frozenset({"laravel", "php", "symfony"})

_SPEED_RANK = {SpeedTier.FAST: 0, SpeedTier.MEDIUM: 1, SpeedTier.SLOW: 2}


def _is_general_purpose(model: ModelDescriptor) -> bool:
    return model.has_capability(CapabilityType.CODE_REVIEW)


def _default_model(catalog: tuple[ModelDescriptor, ...]) -> ModelDescriptor:
    for model in catalog:
        if _is_general_purpose(model) and model.complexity == ComplexityTier.COMPLEX:
            return model
    return catalog[0]


def _is_php_target(framework: str, project_type: str) -> bool:
    return framework in PHP_FRAMEWORKS or "php" in project_type or "laravel" in project_type


def select_optimal_model(
    options: GenerationOptions,
    catalog: tuple[ModelDescriptor, ...] = MODEL_CATALOG,
) -> ModelDescriptor:
    """
    Pick the single best model for a generation request.

    Pure and total: always returns a catalog entry, and identical options
    always yield the same model.

    Args:
        options: Generation options for the request
        catalog: Model table to choose from (defaults to MODEL_CATALOG)

    Returns:
        Selected model descriptor
    """
    if not catalog:
        raise ValueError("Model catalog is empty")

    framework = options.framework.strip().lower()
    project_type = options.project_type.strip().lower()
    level = options.complexity.level

    # Rule 1: heavy work
    if level in (ComplexityTier.ENTERPRISE, ComplexityTier.COMPLEX):
        if framework == "laravel" or project_type == "fullstack":
            for model in catalog:
                if model.has_capability(CapabilityType.ARCHITECTURE):
                    return model
        general = [m for m in catalog if _is_general_purpose(m)]
        if general:
            # max() keeps the first of equal elements, preserving catalog order
            return max(general, key=lambda m: m.max_tokens)

    # Rule 2: PHP/Laravel targets
    if _is_php_target(framework, project_type):
        for model in catalog:
            if model.supports(framework):
                return model

    # Rule 3: fast iteration
    if level == ComplexityTier.SIMPLE or options.streaming:
        return min(catalog, key=lambda m: (_SPEED_RANK[m.speed], m.cost_per_token))

    # Rule 4: default
    return _default_model(catalog)


def get_available_models() -> list[ModelDescriptor]:
    return list(MODEL_CATALOG)


def get_model_by_id(model_id: str) -> ModelDescriptor | None:
    return next((m for m in MODEL_CATALOG if m.id == model_id), None)


def get_models_by_capability(capability: CapabilityType | str) -> list[ModelDescriptor]:
    return [m for m in MODEL_CATALOG if m.has_capability(capability)]


def get_models_by_provider(provider: Provider | str) -> list[ModelDescriptor]:
    return [m for m in MODEL_CATALOG if m.provider == provider]


def estimate_cost(model: ModelDescriptor, tokens: int) -> float:
    """Estimated USD cost of `tokens` tokens on `model`."""
    if tokens < 0:
        raise ValueError("tokens must be >= 0")
    return tokens * model.cost_per_token
