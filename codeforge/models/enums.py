"""
Enumeration types used across the generation core.
"""

from enum import Enum


class Provider(str, Enum):
    """External LLM providers (closed set; each has exactly one adapter)"""
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GOOGLE = "google"
    GROQ = "groq"


class SpeedTier(str, Enum):
    """Relative response speed of a model"""
    FAST = "fast"
    MEDIUM = "medium"
    SLOW = "slow"


class ComplexityTier(str, Enum):
    """Complexity a model handles well, and a request's complexity level"""
    SIMPLE = "simple"
    MEDIUM = "medium"
    COMPLEX = "complex"
    ENTERPRISE = "enterprise"  # Request level only; no model is tagged enterprise


class CapabilityType(str, Enum):
    """Operation types a model is tagged for"""
    CODE_GENERATION = "code-generation"
    CODE_REVIEW = "code-review"
    ARCHITECTURE = "architecture"
    DEBUGGING = "debugging"
    OPTIMIZATION = "optimization"


class FileKind(str, Enum):
    """Kind of a generated file"""
    COMPONENT = "component"
    HOOK = "hook"
    SERVICE = "service"
    CONFIG = "config"
    TEST = "test"
