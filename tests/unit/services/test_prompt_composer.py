"""
Unit tests for the Prompt Composer.
"""

import itertools

import pytest

from codeforge.models.contracts.generation import GenerationOptions, ProjectComplexity
from codeforge.models.enums import ComplexityTier
from codeforge.services.prompt_composer import (
    CLOSING_GUIDELINES,
    DEFAULT_FRAMEWORK_BLOCK,
    DEFAULT_PROJECT_TYPE_BLOCK,
    FRAMEWORK_BLOCKS,
    PROJECT_TYPE_BLOCKS,
    build_architecture_prompt,
    build_code_review_prompt,
    build_debug_prompt,
    build_optimization_prompt,
    build_system_prompt,
    build_user_prompt,
)


class TestBuildSystemPrompt:
    """Tests for build_system_prompt."""

    def test_includes_framework_block(self, build_options):
        """Test the framework-specific block is included."""
        prompt = build_system_prompt(build_options("laravel", "api"))

        assert FRAMEWORK_BLOCKS["laravel"] in prompt
        assert PROJECT_TYPE_BLOCKS["api"] in prompt

    def test_unknown_framework_uses_default_block(self, build_options):
        """Test unknown frameworks and project types fall back to defaults."""
        prompt = build_system_prompt(build_options("svelte", "kiosk"))

        assert DEFAULT_FRAMEWORK_BLOCK in prompt
        assert DEFAULT_PROJECT_TYPE_BLOCK in prompt
        assert "svelte" in prompt

    def test_section_order(self, build_options):
        """Test sections appear as preamble, framework, project type, features, closing."""
        prompt = build_system_prompt(build_options("react", "dashboard", features=["Charts"]))

        positions = [
            prompt.index("TECHNICAL CONTEXT"),
            prompt.index(FRAMEWORK_BLOCKS["react"]),
            prompt.index(PROJECT_TYPE_BLOCKS["dashboard"]),
            prompt.index("- Charts"),
            prompt.index(CLOSING_GUIDELINES),
        ]
        assert positions == sorted(positions)

    def test_no_features_placeholder(self, build_options):
        """Test an empty feature list renders a placeholder line."""
        prompt = build_system_prompt(build_options(features=[]))

        assert "- No specific features requested" in prompt

    def test_interpolates_complexity(self):
        """Test complexity level, size and integrations are interpolated."""
        options = GenerationOptions(
            framework="vue",
            project_type="ecommerce",
            complexity=ProjectComplexity(
                level=ComplexityTier.COMPLEX,
                estimated_lines=12000,
                integrations=["stripe", "algolia"],
            ),
        )

        prompt = build_system_prompt(options)

        assert "Complexity Level: complex" in prompt
        assert "12000 lines" in prompt
        assert "stripe, algolia" in prompt

    def test_case_insensitive_lookup(self, build_options):
        """Test block lookup ignores case."""
        assert FRAMEWORK_BLOCKS["react"] in build_system_prompt(build_options("React"))

    def test_deterministic(self, build_options):
        """Test identical options produce identical prompts."""
        options = build_options()

        assert build_system_prompt(options) == build_system_prompt(options)


class TestPromptMatrix:
    """Tests covering every known framework and project type together."""

    @pytest.mark.parametrize(
        "framework,project_type",
        list(itertools.product(FRAMEWORK_BLOCKS, PROJECT_TYPE_BLOCKS)),
    )
    def test_every_combination_composes(self, build_options, framework, project_type):
        """Test both prompts are built and name the framework for each pair."""
        options = build_options(framework, project_type)

        system_prompt = build_system_prompt(options)
        user_prompt = build_user_prompt("Build it", options)

        assert system_prompt.strip()
        assert user_prompt.strip()
        assert framework in system_prompt
        assert framework in user_prompt
        assert FRAMEWORK_BLOCKS[framework] in system_prompt
        assert PROJECT_TYPE_BLOCKS[project_type] in system_prompt
        assert CLOSING_GUIDELINES in system_prompt


class TestBuildUserPrompt:
    """Tests for build_user_prompt."""

    def test_embeds_free_text_and_checklist(self, build_options):
        """Test the user requirement and deliverables checklist are present."""
        prompt = build_user_prompt("A todo app with tags", build_options("vue", "saas"))

        assert "A todo app with tags" in prompt
        assert "vue" in prompt
        for item in ("File structure", "Components", "Configuration", "Styling", "Type definitions"):
            assert item in prompt

    def test_empty_free_text(self, build_options):
        """Test empty input still produces a prompt."""
        assert "react" in build_user_prompt("", build_options())


class TestTaskPrompts:
    """Tests for review, optimization, debug and architecture prompts."""

    @pytest.mark.parametrize(
        "builder",
        [build_code_review_prompt, build_optimization_prompt],
    )
    def test_code_prompts_embed_code_and_framework(self, builder):
        """Test review and optimization prompts fence the code with the framework."""
        prompt = builder("const x = 1;", "react")

        assert "```react\nconst x = 1;\n```" in prompt

    def test_debug_prompt_includes_error(self):
        """Test the debug prompt includes the error details."""
        prompt = build_debug_prompt("x()", "TypeError: x is not a function", "node")

        assert "TypeError: x is not a function" in prompt
        assert "node" in prompt

    def test_architecture_prompt(self, build_options):
        """Test the architecture prompt lists requirements and features."""
        options = build_options("laravel", "saas", features=["Billing", "Teams"])

        prompt = build_architecture_prompt("Multi-tenant CRM", options)

        assert "Multi-tenant CRM" in prompt
        assert "Billing, Teams" in prompt
        assert "laravel saas" in prompt
