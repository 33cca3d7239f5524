"""
Fallback Generator

Deterministic, network-free code skeletons substituted when a provider call
fails. Output is plausible but not AI-generated; callers that need to tell
the two apart should check GenerationMetadata.simulated or the
"(Simulated)" model label on streaming events.
"""

import re
from dataclasses import dataclass

from codeforge.services.model_catalog import PHP_FRAMEWORKS

EXCERPT_LENGTH = 100
SIMULATED_LABEL_SUFFIX = " (Simulated)"

STAGE_NAMES = (
    "Analyzing requirements",
    "Planning architecture",
    "Scaffolding project structure",
    "Generating core logic",
    "Building interface",
    "Adding error handling",
    "Writing tests",
    "Complete",
)

# First stage that appends a code fragment
FIRST_FRAGMENT_STAGE = 2


@dataclass(frozen=True)
class SimulatedStage:
    """One step of the simulated streaming sequence."""

    name: str
    progress: float
    fragment: str = ""


def prompt_excerpt(prompt_text: str) -> str:
    """First 100 characters of the prompt with whitespace collapsed."""
    return re.sub(r"\s+", " ", prompt_text).strip()[:EXCERPT_LENGTH]


def _branch(framework: str) -> str:
    name = framework.strip().lower()
    if name in PHP_FRAMEWORKS:
        return "php"
    if name == "react":
        return "react"
    return "generic"


def _class_name(project_type: str) -> str:
    words = re.findall(r"[A-Za-z0-9]+", project_type)
    return "".join(word.capitalize() for word in words) or "App"


def _php_skeleton(project_type: str, excerpt: str) -> str:
    name = _class_name(project_type)
    return f"""<?php

namespace App\\Http\\Controllers;

use Illuminate\\Http\\JsonResponse;
use Illuminate\\Http\\Request;

/**
 * {project_type} controller
 *
 * Requirement: {excerpt}
 */
class {name}Controller extends Controller
{{
    public function index(): JsonResponse
    {{
        return response()->json(['data' => []]);
    }}

    public function store(Request $request): JsonResponse
    {{
        $validated = $request->validate([
            'name' => 'required|string|max:255',
        ]);

        return response()->json(['data' => $validated], 201);
    }}

    public function show(int $id): JsonResponse
    {{
        return response()->json(['data' => ['id' => $id]]);
    }}
}}
"""


def _react_skeleton(project_type: str, excerpt: str) -> str:
    name = _class_name(project_type)
    return f"""import React, {{ useEffect, useState }} from 'react';

// {project_type}: {excerpt}

interface {name}Props {{
  title?: string;
}}

export const {name}: React.FC<{name}Props> = ({{ title = '{project_type}' }}) => {{
  const [loading, setLoading] = useState(true);
  const [error, setError] = useState<string | null>(null);

  useEffect(() => {{
    setLoading(false);
  }}, []);

  if (loading) return <div role="status">Loading...</div>;
  if (error) return <div role="alert">{{error}}</div>;

  return (
    <main className="container mx-auto p-4">
      <h1 className="text-2xl font-bold">{{title}}</h1>
    </main>
  );
}};

export default {name};
"""


def _generic_skeleton(framework: str, project_type: str, excerpt: str) -> str:
    return f"""// {framework} {project_type}
// Requirement: {excerpt}

export function main() {{
  console.log('{project_type} starting');
}}

main();
"""


def synthesize(framework: str, project_type: str, prompt_text: str) -> str:
    """
    Build a fixed code skeleton for the framework.

    Pure and total: never raises, no I/O.
    """
    excerpt = prompt_excerpt(prompt_text)
    branch = _branch(framework)
    if branch == "php":
        return _php_skeleton(project_type, excerpt)
    if branch == "react":
        return _react_skeleton(project_type, excerpt)
    return _generic_skeleton(framework, project_type, excerpt)


_FRAGMENTS: dict[str, tuple[str, ...]] = {
    "php": (
        "<?php\n\nnamespace App\\Http\\Controllers;\n\n",
        "use Illuminate\\Http\\Request;\n\n",
        "class {name}Controller extends Controller\n{{\n",
        "    public function index()\n    {{\n        return response()->json(['data' => []]);\n    }}\n",
        "\n    // Requirement: {excerpt}\n",
        "}}\n",
    ),
    "react": (
        "import React, {{ useState }} from 'react';\n\n",
        "interface {name}Props {{\n  title?: string;\n}}\n\n",
        "export const {name}: React.FC<{name}Props> = ({{ title }}) => {{\n",
        "  const [loading, setLoading] = useState(false);\n",
        "  // {excerpt}\n  return <main>{{title}}</main>;\n",
        "}};\n\nexport default {name};\n",
    ),
    "generic": (
        "// {framework} {project_type}\n",
        "// Requirement: {excerpt}\n\n",
        "export function main() {{\n",
        "  console.log('{project_type} starting');\n",
        "}}\n\n",
        "main();\n",
    ),
}


def simulated_stages(framework: str, project_type: str, prompt_text: str) -> list[SimulatedStage]:
    """
    Fixed 8-stage plan for the simulated streaming fallback.

    Progress is 12.5 * (i + 1); stages from the third on each carry one
    framework-specific code fragment.
    """
    branch = _branch(framework)
    values = {
        "name": _class_name(project_type),
        "excerpt": prompt_excerpt(prompt_text),
        "framework": framework,
        "project_type": project_type,
    }
    fragments = [fragment.format(**values) for fragment in _FRAGMENTS[branch]]

    stages = []
    for i, stage_name in enumerate(STAGE_NAMES):
        fragment = fragments[i - FIRST_FRAGMENT_STAGE] if i >= FIRST_FRAGMENT_STAGE else ""
        stages.append(SimulatedStage(name=stage_name, progress=12.5 * (i + 1), fragment=fragment))
    return stages
