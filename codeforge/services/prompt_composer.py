"""
Prompt Composer

Pure functions that turn generation options and free text into the system
and user instructions sent to every provider.

Framework and project-type blocks are looked up by exact (lower-cased) name.
Unknown values fall back to the default block instead of raising.
"""

from codeforge.models.contracts.generation import GenerationOptions

DEFAULT_FRAMEWORK_BLOCK = """WEB FRONTEND BEST PRACTICES:
- Build small, composable UI components with a single responsibility
- Keep state close to where it is used and lift it only when shared
- Use semantic HTML and progressive enhancement
- Separate data fetching from presentation
- Keep bundles small: lazy-load routes and heavy dependencies"""

FRAMEWORK_BLOCKS: dict[str, str] = {
    "react": """REACT BEST PRACTICES:
- React 18+ function components with hooks, no class components
- TypeScript with strict typing for props, state and API payloads
- Custom hooks for reusable stateful logic
- Memoize expensive computations with useMemo/useCallback where it matters
- Error boundaries around independently failing sections
- Tailwind CSS or CSS modules for styling""",
    "vue": """VUE BEST PRACTICES:
- Vue 3 Composition API with <script setup lang="ts">
- Composables for reusable stateful logic
- Pinia for shared state
- Typed props and emits via defineProps/defineEmits
- Scoped styles per single-file component""",
    "angular": """ANGULAR BEST PRACTICES:
- Standalone components and strict TypeScript
- Services with dependency injection for data access
- RxJS streams with async pipe; avoid manual subscriptions
- Reactive forms with typed form controls
- OnPush change detection for presentational components""",
    "laravel": """LARAVEL BEST PRACTICES:
- Laravel 10+ conventions: thin controllers, Form Requests for validation
- Eloquent models with explicit $fillable, casts and relationships
- Service classes for business logic, Resources for API responses
- Database migrations and seeders for every schema change
- Policies and gates for authorization, middleware for cross-cutting concerns
- Blade components or Inertia for views""",
    "node": """NODE.JS BEST PRACTICES:
- TypeScript with ES modules and strict compiler options
- Layered structure: routes, controllers, services, data access
- Centralized error-handling middleware and structured logging
- Input validation with a schema library at every boundary
- Configuration from environment variables, never hardcoded secrets""",
    "nextjs": """NEXT.JS BEST PRACTICES:
- App Router with server components by default, client components only when interactive
- Route handlers for API endpoints
- Data fetching on the server with explicit caching and revalidation
- next/image and next/font for asset optimization
- Metadata API for SEO""",
}

DEFAULT_PROJECT_TYPE_BLOCK = """PROFESSIONAL WEB APPLICATION REQUIREMENTS:
- Clear navigation and consistent layout
- Responsive design for mobile, tablet and desktop
- Forms with validation and helpful error messages
- Loading, empty and error states for every data view"""

PROJECT_TYPE_BLOCKS: dict[str, str] = {
    "landing-page": """LANDING PAGE REQUIREMENTS:
- Hero section with a clear value proposition and primary call to action
- Feature, testimonial and pricing sections
- Fast first paint and SEO-friendly markup
- Contact or signup form with validation""",
    "dashboard": """DASHBOARD REQUIREMENTS:
- Sidebar navigation and responsive grid layout
- Summary cards, charts and sortable, filterable data tables
- Date-range filtering and data refresh
- Role-aware visibility of sections""",
    "ecommerce": """E-COMMERCE REQUIREMENTS:
- Product catalog with search, filters and pagination
- Product detail pages, cart and checkout flow
- Order summary and payment integration points
- Inventory-aware add-to-cart and price formatting""",
    "blog": """BLOG REQUIREMENTS:
- Post listing with pagination, categories and tags
- Post detail with rich content rendering
- Author pages and RSS-friendly structure
- SEO metadata per post""",
    "saas": """SAAS APPLICATION REQUIREMENTS:
- Authentication, onboarding and account settings
- Multi-tenant data separation
- Subscription plans and billing integration points
- Usage limits and in-app notifications""",
    "fullstack": """FULL-STACK APPLICATION REQUIREMENTS:
- Frontend and backend layers with a typed API contract between them
- Database schema, migrations and data access layer
- Authentication and authorization across both layers
- Environment-based configuration and deployment readiness""",
    "api": """API SERVICE REQUIREMENTS:
- RESTful resource routes with consistent response envelopes
- Request validation and meaningful HTTP status codes
- Pagination, filtering and sorting for collection endpoints
- Authentication and rate limiting""",
}

CLOSING_GUIDELINES = """GENERAL GUIDELINES:
1. Clean code: readable names, small functions, no dead code
2. Type safety: explicit types for all public interfaces
3. Error handling: handle failures at boundaries and surface useful messages
4. Security: validate input, escape output, never hardcode secrets
5. Accessibility: semantic markup, ARIA labels and keyboard navigation (WCAG 2.1 AA)

Generate complete, working, production-ready code."""

USER_CHECKLIST = """DELIVERABLES:
1. File structure: list every file with its path before its contents
2. Components: complete implementations with all imports
3. Configuration: any config files the project needs to run
4. Styling: responsive styles for every component
5. Error and loading states: handle both for every async operation
6. Type definitions: interfaces/types for all data structures"""


def _framework_block(framework: str) -> str:
    return FRAMEWORK_BLOCKS.get(framework.strip().lower(), DEFAULT_FRAMEWORK_BLOCK)


def _project_type_block(project_type: str) -> str:
    return PROJECT_TYPE_BLOCKS.get(project_type.strip().lower(), DEFAULT_PROJECT_TYPE_BLOCK)


def _features_block(features: list[str]) -> str:
    if not features:
        return "REQUESTED FEATURES:\n- No specific features requested"
    bullets = "\n".join(f"- {feature}" for feature in features)
    return f"REQUESTED FEATURES:\n{bullets}"


def build_system_prompt(options: GenerationOptions) -> str:
    """
    Build the system instruction for a generation request.

    Sections, in order: preamble, framework block, project-type block,
    features block, closing guidelines.
    """
    complexity = options.complexity
    integrations = ", ".join(complexity.integrations) or "none"

    preamble = f"""You are an expert {options.framework} developer and architect building production-grade {options.project_type} applications.

TECHNICAL CONTEXT:
- Framework: {options.framework}
- Project Type: {options.project_type}
- Complexity Level: {complexity.level.value}
- Target Scale: {complexity.estimated_lines} lines of code
- Required Integrations: {integrations}"""

    return "\n\n".join([
        preamble,
        _framework_block(options.framework),
        _project_type_block(options.project_type),
        _features_block(options.features),
        CLOSING_GUIDELINES,
    ])


def build_user_prompt(free_text: str, options: GenerationOptions) -> str:
    """Embed the user's request together with the deliverables checklist."""
    return f"""Create a complete {options.framework} implementation for the following requirement:

USER REQUIREMENT:
{free_text}

IMPLEMENTATION SCOPE:
- Framework: {options.framework}
- Project Type: {options.project_type}
- Complexity: {options.complexity.level.value}

{USER_CHECKLIST}"""


def build_code_review_prompt(code: str, framework: str) -> str:
    return f"""Conduct a comprehensive code review of the following {framework} implementation.

REVIEW CRITERIA:
1. Architecture and design patterns (SOLID, separation of concerns)
2. {framework} best practices and type usage
3. Security (input validation, XSS, CSRF, data exposure)
4. Accessibility and responsiveness
5. Performance (rendering efficiency, bundle size, memory)
6. Maintainability and documentation

CODE TO REVIEW:
```{framework}
{code}
```

Provide specific recommendations with code examples and a priority for each issue."""


def build_optimization_prompt(code: str, framework: str) -> str:
    return f"""Optimize the following {framework} code for production deployment.

OPTIMIZATION TARGETS:
1. Runtime performance and memory usage
2. Code splitting and lazy loading
3. State management and unnecessary re-renders
4. Asset loading
5. Caching strategies

ORIGINAL CODE:
```{framework}
{code}
```

Provide the fully optimized code and explain each optimization and its trade-offs."""


def build_debug_prompt(code: str, error: str, framework: str) -> str:
    return f"""Debug and fix the following {framework} code producing this error:

ERROR DETAILS:
{error}

PROBLEMATIC CODE:
```{framework}
{code}
```

Provide:
- The exact root cause
- The complete corrected code
- An explanation of the fix
- How to prevent similar issues"""


def build_architecture_prompt(requirements: str, options: GenerationOptions) -> str:
    complexity = options.complexity
    integrations = ", ".join(complexity.integrations) or "none"
    features = ", ".join(options.features) or "none"

    return f"""Design a comprehensive architecture for a {options.framework} {options.project_type} application:

REQUIREMENTS:
{requirements}

ARCHITECTURE SCOPE:
- Complexity Level: {complexity.level.value}
- Scale: {complexity.estimated_lines} lines of code
- Integrations: {integrations}
- Key Features: {features}

Cover application structure, data layer, UI architecture, performance,
security and deployment. Provide an implementation roadmap and a testing strategy."""
