"""Built-in route providers and handler resolution.

Each provider owns the routes of one CLI domain. Handlers are not looked
up from global state: a :class:`HandlerResolver` is passed to every
provider when the application boots.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

from xaheen.routing.routes import CommandRoute

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

logger = logging.getLogger(__name__)


class HandlerNotFoundError(LookupError):
    """Raised when a route without an installed handler is invoked."""

    def __init__(self, domain: str, action: str) -> None:
        super().__init__(f"no handler installed for {domain}:{action}")
        self.domain = domain
        self.action = action


@dataclass(frozen=True)
class CommandInvocation:
    """What a handler receives: the resolved route and parsed arguments."""

    route: CommandRoute
    arguments: dict[str, str] = field(default_factory=dict)


class HandlerResolver(Protocol):
    def resolve(self, domain: str, action: str) -> Callable[[CommandInvocation], Any]: ...


class HandlerRegistry:
    """Explicit ``(domain, action) -> handler`` table.

    Resolving an unknown pair returns a stand-in that raises
    :class:`HandlerNotFoundError` when called, so routes can be built
    before every generator is installed.
    """

    def __init__(self) -> None:
        self._handlers: dict[tuple[str, str], Callable[[CommandInvocation], Any]] = {}

    def register(
        self,
        domain: str,
        action: str,
        handler: Callable[[CommandInvocation], Any],
    ) -> None:
        self._handlers[(domain, action)] = handler

    def has_handler(self, domain: str, action: str) -> bool:
        return (domain, action) in self._handlers

    def resolve(self, domain: str, action: str) -> Callable[[CommandInvocation], Any]:
        handler = self._handlers.get((domain, action))
        if handler is not None:
            return handler

        def _missing(invocation: CommandInvocation) -> Any:
            raise HandlerNotFoundError(domain, action)

        return _missing


@dataclass(frozen=True)
class RouteSpec:
    """Static description of one route, before a handler is attached."""

    pattern: str
    action: str
    description: str = ""
    legacy: dict[str, tuple[str, ...]] = field(default_factory=dict)
    examples: tuple[str, ...] = ()


class RouteProvider:
    """Routes of a single domain, with handlers from the injected resolver."""

    def __init__(self, domain: str, specs: Iterable[RouteSpec], resolver: HandlerResolver) -> None:
        self.domain = domain
        self._specs = tuple(specs)
        self._resolver = resolver

    def routes(self) -> list[CommandRoute]:
        return [
            CommandRoute(
                pattern=spec.pattern,
                domain=self.domain,
                action=spec.action,
                handler=self._resolver.resolve(self.domain, spec.action),
                legacy=dict(spec.legacy),
                description=spec.description,
                examples=spec.examples,
            )
            for spec in self._specs
        ]


# ---------------------------------------------------------------------------
# Built-in route table
# ---------------------------------------------------------------------------

BUILTIN_ROUTES: dict[str, tuple[RouteSpec, ...]] = {
    "project": (
        RouteSpec(
            "project create <name>", "create", "Create a new project",
            legacy={"xaheen": ("create",), "xala": ("init",)},
            examples=("xaheen project create my-app",),
        ),
        RouteSpec(
            "project validate", "validate", "Validate project structure and configuration",
            legacy={"xaheen": ("validate", "doctor")},
        ),
    ),
    "app": (
        RouteSpec("app create <name>", "create", "Create an app in a monorepo",
                  legacy={"xaheen": ("create-app",)}),
        RouteSpec("app list", "list", "List monorepo apps"),
        RouteSpec("app add <name>", "add", "Add an existing app to the monorepo"),
    ),
    "package": (
        RouteSpec("package create <name>", "create", "Create a shared package",
                  legacy={"xaheen": ("create-package",)}),
        RouteSpec("package list", "list", "List monorepo packages"),
        RouteSpec("package add <name>", "add", "Add an existing package to the monorepo"),
    ),
    "service": (
        RouteSpec("service add <service>", "add", "Add a service integration",
                  legacy={"xaheen": ("add",)}, examples=("xaheen service add auth",)),
        RouteSpec("service remove <service>", "remove", "Remove a service integration",
                  legacy={"xaheen": ("remove",)}),
        RouteSpec("service list", "list", "List available services",
                  legacy={"xaheen": ("bundle list",)}),
    ),
    "component": (
        RouteSpec("component generate <description>", "generate",
                  "Generate a component from a description",
                  legacy={"xala": ("generate component", "components generate")}),
        RouteSpec("component create <name>", "create", "Create a component",
                  legacy={"xala": ("create component",)}),
    ),
    "page": (
        RouteSpec("page generate <description>", "generate", "Generate a page from a description",
                  legacy={"xala": ("generate page", "pages generate")}),
        RouteSpec("page create <name>", "create", "Create a page",
                  legacy={"xala": ("create page",)}),
        RouteSpec("page list", "list", "List pages"),
    ),
    "model": (
        RouteSpec("model generate <name>", "generate", "Generate a data model",
                  legacy={"xaheen": ("generate-model",), "xala": ("model generate",)}),
        RouteSpec("model create <name>", "create", "Create a data model",
                  legacy={"xaheen": ("create-model",)}),
        RouteSpec("model scaffold <name>", "scaffold", "Scaffold model, controller and views"),
        RouteSpec("model migrate", "migrate", "Run model migrations"),
    ),
    "make": (
        RouteSpec("make:model <name>", "model", "Create a model class",
                  examples=("xaheen make:model User",)),
        RouteSpec("make:controller <name>", "controller", "Create a controller"),
        RouteSpec("make:service <name>", "service", "Create a service class"),
        RouteSpec("make:component <name>", "component", "Create a UI component",
                  examples=("xaheen make:component Button",)),
        RouteSpec("make:migration <name>", "migration", "Create a database migration"),
        RouteSpec("make:seeder <name>", "seeder", "Create a database seeder"),
        RouteSpec("make:factory <name>", "factory", "Create a model factory"),
        RouteSpec("make:crud <name>", "crud", "Create a full CRUD stack"),
        RouteSpec("make:analyze <filepath>", "analyze", "Analyze a source file"),
    ),
    "theme": (
        RouteSpec("theme create <name>", "create", "Create a theme",
                  legacy={"xala": ("themes create",)}),
        RouteSpec("theme list", "list", "List themes", legacy={"xala": ("themes list",)}),
    ),
    "template": (
        RouteSpec("template list", "list", "List templates"),
        RouteSpec("template create", "create", "Create a template"),
        RouteSpec("template extend <parent>", "extend", "Extend a parent template"),
        RouteSpec("template compose", "compose", "Compose templates"),
        RouteSpec("template init", "init", "Initialize templates in the project"),
        RouteSpec("template generate <name>", "generate", "Generate from a template"),
        RouteSpec("modernize [target]", "modernize", "Modernize legacy templates",
                  legacy={"xaheen": ("modernize-templates", "upgrade-templates")}),
    ),
    "ai": (
        RouteSpec("ai generate <prompt>", "generate", "Generate code with AI",
                  legacy={"xala": ("ai generate",)}),
        RouteSpec("ai code <prompt>", "code", "Write code from a prompt"),
        RouteSpec("ai service <description>", "service", "Generate a service with AI"),
        RouteSpec("ai fix-tests", "fix-tests", "Fix failing tests with AI"),
        RouteSpec("ai index", "index", "Index the codebase for AI context"),
    ),
    "mcp": (
        RouteSpec("mcp connect", "connect", "Connect to the MCP server"),
        RouteSpec("mcp generate <name>", "generate", "Generate through MCP"),
        RouteSpec("mcp list [platform]", "list", "List MCP components"),
        RouteSpec("mcp disconnect", "disconnect", "Disconnect from the MCP server"),
    ),
    "license": (
        RouteSpec("license activate <key>", "activate", "Activate a license key"),
        RouteSpec("license deactivate", "deactivate", "Deactivate the current license"),
        RouteSpec("license status", "status", "Show license status"),
        RouteSpec("license features", "features", "List licensed features"),
    ),
    "registry": (
        RouteSpec("registry add <components...>", "add", "Add components from the registry"),
        RouteSpec("registry list", "list", "List registry components"),
        RouteSpec("registry info <component>", "info", "Show registry component details"),
        RouteSpec("registry search <query>", "search", "Search the registry"),
        RouteSpec("registry build", "build", "Build the registry"),
        RouteSpec("registry serve", "serve", "Serve the registry locally"),
    ),
    "devops": (
        RouteSpec("devops docker", "docker", "Generate Docker configuration",
                  legacy={"xaheen": ("deploy docker",)}),
        RouteSpec("devops kubernetes", "kubernetes", "Generate Kubernetes manifests"),
        RouteSpec("devops helm", "helm", "Generate a Helm chart"),
        RouteSpec("devops terraform", "terraform", "Generate Terraform modules"),
    ),
    "security": (
        RouteSpec("security-audit", "audit", "Run a security audit",
                  legacy={"xaheen": ("audit",)}),
        RouteSpec("security-scan [project-path]", "scan", "Scan dependencies for vulnerabilities",
                  legacy={"xaheen": ("scan",)}),
        RouteSpec("license-compliance [project]", "license-compliance",
                  "Check dependency licenses",
                  legacy={"xaheen": ("license-scan", "license-check")}),
    ),
    "compliance": (
        RouteSpec("compliance-report", "report", "Generate a compliance report",
                  legacy={"xaheen": ("compliance",)}),
    ),
    "docs": (
        RouteSpec("docs generate [type]", "generate", "Generate documentation",
                  legacy={"xaheen": ("generate docs", "docs")}),
        RouteSpec("docs portal", "portal", "Build the documentation portal"),
        RouteSpec("docs sync", "sync", "Sync documentation with code"),
    ),
}


def builtin_providers(resolver: HandlerResolver) -> list[RouteProvider]:
    """One provider per built-in domain, sharing *resolver*."""
    return [RouteProvider(domain, specs, resolver) for domain, specs in BUILTIN_ROUTES.items()]


def collect_routes(providers: Iterable[RouteProvider]) -> dict[str, CommandRoute]:
    """Merge provider routes into a ``pattern -> route`` mapping."""
    routes: dict[str, CommandRoute] = {}
    for provider in providers:
        for route in provider.routes():
            if route.pattern in routes:
                logger.warning(
                    "Pattern %r from domain %s overrides domain %s",
                    route.pattern, route.domain, routes[route.pattern].domain,
                )
            routes[route.pattern] = route
    return routes
