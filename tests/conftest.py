"""
Shared test fixtures for clidoc tests.

This module provides command trees used across all test types:
- A minimal application with nothing but a name
- A small "greet" application with one flag and one command
- A full application exercising categories, hidden entries, nesting,
  usage text, environment variables, authors and copyright
- README files carrying the default delimiter lines
"""

import pytest

from clidoc.models import Author, Command, Flag, FlagType

# ============================================================================
# COMMAND TREE FIXTURES
# ============================================================================


@pytest.fixture
def minimal_app():
    """Application with only a name."""
    return Command(name="app")


@pytest.fixture
def greet_app():
    """Small application with one value flag and one command.

    Renders to short, fully predictable documents.
    """
    return Command(
        name="greet",
        usage="say hello",
        flags=[
            Flag(names=["name", "n"], default="world", usage="who to greet"),
        ],
        commands=[Command(name="wave", usage="wave hand")],
    )


@pytest.fixture
def full_app():
    """Application exercising every documented field.

    Tree:
        deploy
        ├── up (alias u) with --force and a categorized --region
        │   └── status
        ├── secret (hidden)
        │   └── rotate
        └── down
    """
    status = Command(name="status", usage="Show rollout status")
    up = Command(
        name="up",
        aliases=["u"],
        usage="Bring the stack up",
        usage_text="deploy up [options] STACK",
        args_usage="STACK",
        flags=[
            Flag(names=["force", "f"], type=FlagType.BOOL, usage="Skip confirmation"),
            Flag(
                names=["region"],
                default="westus",
                usage="Target region",
                category="Placement",
                env_vars=["DEPLOY_REGION"],
            ),
            Flag(names=["debug-token"], usage="Internal use", hidden=True),
        ],
        commands=[status],
    )
    secret = Command(
        name="secret",
        usage="Manage secrets",
        hidden=True,
        commands=[Command(name="rotate", usage="Rotate all secrets")],
    )
    down = Command(name="down", usage="Tear the stack down")

    return Command(
        name="deploy",
        usage="Deploy stacks",
        usage_text="First line\nSecond line",
        description="Deploys application stacks to the cloud.",
        flags=[
            Flag(
                names=["config", "c"],
                type=FlagType.PATH,
                default="deploy.toml",
                usage="Config file",
                env_vars=["DEPLOY_CONFIG", "DEPLOY_CFG"],
            ),
            Flag(names=["verbose", "v"], type=FlagType.BOOL, usage="Verbose output"),
            Flag(names=["token"], usage="API token", required=True, category="Auth"),
            Flag(names=["legacy-auth"], type=FlagType.BOOL, usage="Old auth", deprecated=True),
            Flag(names=["internal"], usage="Hidden knob", hidden=True),
        ],
        commands=[up, secret, down],
        authors=[Author(name="Ada Lovelace", email="ada@example.com"), Author(name="Grace")],
        copyright="(c) 2024 Example Corp",
    )


# ============================================================================
# FILE FIXTURES
# ============================================================================


@pytest.fixture
def readme(tmp_path):
    """README with the default delimiter lines and surrounding prose."""
    path = tmp_path / "README.md"
    path.write_text(
        "# Project\n"
        "\n"
        "Intro text.\n"
        "\n"
        "<!--GENERATED:CLI_DOCS-->\n"
        "old content\n"
        "<!--/GENERATED:CLI_DOCS-->\n"
        "\n"
        "Footer.\n"
    )
    return path
