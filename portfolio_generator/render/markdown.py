from __future__ import annotations

from portfolio_generator.types.types import Portfolio


def _section(title: str, lines: list[str]) -> list[str]:
    if not lines:
        return []
    return [f"## {title}", "", *lines, ""]


def render_markdown(portfolio: Portfolio) -> str:
    """Default Markdown document for a portfolio, used when the caller supplies none."""
    theme = portfolio.design_theme
    category = portfolio.category

    out: list[str] = [
        f"# #{portfolio.number:03d} {portfolio.name}",
        "",
        f"{category.icon} {category.name} | {portfolio.platform} | v{portfolio.version}"
        f" | {portfolio.created_at}",
        "",
    ]
    if portfolio.description:
        out += [portfolio.description, ""]

    out += _section(
        f"Design Theme: {theme.name}",
        [
            "| Role | Colour |",
            "|---|---|",
            f"| Background | `{theme.bg}` |",
            f"| Text | `{theme.text}` |",
            f"| Accent | `{theme.accent}` |",
            f"| Border | `{theme.border}` |",
        ],
    )
    out += _section("Features", [f"- {feature}" for feature in portfolio.features])

    stack_rows = [f"| {key} | {value} |" for key, value in sorted(portfolio.tech_stack.items())]
    if stack_rows:
        stack_rows = ["| Layer | Technology |", "|---|---|", *stack_rows]
    out += _section("Tech Stack", stack_rows)

    out += _section("Screens", [f"- {screen}" for screen in portfolio.screens])
    out += _section(
        "Usage", [f"{i}. {step}" for i, step in enumerate(portfolio.usage_steps, start=1)]
    )

    return "\n".join(out).rstrip("\n") + "\n"
