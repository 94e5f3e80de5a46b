"""Documentation page skeletons for blocks."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..library.paths import capitalize_name


def generate_auto_description(
    block_name: str,
    structure: Mapping[str, Any] | None = None,
    variants: list[str] | None = None,
) -> str:
    """Describe a block from its structure flags and variants.

    Example: ``"Multi-item layout with images, buttons Variants: dark, light"``.
    """
    structure = structure or {}
    parts: list[str] = []

    if structure.get("has_multiple_items"):
        parts.append("Multi-item layout")

    content = [
        label
        for flag, label in (("has_image", "images"), ("has_heading", "headings"), ("has_button", "buttons"))
        if structure.get(flag)
    ]
    if content:
        parts.append(f"with {', '.join(content)}")

    if variants:
        parts.append(f"Variants: {', '.join(variants)}")

    return " ".join(parts) if parts else f"{capitalize_name(block_name)} block"


def _section(block_name: str, variant: str, description: str, content: str) -> str:
    capitalized = capitalize_name(block_name)
    display_name = f"{capitalized} ({variant})" if variant else capitalized
    class_attr = f"{block_name} {variant}" if variant else block_name
    body = f"{content}\n" if content else ""

    return (
        "    <div>\n"
        '      <div class="library-metadata">\n'
        "        <div>\n"
        "          <div>name</div>\n"
        f"          <div>{display_name}</div>\n"
        "        </div>\n"
        "        <div>\n"
        "          <div>description</div>\n"
        f"          <div>{description}</div>\n"
        "        </div>\n"
        "      </div>\n"
        f'      <div class="{class_attr}">\n'
        f"{body}"
        "      </div>\n"
        "    </div>"
    )


def generate_block_template(
    block_name: str,
    description: str | None = None,
    variants: list[str] | None = None,
    structure: Mapping[str, Any] | None = None,
    block_content: Mapping[str, str] | None = None,
) -> str:
    """Render the documentation page for a block.

    One section is emitted per variant, or a single unvaried section when
    there are none. Each section shows the extracted markup for its variant,
    falling back to the default instance's markup, then to an empty block.
    """
    description = description or generate_auto_description(block_name, structure, variants)
    block_content = block_content or {}

    sections = [
        _section(
            block_name,
            variant,
            description,
            block_content.get(variant) or block_content.get("") or "",
        )
        for variant in (variants or [""])
    ]

    return "\n".join([
        "<body>",
        "  <header></header>",
        "  <main>",
        *sections,
        "  </main>",
        "  <footer></footer>",
        "</body>",
    ])
