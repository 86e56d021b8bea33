"""CLI output styling utilities.

Consistent styling helpers for CLI output:
- Cyan bold for section headers and labels
- Green for success messages (with checkmark)
- Red for error messages (with cross)
- Dim for neutral/empty state messages
"""

from __future__ import annotations

__all__ = [
    "style_error",
    "style_header",
    "style_label",
    "style_success",
    "style_warning",
]

import click


def style_header(title: str) -> str:
    """Style a section header with dashes.

    Example:
        >>> click.echo(style_header("Connection"))
        --- Connection ---
    """
    return click.style(f"--- {title} ---", fg="cyan", bold=True)


def style_label(label: str) -> str:
    """Style a label (colon appended) in cyan bold."""
    return click.style(f"{label}:", fg="cyan", bold=True)


def style_success(message: str) -> str:
    """Style a success message with checkmark.

    Example:
        >>> click.echo(style_success("Connected to League client"))
        ✓ Connected to League client
    """
    return click.style(f"✓ {message}", fg="green")


def style_error(message: str) -> str:
    """Style an error message with cross mark."""
    return click.style(f"✗ {message}", fg="red")


def style_warning(message: str) -> str:
    """Style a warning message with yellow color.

    Example:
        >>> click.echo(style_warning("Waiting for League client..."))
        Warning: Waiting for League client...
    """
    return click.style(f"Warning: {message}", fg="yellow", bold=True)
