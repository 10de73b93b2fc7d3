"""Line-based prompts for the interactive browser.

Ctrl-C and Ctrl-D cancel a prompt; cancelled prompts return None.
"""

from __future__ import annotations

from rich.console import Console

# Shared console instance
console = Console()


def get_single_line_input(prompt: str, default: str | None = None) -> str | None:
    """Get single-line input from user.

    Args:
        prompt: Prompt message to display
        default: Default value if user presses Enter

    Returns:
        User's input, or None if cancelled
    """
    try:
        if default:
            console.print(f"[cyan]{prompt}[/cyan] [dim](default: {default})[/dim]")
        else:
            console.print(f"[cyan]{prompt}[/cyan]")

        line = input("> ")
        return line.strip() or default

    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled[/yellow]")
        return None
    except EOFError:
        return None


def get_number(
    prompt: str,
    minimum: int = 1,
    maximum: int | None = None,
    default: int | None = None,
) -> int | None:
    """Ask for an integer in [minimum, maximum], re-asking until valid.

    Returns:
        The number, or None if cancelled or left empty without a default
    """
    bounds = f"{minimum}-{maximum}" if maximum is not None else f">= {minimum}"
    while True:
        raw = get_single_line_input(
            f"{prompt} ({bounds})", str(default) if default is not None else None
        )
        if raw is None:
            return None
        try:
            value = int(raw)
        except ValueError:
            console.print(f"[yellow]Not a number: {raw}[/yellow]")
            continue
        if value < minimum or (maximum is not None and value > maximum):
            console.print(f"[yellow]Enter a number between {bounds}[/yellow]")
            continue
        return value


def get_choice(
    prompt: str,
    choices: list[str],
    default: str | None = None,
    labels: dict[str, str] | None = None,
) -> str | None:
    """Get user's choice from a list of options.

    Args:
        prompt: Prompt message to display
        choices: List of valid choices
        default: Default choice if user just presses Enter
        labels: Optional display text per choice

    Returns:
        User's choice, or None if cancelled

    Example:
        >>> action = get_choice("What next?", ["next", "prev", "quit"], default="next")
    """
    labels = labels or {}
    console.print(f"[cyan]{prompt}[/cyan]")

    for i, choice in enumerate(choices, 1):
        marker = "→" if choice == default else " "
        style = "bold" if choice == default else ""
        console.print(f"  {marker} [{i}] {labels.get(choice, choice)}", style=style, markup=False)

    while True:
        try:
            if default:
                console.print(f"[dim]Choice (default: {default})[/dim]")
            user_input = input("> ").strip()

            if not user_input and default:
                return default

            # Accept number or text
            if user_input.isdigit():
                index = int(user_input) - 1
                if 0 <= index < len(choices):
                    return choices[index]
            elif user_input in choices:
                return user_input

            console.print("[yellow]Invalid choice. Please try again.[/yellow]")

        except KeyboardInterrupt:
            console.print("\n[yellow]Cancelled[/yellow]")
            return None
        except EOFError:
            return None
