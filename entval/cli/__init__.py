"""Command-line interface for the entity validator."""

import rich_click as click

from ..core import configure_logging, settings
from .rules import rules_command
from .validate import validate_command

# Configure rich-click styling
click.rich_click.TEXT_MARKUP = "rich"
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.GROUP_ARGUMENTS_OPTIONS = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.STYLE_OPTION = "bold cyan"
click.rich_click.STYLE_ARGUMENT = "bold yellow"
click.rich_click.STYLE_COMMAND = "bold green"
click.rich_click.STYLE_SWITCH = "bold blue"


@click.group(name="entval")
@click.version_option(version="0.1.0", prog_name="entval")
def main() -> None:
    """🛡️ **entval** - Schema-driven entity validation.

    Validate entity data files against declarative schemas and get every
    violation reported at once.
    """
    configure_logging(
        environment=settings.environment,
        log_level=settings.log_level,
        json_logs=settings.json_logs,
    )


# Add commands to the group
main.add_command(validate_command)
main.add_command(rules_command)


if __name__ == "__main__":
    main()


__all__ = ["main"]
