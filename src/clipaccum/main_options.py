"""Click option helpers for the CLI modes."""
import click


def _flag_name(name: str) -> str:
    """Return the command-line spelling of a parameter name."""
    return "--" + name.replace("_", "-")


def check_exclusive(name: str, excludes: list[str], opts: dict) -> None:
    """Raise UsageError if an option was given together with an excluded one.

    Args:
        name: Parameter name of the current option.
        excludes: Parameter names that cannot be combined with it.
        opts: Dictionary of parsed options.

    Raises:
        click.UsageError: If an excluded option is present as well.
    """
    for other in excludes:
        if other in opts:
            raise click.UsageError(
                f"Options {_flag_name(name)} and {_flag_name(other)} are mutually exclusive"
            )


class ExclusiveOption(click.Option):
    """Click option that cannot be combined with the options it excludes."""

    def __init__(self, *args, **kwargs):
        """Initialize with an `excludes` list of parameter names."""
        self.excludes = kwargs.pop("excludes", [])
        super().__init__(*args, **kwargs)

    def handle_parse_result(self, ctx, opts, args):
        """Reject the combination before click processes the value."""
        if self.name in opts:
            check_exclusive(self.name, self.excludes, opts)
        return super().handle_parse_result(ctx, opts, args)
