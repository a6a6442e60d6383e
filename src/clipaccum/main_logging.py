"""Logging configuration for the clipaccum CLI."""
import logging


def configure_logging(verbose: bool) -> None:
    """Configure the root logger for the daemon or the control client.

    Args:
        verbose: If True, set DEBUG level; otherwise WARNING level.

    Output goes to stderr so that control responses on stdout stay clean.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        handlers=[logging.StreamHandler()],
    )
