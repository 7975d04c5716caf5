"""promptline: directory-aware shell prompt segments.

The template engine lives in ``promptline.template``, directory detection in
``promptline.scan``, and the prompt modules in ``promptline.modules``.
"""

from __future__ import annotations

__version__ = "0.1.0"


def main(default_path=None):
    """Run the command-line entrypoint; imported on demand to keep ``import promptline`` cheap."""
    from .cli import main as cli_main

    return cli_main(default_path)


__all__ = ["__version__", "main"]
