from __future__ import annotations

import typer

app = typer.Typer(add_completion=False, help="Fund NAV CLI: share class valuation and fee accrual")
class_app = typer.Typer(add_completion=False, help="Share class setup and stored values")
app.add_typer(class_app, name="class")
valuation_app = typer.Typer(add_completion=False, help="Portfolio valuation sheet")
app.add_typer(valuation_app, name="valuation")

_COMMANDS_REGISTERED = False


@app.callback()
def _root(
    log_level: str = typer.Option("", "--log-level", help="Override FUNDNAV_LOG_LEVEL (DEBUG, INFO, ...)."),
):
    from fundnav.config import load_settings
    from fundnav.utils.logging import configure_logging

    configure_logging(log_level or load_settings().log_level)


def _register_commands() -> None:
    global _COMMANDS_REGISTERED
    if _COMMANDS_REGISTERED:
        return
    # Import here to keep `fundnav.cli` lightweight at import time.
    from fundnav.cli_commands.nav_cmd import register as register_nav
    from fundnav.cli_commands.class_cmd import register as register_class
    from fundnav.cli_commands.valuation_cmd import register as register_valuation

    register_nav(app)
    register_class(class_app)
    register_valuation(valuation_app)
    _COMMANDS_REGISTERED = True


def main():
    _register_commands()
    app()

# Register commands when imported as a console-script entrypoint (`pyproject.toml` uses `fundnav.cli:app`).
_register_commands()


if __name__ == "__main__":
    main()
