"""Module entrypoint to run PassVault via `python -m passvault`."""

from passvault.cli import main


def run() -> None:
    """Dispatch to the console script handler."""

    main()


if __name__ == "__main__":  # pragma: no cover
    run()
