"""Runs the LicitaSaaS command line, as `licitasaas` or `python -m licitasaas.cli`."""

from licitasaas.cli import create_cli


def main() -> None:
    """Builds the command group and dispatches the arguments."""
    create_cli()(prog_name="licitasaas")


if __name__ == "__main__":
    main()
