"""Allow ``python -m create_seneca_service``."""

from create_seneca_service.cli import cli

if __name__ == "__main__":
    cli()
