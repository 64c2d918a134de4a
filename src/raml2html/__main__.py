"""Guard against running raml2html as a program."""

import sys

import click

USAGE = (
    "This package is meant to be used as a library. "
    "You probably want to run the raml2html command if you're looking for a CLI."
)


@click.command(
    add_help_option=False,
    context_settings={"ignore_unknown_options": True, "allow_extra_args": True},
)
def main():
    """raml2html is a library; print a usage note and fail."""
    click.echo(USAGE, err=True)
    sys.exit(1)


if __name__ == "__main__":
    main()
