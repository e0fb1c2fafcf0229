"""Allow extool to be executable through `python -m extool`."""
from extool.cli import cli


if __name__ == "__main__":  # pragma: no cover
    cli(prog_name="extool")
