from __future__ import annotations

import sys
from pathlib import Path

import click

project_root = Path(__file__).resolve().parents[1]
src_path = project_root / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from lib_model_sync.cli import main as cli_main  # noqa: E402


@click.command(
    help="Run lib_model_sync CLI from a source checkout (passes additional args)",
    context_settings={"ignore_unknown_options": True},
)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
def main(args: tuple[str, ...]) -> None:
    code = cli_main(list(args) if args else ["--help"])
    raise SystemExit(int(code))


if __name__ == "__main__":
    main()
