import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from . import __version__
from .config import OUTPUT_FORMATS, load_config
from .error_handling import ScanIOError
from .reporting import EXIT_IO_ERROR, DuplicateReporter, determine_exit_code
from .scanner import scan_folder
from .structured_logging import configure_logging


def print_error(message: str) -> None:
    Console(stderr=True, highlight=False).print(
        f"❌ Error: {message}", style="red", markup=False
    )


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--folder",
    "-f",
    required=True,
    type=click.Path(path_type=Path),
    help="Folder to scan for package.json files",
)
@click.option(
    "--output",
    "-o",
    type=click.Choice(OUTPUT_FORMATS, case_sensitive=False),
    default=None,
    help="Report format [default: default]",
)
@click.option(
    "--silent",
    "-s",
    is_flag=True,
    help="Exit with zero code when duplicates are found",
)
@click.option("--color", is_flag=True, help="Colorize the report with ANSI codes")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Configuration file (JSON or YAML) [default: .npm-dupes.json/.yaml]",
)
@click.version_option(__version__, prog_name="npm-dupes")
def cli(
    folder: Path,
    output: Optional[str],
    silent: bool,
    color: bool,
    config_path: Optional[Path],
) -> None:
    """
    Find dependencies declared with different version constraints across
    the package.json files of a project.

    Examples:

      npm-dupes --folder .

      npm-dupes --folder packages --output full --color

      npm-dupes -f . -o short --silent
    """
    config = load_config(config_path)
    if output is not None:
        config.scan.output_format = output.lower()
    config.scan.silent = silent or config.scan.silent
    config.scan.color = color or config.scan.color

    configure_logging(
        config.logging.log_level,
        config.logging.enable_json,
        config.logging.log_format,
    )

    try:
        result = scan_folder(folder, config)
    except ScanIOError as e:
        print_error(str(e))
        sys.exit(EXIT_IO_ERROR)
    except KeyboardInterrupt:
        Console(stderr=True).print("\n⚠️  Scan interrupted by user", style="yellow")
        sys.exit(130)

    reporter = DuplicateReporter(color=config.scan.color)
    reporter.render(result.duplicates, config.scan.output_format)

    sys.exit(determine_exit_code(result.duplicates, config.scan.silent))


if __name__ == "__main__":
    cli()
