"""
Reporting and output formatting for duplicate scan results.

Renders duplicates with the Rich library, either as plain text or with ANSI
color emphasis, and decides the process exit status.
"""

import json
from typing import List, Optional

from rich.console import Console
from rich.text import Text

from .dependency import DependencyRecord

EXIT_OK = 0
EXIT_DUPLICATES_FOUND = 1
EXIT_IO_ERROR = 3

NAME_STYLE = "bold red"
COUNT_STYLE = "red"
HEADING_STYLE = "green"


def create_console(color: bool = False) -> Console:
    """Console for standard output; ANSI styling only when color is requested."""
    if color:
        return Console(
            force_terminal=True,
            color_system="standard",
            no_color=False,
            highlight=False,
            soft_wrap=True,
            emoji=False,
        )
    return Console(color_system=None, highlight=False, soft_wrap=True, emoji=False)


def determine_exit_code(duplicates: List[DependencyRecord], silent: bool) -> int:
    """Non-zero only when duplicates were found and silent mode is off."""
    if duplicates and not silent:
        return EXIT_DUPLICATES_FOUND
    return EXIT_OK


def duplicates_to_dict(duplicates: List[DependencyRecord]) -> dict:
    return {
        "total_duplicates": len(duplicates),
        "duplicates": [
            {
                "name": record.name,
                "versions": [
                    {
                        "version": constraint,
                        "locations": [str(p) for p in record.paths_for(constraint)],
                    }
                    for constraint in record.distinct_constraints
                ],
            }
            for record in duplicates
        ],
    }


class DuplicateReporter:
    """Formats and prints duplicate dependencies."""

    def __init__(self, console: Optional[Console] = None, color: bool = False):
        self.console = console or create_console(color)

    def render(self, duplicates: List[DependencyRecord], output_format: str = "default") -> None:
        """
        Print duplicates in the requested format.

        Args:
            duplicates: Duplicate records, already filtered and sorted
            output_format: One of default, short, full, json
        """
        if output_format == "short":
            self._print_short(duplicates)
        elif output_format == "json":
            self._print_json(duplicates)
        elif output_format == "full":
            self._print_detailed(duplicates, show_locations=True)
        elif output_format == "default":
            self._print_detailed(duplicates, show_locations=False)
        else:
            raise ValueError(f"Unknown output format: {output_format}")

    def _print_short(self, duplicates: List[DependencyRecord]) -> None:
        for record in duplicates:
            self.console.print(Text(record.name, style=NAME_STYLE))

    def _print_json(self, duplicates: List[DependencyRecord]) -> None:
        self.console.print(
            Text(json.dumps(duplicates_to_dict(duplicates), indent=2, ensure_ascii=False))
        )

    def _print_header(self, record: DependencyRecord) -> None:
        self.console.print(
            Text.assemble(
                (record.name, NAME_STYLE),
                ", Unique versions: ",
                (str(len(record.distinct_constraints)), COUNT_STYLE),
            )
        )

    def _print_detailed(self, duplicates: List[DependencyRecord], show_locations: bool) -> None:
        if not duplicates:
            self.console.print("No duplicate dependencies found.")
            return

        for record in duplicates:
            self._print_header(record)
            self.console.print(Text("Versions:", style=HEADING_STYLE))
            for constraint in record.distinct_constraints:
                self.console.print(Text(f"  {constraint}"))
                if show_locations:
                    for path in record.paths_for(constraint):
                        self.console.print(Text(f"    {path}"))
            self.console.print()

        self.console.print(
            Text.assemble("Total duplicates: ", (str(len(duplicates)), COUNT_STYLE))
        )
