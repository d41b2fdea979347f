"""
minasm - Assembler Command-Line Interface
=========================================

Reads a source file, runs both assembly passes and writes the results.

Usage Examples
--------------
Basic assembly (writes prog.obj and prog.lst, plus prog.err on errors):
    $ minasm prog.asm

Choose output files:
    $ minasm prog.asm -o out.obj -l out.lst -e out.err

Raw binary instead of hex text, plus a symbol file:
    $ minasm prog.asm -b prog.bin -s prog.sym

Verbose mode:
    $ minasm -v prog.asm
"""

from pathlib import Path
from typing import Optional
import logging
import sys

import click

from minasm import __version__
from minasm.assembler import Assembler
from minasm.cli.errors import ExitCode, handle_cli_exception


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Object file, one hex line per instruction (default: input.obj)",
)
@click.option(
    "-b", "--binary",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write raw binary machine code instead of a hex object file",
)
@click.option(
    "-l", "--listing",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Listing file (default: input.lst)",
)
@click.option(
    "-e", "--errors",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Error file, written only if there are errors (default: input.err)",
)
@click.option(
    "-s", "--symbols",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate symbol file",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="minasm")
def main(
    input_file: Path,
    output: Optional[Path],
    binary: Optional[Path],
    listing: Optional[Path],
    errors: Optional[Path],
    symbols: Optional[Path],
    verbose: bool,
) -> None:
    """
    Assemble a source file for the minimal 8086-style instruction set.

    INPUT_FILE is the assembly source file (.asm) to assemble.

    \b
    Examples:
        minasm prog.asm              # Outputs prog.obj, prog.lst
        minasm prog.asm -o out.obj   # Specify object file
        minasm prog.asm -b prog.bin  # Raw binary output
    """
    if output is not None and binary is not None:
        click.echo("Error: -o/--output and -b/--binary are mutually exclusive", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    setup_logging(verbose)

    listing_file = listing if listing is not None else input_file.with_suffix(".lst")
    errors_file = errors if errors is not None else input_file.with_suffix(".err")

    asm = Assembler(verbose=verbose)

    try:
        if verbose:
            click.echo(f"Assembling {input_file}...")

        asm.assemble_file(input_file)

        if binary is not None:
            asm.write_binary(binary)
            object_file = binary
        else:
            object_file = output if output is not None else input_file.with_suffix(".obj")
            asm.write_object(object_file)

        asm.write_listing(listing_file)

        if symbols:
            asm.write_symbols(symbols)

        if asm.write_errors(errors_file):
            click.echo(asm.get_error_report(), err=True)
            click.echo(f"Errors written to {errors_file}", err=True)
            sys.exit(ExitCode.BUILD_ERROR)

        if verbose:
            code = asm.get_code()
            click.echo(f"Wrote {len(code)} bytes to {object_file}")
            click.echo(f"Wrote listing to {listing_file}")
            click.echo(
                f"Assembly complete: {len(code)} bytes at ${asm.get_origin():04X}, "
                f"{len(asm.get_symbols())} symbols"
            )

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Assembly")


if __name__ == "__main__":
    main()
