#!/usr/bin/env python3

"""
Calculate maximum weighted matching of graphs in DIMACS format.
"""

from __future__ import annotations

import sys
import argparse
import logging
import os
import os.path
from collections.abc import Sequence
from typing import Optional, TextIO

from mwblossom import (maximum_weight_matching, iter_pairs, MatchingError)


_logger = logging.getLogger(__name__)


def parse_int_or_float(s: str) -> int|float:
    """Convert a string to integer or float value."""
    try:
        return int(s)
    except ValueError:
        pass
    return float(s)


def read_dimacs_graph(f: TextIO) -> list[tuple[int, int, int|float]]:
    """Read a graph in DIMACS edge list format.

    Vertex numbers in the file start at 1; the returned edges use
    vertex indices starting at 0.
    """

    edges: list[tuple[int, int, int|float]] = []

    for line in f:
        s = line.strip()
        words = s.split()

        if not words:
            # Skip empty line.
            continue

        if words[0].startswith("c"):
            # Skip comment line.
            pass

        elif words[0] == "p":
            # Handle "problem" line.
            if len(words) != 4:
                raise ValueError(
                    f"Expecting DIMACS edge format but got {s!r}")
            if words[1] != "edge":
                raise ValueError(
                    f"Expecting DIMACS edge format but got {words[1]!r}")

        elif words[0] == "e":
            # Handle "edge" line.
            if len(words) != 4:
                raise ValueError(f"Expecting edge but got {s!r}")
            x = int(words[1])
            y = int(words[2])
            if (x < 1) or (y < 1):
                raise ValueError(f"Invalid vertex index {s!r}")
            w = parse_int_or_float(words[3])
            edges.append((x - 1, y - 1, w))

        else:
            raise ValueError(f"Unknown line type {words[0]!r}")

    return edges


def read_dimacs_graph_file(filename: str) -> list[tuple[int, int, int|float]]:
    """Read a graph from file, or from stdin if "filename" is empty or "-"."""
    if filename and filename != "-":
        with open(filename, "r", encoding="ascii") as f:
            try:
                return read_dimacs_graph(f)
            except ValueError as exc:
                raise ValueError(f"{exc} in {filename!r}") from None
    else:
        try:
            return read_dimacs_graph(sys.stdin)
        except ValueError as exc:
            raise ValueError(f"{exc} in (stdin)") from None


def write_dimacs_matching(
        f: TextIO,
        weight: int|float,
        mate: Sequence[int]
        ) -> None:
    """Write a matching solution in DIMACS format."""

    if isinstance(weight, int):
        print("s", weight, file=f)
    else:
        print("s", f"{weight:.12g}", file=f)

    for (x, y) in iter_pairs(mate):
        print("m", x + 1, y + 1, file=f)


def write_dimacs_matching_file(
        filename: str,
        weight: int|float,
        mate: Sequence[int]
        ) -> None:
    """Write a matching to file or stdout."""
    if filename:
        with open(filename, "x", encoding="ascii") as f:
            write_dimacs_matching(f, weight, mate)
    else:
        write_dimacs_matching(sys.stdout, weight, mate)


def calc_matching_weight(
        edges: Sequence[tuple[int, int, int|float]],
        mate: Sequence[int]
        ) -> int|float:
    """Calculate the total weight of the matched edges."""
    weight: int|float = 0
    for (x, y, w) in edges:
        if mate[x] == y:
            assert mate[y] == x
            weight += w
    return weight


def generate_matching(
        input_filename: str,
        output_filename: str,
        maxcard: bool,
        check_optimum: bool = False,
        check_delta: bool = False
        ) -> None:
    """Calculate matching of one graph instance."""

    edges = read_dimacs_graph_file(input_filename)
    _logger.info("read %d edges from %s",
                 len(edges), input_filename or "(stdin)")

    mate = maximum_weight_matching(edges,
                                   maxcard,
                                   check_optimum=check_optimum,
                                   check_delta=check_delta)

    weight = calc_matching_weight(edges, mate)
    _logger.info("matching has %d pairs, weight %s",
                 sum(1 for _p in iter_pairs(mate)), weight)

    write_dimacs_matching_file(output_filename, weight, mate)


def run_generate(
        filenames: list[str],
        outdir: Optional[str],
        maxcard: bool,
        check_optimum: bool,
        check_delta: bool
        ) -> int:
    """Calculate matching(s) and write output to disk or stdout.

    Returns:
        0 if all inputs were processed; 1 if any input failed.
    """

    if len(filenames) == 0:
        # Read from stdin; write to stdout.
        generate_matching("", "", maxcard, check_optimum, check_delta)
        return 0

    if not outdir:
        # Read from file, write to stdout.
        assert len(filenames) == 1
        generate_matching(filenames[0], "", maxcard,
                          check_optimum, check_delta)
        return 0

    # Read from file, write to file.
    # Keep going when one of the inputs fails.
    failed = False
    for filename in filenames:
        output_filename = os.path.join(
            outdir,
            os.path.splitext(os.path.basename(filename))[0] + ".out")
        print(f"Processing {filename!r} -> {output_filename!r} ...",
              end=" ")
        sys.stdout.flush()

        try:
            generate_matching(filename, output_filename, maxcard,
                              check_optimum, check_delta)
        except (OSError, ValueError, TypeError, MatchingError) as exc:
            print("FAILED")
            print("ERROR:", exc, file=sys.stderr)
            failed = True
        else:
            print(" OK")
        sys.stdout.flush()

    return 1 if failed else 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main program."""

    parser = argparse.ArgumentParser()
    parser.description = (
        "Calculate maximum weighted matching of graphs in DIMACS format.")

    parser.add_argument("--maxcard",
                        action="store_true",
                        help="calculate maximum-cardinality matching")
    parser.add_argument("--check-optimum",
                        action="store_true",
                        help="verify optimality of the matching"
                             " (integer weights only)")
    parser.add_argument("--check-delta",
                        action="store_true",
                        help="cross-check delta steps (slow)")
    parser.add_argument("--outdir",
                        action="store",
                        type=str,
                        help="directory to write output")
    parser.add_argument("-v", "--verbose",
                        action="count",
                        default=0,
                        help="show progress; repeat for debug output")
    parser.add_argument("input",
                        nargs="*",
                        help="input file(s); leave empty to read from stdin")

    args = parser.parse_args(argv)

    if args.verbose >= 2:
        log_level = logging.DEBUG
    elif args.verbose == 1:
        log_level = logging.INFO
    else:
        log_level = logging.WARNING
    logging.basicConfig(level=log_level,
                        format="%(levelname)s:%(name)s: %(message)s")

    if (not args.input) and sys.stdin.isatty():
        print("ERROR: Expecting input from stdin but stdin is a terminal",
              file=sys.stderr)
        print(file=sys.stderr)
        parser.print_help(sys.stderr)
        return 1

    if len(args.input) > 1 and (not args.outdir):
        print("ERROR: Need --outdir to process multiple inputs",
              file=sys.stderr)
        return 1

    try:
        return run_generate(args.input,
                            args.outdir,
                            args.maxcard,
                            args.check_optimum,
                            args.check_delta)
    except (OSError, ValueError, TypeError, MatchingError) as exc:
        print("ERROR:", exc, file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
