from __future__ import annotations

import argparse
import sys
from typing import List

from gabung.merger import merge
from gabung.splitter import Splitter
from gabung.errors import GabungError


def cmd_merge(output: str, inputs: list[str], *, no_footer: bool = False, quiet: bool = False) -> bool:
    """Merge files into a single container.

    Args:
        output: Path of the container to write.
        inputs: Source files, packed in the given order.
        no_footer: Concatenate payloads only; the result cannot be split.
        quiet: Limit output to the summary line.
    """
    if not quiet:
        print(f" Merging {len(inputs)} files...", flush=True)
        for p in inputs:
            print(f"  {p}")
    total = merge(inputs, output, no_footer=no_footer)
    print(f"Wrote {output} ({total} bytes)")
    return True


def cmd_split(container: str, *, outdir: str, quiet: bool = False) -> bool:
    """Split a container back into its files.

    Args:
        container: Container produced by ``cmd_merge``.
        outdir: Destination directory; created when missing.
        quiet: Limit output to the summary line.
    """
    with Splitter(container) as s:
        written = s.split(outdir)
        if not quiet:
            for e, path in zip(s.list(), written):
                print(f"  {path} ({e.size} bytes)")
    print(f"Split {len(written)} files into {outdir}")
    return True


def cmd_list(container: str) -> bool:
    """Print the container's records with their computed payload offsets."""
    with Splitter(container) as s:
        entries = s.list()
        print(f"{'OFFSET':>12} {'SIZE':>12}  NAME")
        for e in entries:
            print(f"{e.offset:>12} {e.size:>12}  {e.filename}")
        total = sum(e.size for e in entries)
    print(f"Total: {len(entries)} files, {total} bytes")
    return True


def main(argv: List[str] | None = None):
    ap = argparse.ArgumentParser(
        prog="gabung",
        description="Gabung: a simple file merger",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "examples:\n"
            "  gabung -m file1.jpg file2.txt file3.zip -o sus.jpg\n"
            "  gabung -s sus.jpg -o .\n"
            "  gabung -s sus.jpg -o sus/\n"
            "  gabung -l sus.jpg\n"
        ),
    )
    mode = ap.add_mutually_exclusive_group(required=True)
    mode.add_argument("-m", "--merge", nargs="+", metavar="FILE", help="Files to merge, in order")
    mode.add_argument("-s", "--split", metavar="FILE", help="Container to split")
    mode.add_argument("-l", "--list", metavar="FILE", help="List container contents")
    ap.add_argument("-o", "--output", metavar="PATH", help="Output container (merge) or directory (split)")
    ap.add_argument("--no-footer", action="store_true", help="Merge: concatenate only, without file properties")
    ap.add_argument("--quiet", help="limit outputs to summaries only", action="store_true")

    if argv is None:
        argv = sys.argv[1:]
    if not argv:
        ap.print_help()
        sys.exit(1)

    args = ap.parse_args(argv)
    if args.merge is not None:
        if len(args.merge) < 2:
            ap.error("merge needs at least two input files")
        if args.output is None:
            ap.error("merge needs -o OUTPUT")
    elif args.split is not None:
        if args.output is None:
            ap.error("split needs -o OUTPUT_DIR")
    if args.no_footer and args.merge is None:
        ap.error("--no-footer only applies to -m")
    if args.list is not None and (args.output is not None or args.quiet):
        ap.error("-l takes no -o or --quiet")

    try:
        if args.merge is not None:
            cmd_merge(args.output, args.merge, no_footer=args.no_footer, quiet=args.quiet)
        elif args.split is not None:
            cmd_split(args.split, outdir=args.output, quiet=args.quiet)
        elif args.list is not None:
            cmd_list(args.list)
        else:
            raise RuntimeError("Unknown command")
    except (GabungError, OSError, ValueError, RuntimeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
