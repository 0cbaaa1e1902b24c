"""Command line entry point: load images and run them on the console."""

from __future__ import annotations

import sys
from typing import Sequence

from lc3vm.console import RawInput, key_ready
from lc3vm.image import ImageError, read_image
from lc3vm.machine import Machine

USAGE = "lc3 [image-file1] ..."


def main(argv: Sequence[str] | None = None) -> int:
    """Run the images named in ``argv`` and return the exit status."""
    paths = list(sys.argv[1:] if argv is None else argv)
    if not paths:
        print(USAGE)
        return 2

    stdin_buffer = getattr(sys.stdin, "buffer", sys.stdin)
    stdin_raw = getattr(stdin_buffer, "raw", stdin_buffer)
    stdout_buffer = getattr(sys.stdout, "buffer", sys.stdout)
    machine = Machine(stdin_raw, stdout_buffer, lambda: key_ready(stdin_raw))

    for path in paths:
        try:
            origin, words = read_image(path)
        except ImageError:
            print(f"failed to load image: {path}")
            return 1
        machine.load(origin, words)

    sys.stdout.flush()
    with RawInput(sys.stdin) as raw:
        try:
            machine.run()
        except KeyboardInterrupt:
            raw.restore()
            print()
            return -2
    return 0


if __name__ == "__main__":
    sys.exit(main())