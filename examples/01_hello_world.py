#!/usr/bin/env python3

import os
import sys
import time

sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

from bftape import RunOptions, run_file


def main():
    path = os.path.join(os.path.dirname(__file__), "hello_world.bf")
    backend = sys.argv[1] if len(sys.argv) > 1 else "tree"

    start = time.time()
    result = run_file(path, options=RunOptions(backend=backend))
    end = time.time()

    if not result.ok:
        print(result.message, file=sys.stderr)
        return result.status

    print("================")
    print(f"Execution took {(end - start) * 1000:.2f} ms ({result.steps} steps)")
    print(result.tape.format_cells(count=16))
    return 0


if __name__ == "__main__":
    sys.exit(main())
