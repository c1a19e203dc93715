#!/usr/bin/env python3

import os
import sys

sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

from bftape import dump_ast, emit, list_tokens, parse_source


def main():
    code = "+[>+<-] copy cell 0 into cell 1"

    print(list_tokens(code))
    print()

    tree = parse_source(code)
    print(dump_ast(tree))
    print()
    print(emit(tree))


if __name__ == "__main__":
    main()
