"""
Command-line wrapper: reads a grid markup file, parses it and prints the document tree.

    $ gridmarkup page.gm
    $ python -m gridmarkup --trim page.gm
"""

import sys, argparse, logging

from gridmarkup.errors import GridError
from gridmarkup.document import Element
from gridmarkup.parser import parse

logger = logging.getLogger(__name__)


#####################################################################################################################################################
#####
#####  DUMP
#####

def dump(node, indent = '  '):
    """Multi-line debug listing of the subtree rooted at `node`, one node per line, children indented."""
    return '\n'.join(_dump_lines(node, indent, 0))

def _dump_lines(node, indent, depth):
    prefix = indent * depth
    if not isinstance(node, Element):
        yield prefix + repr(str(node.text))
        return
    
    head = '~' + node.kind.value
    if node.attributes:
        head += '(' + ', '.join(f'{key}: {value}' for key, value in node.attributes.items()) + ')'
    yield prefix + head
    
    for child in node.content:
        yield from _dump_lines(child, indent, depth + 1)


#####################################################################################################################################################
#####
#####  MAIN
#####

def parse_args(args = None):
    parser = argparse.ArgumentParser(
        prog = 'gridmarkup',
        description = "Parse a grid markup document and print its tree.",
    )
    parser.add_argument('path', help = "grid markup file to parse")
    parser.add_argument('--lenient', action = 'store_true', help = "ignore any input after the root element")
    parser.add_argument('--trim', action = 'store_true', help = "strip whitespace around plain text runs, drop blank runs")
    parser.add_argument('-v', '--verbose', action = 'store_true', help = "print debug messages to stderr")
    return parser.parse_args(args)


def main(argv = None):
    args = parse_args(argv)
    if args.verbose:
        logging.basicConfig(level = logging.DEBUG, format = '%(levelname)s %(name)s: %(message)s')
    
    try:
        with open(args.path, encoding = 'utf-8') as f:
            source = f.read()
    except OSError as ex:
        print(f"error: cannot read '{args.path}': {ex.strerror or ex}", file = sys.stderr)
        return 1
    
    logger.info("loaded %s (%s characters)", args.path, len(source))
    
    try:
        root = parse(source, strict = not args.lenient, trim_text = args.trim)
    except GridError as ex:
        print(f"error: {ex}", file = sys.stderr)
        return 1
    
    print(dump(root))
    return 0
