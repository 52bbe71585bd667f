"""
Grid Markup: parser of a lightweight HTML-like markup language into an immutable document tree.

    >>> from gridmarkup import parse
    >>> parse("~h1(data: test){Hi}")
    Element(ElementKind.H1, {'data': 'test'}, [PlainText('Hi')])
"""

from gridmarkup.errors import GridError, LexicalError, TrailingInput, UnknownElementKind, \
    MalformedAttributeList, UnterminatedContent, EmptyDocument, NestingTooDeep, ConfigError
from gridmarkup.document import TextView, Node, PlainText, Element, ElementKind
from gridmarkup.parser import Grammar, GridParser, parse
