"""
Document tree of Grid Markup.

A parsed document is a tree of Nodes:
- Element:    tagged node with a kind, attributes and ordered content (child nodes)
- PlainText:  leaf node with a run of literal text

All text stored in the tree (plain text, attribute keys and values) is kept as TextView objects:
zero-copy views of the source string that keep a reference to it, so the source lives as long as the tree does.
The tree is built once and is never modified afterwards; a new parse always produces a new tree.
"""

from enum import Enum
from types import MappingProxyType

from gridmarkup.config import TAG_ALIASES, WHITESPACE
from gridmarkup.errors import UnknownElementKind


########################################################################################################################################################
#####
#####  TEXT VIEW
#####

class TextView:
    """
    Read-only view of `source[start:end]` that doesn't copy characters.
    Compares equal to (and hashes like) a str with the same characters, so views
    can be used as dict keys and compared against string literals directly.
    """
    __slots__ = ('source', 'start', 'end')
    
    def __init__(self, source, start = 0, end = None):
        if end is None: end = len(source)
        assert 0 <= start <= end <= len(source)
        self.source = source
        self.start = start
        self.end = end
        
    def __str__(self):              return self.source[self.start:self.end]
    def __repr__(self):             return repr(str(self))
    def __len__(self):              return self.end - self.start
    def __hash__(self):             return hash(str(self))
    
    def __eq__(self, other):
        if isinstance(other, TextView): other = str(other)
        if not isinstance(other, str): return NotImplemented
        return len(other) == len(self) and self.source.startswith(other, self.start, self.end)
    
    def strip(self):
        """Narrowed view with leading and trailing whitespace excluded."""
        start, end = self.start, self.end
        while start < end and self.source[start] in WHITESPACE: start += 1
        while end > start and self.source[end-1] in WHITESPACE: end -= 1
        return TextView(self.source, start, end)
    

########################################################################################################################################################
#####
#####  ELEMENT KINDS
#####

class ElementKind(Enum):
    """Closed vocabulary of element kinds. Values are canonical tag names."""
    
    HTML  = 'html'
    META  = 'meta'
    TITLE = 'title'
    BODY  = 'body'
    DIV   = 'div'
    H1    = 'h1'
    H2    = 'h2'
    H3    = 'h3'
    P     = 'p'
    BR    = 'br'
    B     = 'b'
    LINK  = 'link'
    
    @classmethod
    def resolve(cls, name, pos = None, source = None):
        """
        Map a tag name to an ElementKind. Unknown names raise UnknownElementKind,
        located at `pos` in `source` if these are given.
        """
        name = str(name)
        try:
            return cls(TAG_ALIASES.get(name, name))
        except ValueError:
            raise UnknownElementKind(f"unknown element kind '{name}'", pos, source) from None
        

########################################################################################################################################################
#####
#####  NODES
#####

class Node:
    """Base class for nodes of a document tree."""
    
    def plaintext(self):
        """Concatenation of all plain text in this subtree, in document order."""
        raise NotImplementedError
    
    def walk(self):
        """Depth-first traversal of this subtree, yielding self then descendants."""
        yield self
    

class PlainText(Node):
    """A leaf node containing a run of literal text."""
    
    text = None         # TextView of the source
    
    def __init__(self, text):
        self.text = text
    
    def plaintext(self):
        return str(self.text)
    
    def __eq__(self, other):
        if not isinstance(other, Node): return NotImplemented
        return isinstance(other, PlainText) and self.text == other.text
    
    __hash__ = None
    
    def __repr__(self):
        return f"PlainText({self.text!r})"


class Element(Node):
    """A tagged node with attributes and content."""
    
    kind       = None       # ElementKind
    attributes = None       # read-only mapping of TextView keys to TextView values; empty if no attributes were given
    content    = None       # tuple of child nodes, in source order
    
    def __init__(self, kind, attributes = None, content = ()):
        self.kind = kind
        self.attributes = MappingProxyType(dict(attributes or {}))
        self.content = tuple(content)
    
    def __iter__(self):
        return iter(self.content)
    
    def plaintext(self):
        return ''.join(child.plaintext() for child in self.content)
    
    def walk(self):
        yield self
        for child in self.content:
            yield from child.walk()
    
    def __eq__(self, other):
        if not isinstance(other, Node): return NotImplemented
        return isinstance(other, Element) and self.kind == other.kind and \
               self.attributes == other.attributes and self.content == other.content
    
    __hash__ = None
    
    def __repr__(self):
        attrs = {str(key): str(value) for key, value in self.attributes.items()}
        return f"Element({self.kind}, {attrs!r}, {list(self.content)!r})"
