"""
Exceptions for Grid Markup.
"""

from gridmarkup.config import EXCERPT_LENGTH

########################################################################################################################################################

class ParserError(Exception):
    """
    An error that can be located in the source text.
    `pos` is a 0-based character offset; `line` and `column` are 1-based and calculated from `pos`
    when the source text is given. `text` is a short excerpt of the source starting at `pos`.
    """
    
    msg    = None
    pos    = None
    line   = None
    column = None
    text   = None
    
    def __init__(self, msg = None, pos = None, source = None):
        self.msg = msg or self.__doc__.strip().split('\n')[0]
        self.pos = pos
        if pos is not None and source is not None:
            self.line = source.count('\n', 0, pos) + 1
            self.column = pos - source.rfind('\n', 0, pos)
            self.text = excerpt(source, pos)
        
        super(ParserError, self).__init__(self.make_msg(self.msg))
    
    def make_msg(self, msg):
        if self.line is None: return msg
        return msg + " at line %s, column %s (%s)" % (self.line, self.column, self.text)


def excerpt(source, pos, length = EXCERPT_LENGTH):
    """Quoted fragment of `source` starting at `pos`, for inclusion in error messages."""
    if pos >= len(source): return "end of input"
    frag = source[pos:pos + length]
    if pos + length < len(source): frag += '...'
    return repr(frag)


########################################################################################################################################################

class GridError(ParserError):
    """Parsing of a grid markup document failed."""

class ConfigError(Exception): pass


class LexicalError(GridError, SyntaxError):
    """Expected token was not found."""

class TrailingInput(LexicalError):
    """Unexpected input after the root element."""

class UnknownElementKind(GridError, ValueError):
    """Tag name is not a known element kind."""

class MalformedAttributeList(GridError):
    """Attribute list is malformed."""

class UnterminatedContent(GridError):
    """Content block is not closed with '}'."""

class EmptyDocument(GridError):
    """Document contains no root element."""

class NestingTooDeep(GridError):
    """Document is nested too deeply to be parsed."""
