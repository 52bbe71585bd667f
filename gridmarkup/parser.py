# -*- coding: utf-8 -*-
import sys, re, logging, threading
from contextlib import contextmanager

from parsimonious.grammar import Grammar as Parsimonious
from parsimonious.exceptions import ParseError, IncompleteParseError
from parsimonious.nodes import NodeVisitor

from gridmarkup.config import WORD_CHARS, WHITESPACE, FRAMES_PER_LEVEL, MAX_NESTING
from gridmarkup.errors import GridError, ConfigError, LexicalError, TrailingInput, MalformedAttributeList, UnterminatedContent, \
    EmptyDocument, NestingTooDeep
from gridmarkup.grammar import grammar, EXPECTED
from gridmarkup.document import TextView, ElementKind, Element, PlainText

logger = logging.getLogger(__name__)


#####################################################################################################################################################
#####
#####  UTILITIES
#####

def describe_failure(ex):
    """Message for a parsimonious ParseError: the offending character and, when known, what was expected instead."""
    found = repr(ex.text[ex.pos]) if ex.pos < len(ex.text) else "end of input"
    expected = EXPECTED.get(getattr(ex.expr, 'name', None))
    if expected:
        return f"unexpected {found}, expected {expected}"
    return f"unexpected {found}"

def diagnose_attrs(source, start, end, word_chars = WORD_CHARS):
    """
    Find out what is wrong with a malformed attribute list occupying source[start:end]
    and return a pair: (message, position of the error).
    """
    re_word   = re.compile(r'[%s]+\Z' % word_chars)
    re_string = re.compile(r'"[^"]*"\Z')
    
    if source[end-1:end] != ')':
        return "expected ')' closing the attribute list", end
    
    inner = source[start+1 : end-1]
    if not inner.strip():
        return "attribute list must contain at least one 'key: value' pair", start
    
    offset = start + 1
    for item in inner.split(','):
        pos = offset + len(item) - len(item.lstrip())
        offset += len(item) + 1
        if not item.strip():
            return "missing 'key: value' pair in attribute list", pos
        if ':' not in item:
            return f"missing ':' after attribute '{item.strip()}'", pos
        
        key, _, value = item.partition(':')
        key, value = key.strip(), value.strip()
        if not key:
            return "missing attribute name before ':'", pos
        if not value:
            return f"missing value of attribute '{key}'", pos
        if not re_word.match(key):
            return f"invalid attribute name '{key}'", pos
        if not (re_word.match(value) or re_string.match(value)):
            return f"invalid value of attribute '{key}'", pos
    
    return "malformed attribute list", start

def nesting(source, re_brace = re.compile(r'[{}]')):
    """
    Max. nesting depth of braces in `source` and the position of the '{' that opens the deepest block,
    as a pair (depth, pos). Braces inside quoted attribute values are counted too, so the depth may be overestimated.
    """
    depth = deepest = 0
    pos = None
    for match in re_brace.finditer(source):
        if match.group() == '{':
            depth += 1
            if depth > deepest: deepest, pos = depth, match.start()
        elif depth:
            depth -= 1
    return deepest, pos


_extra_frames = []              # extra recursion depth requested by parse() calls in progress, in all threads
_extra_lock   = threading.Lock()
_base_limit   = None            # interpreter's recursion limit from before the 1st of the parse() calls in progress

@contextmanager
def deeper_recursion(frames):
    """
    Raise the interpreter's recursion limit by `frames` for the duration of a `with` block, then restore it.
    Nested and concurrent (multi-threaded) uses are combined: the limit is raised by the max. of all requests in progress.
    """
    global _base_limit
    with _extra_lock:
        if not _extra_frames: _base_limit = sys.getrecursionlimit()
        _extra_frames.append(frames)
        sys.setrecursionlimit(_base_limit + max(_extra_frames))
    try:
        yield
    finally:
        with _extra_lock:
            _extra_frames.remove(frames)
            sys.setrecursionlimit(_base_limit + max(_extra_frames, default = 0))
    

#####################################################################################################################################################
#####
#####  CUSTOM RULES
#####

# Rules implemented as functions instead of grammar text. They raise GridError the moment the matcher
# reaches a construct that is certainly wrong, so that an error is never hidden by a later one.
# Function signatures follow parsimonious conventions for custom rules: (text, pos) for simple rules,
# returning the end position or None; (text, pos, cache, error, grammar) for complex ones, returning a Node or None.

def tag_rule(word_chars):
    re_word = re.compile(r'[%s]+' % word_chars)
    
    def tag(text, pos):
        """Tag name after `~`, resolved to an ElementKind right away."""
        match = re_word.match(text, pos)
        if match is None: return None
        ElementKind.resolve(match.group(), pos, text)
        return match.end()
    
    return tag

def attrs_malformed_rule(word_chars):
    re_group = re.compile(r'\([^(){}~]*\)?')
    
    def attrs_malformed(text, pos):
        """Parenthesised group after a tag that is not a valid attribute list."""
        end = re_group.match(text, pos).end()
        msg, where = diagnose_attrs(text, pos, end, word_chars)
        raise MalformedAttributeList(msg, where, text)
    
    return attrs_malformed

def content_open(text, pos, cache, error, grammar):
    """Content block without a closing brace. Matches the same children as `content_closed` does."""
    if not text.startswith('{', pos): return None
    child = grammar['child']
    end = pos + 1
    node = child.match_core(text, end, cache, error)
    while node is not None:
        end = node.end
        node = child.match_core(text, end, cache, error)
    if end < len(text): return None
    raise UnterminatedContent("content block is not closed with '}'", pos, text)
    

#####################################################################################################################################################
#####
#####  GRID GRAMMAR
#####

class Grammar(Parsimonious):
    
    standard = None     # class-level instance of Grammar with standard character classes, shared by all parsers
    
    def __init__(self, word_chars = WORD_CHARS):
        """
        :param word_chars: characters that make up words (tag names, attribute keys and values),
                           as a body of a regex character class
        """
        placeholders = {'WORD_CHARS': word_chars}
        super(Grammar, self).__init__(grammar % placeholders,
                                      tag = tag_rule(word_chars),
                                      attrs_malformed = attrs_malformed_rule(word_chars),
                                      content_open = content_open)


Grammar.standard = Grammar()


#####################################################################################################################################################
#####
#####  GRID TREE
#####

class GridTree(NodeVisitor):
    """
    Builds a document tree (Element & PlainText nodes) out of the raw AST returned by parsimonious.
    Visiting goes bottom-up, so children are built before their parent. All errors have been detected
    during matching already; RecursionError is let through unwrapped for GridParser to report.
    """
    
    unwrapped_exceptions = (GridError, RecursionError)
    
    source    = None        # full text of the document
    trim_text = False       # if True, plain text runs are stripped of surrounding whitespace, and dropped if empty
    
    def __init__(self, source, trim_text = False):
        self.source = source
        self.trim_text = trim_text
        
    def view(self, node):
        return TextView(self.source, node.start, node.end)
    
    def generic_visit(self, node, visited_children):
        return visited_children
    
    def visit_document(self, node, visited_children):
        _, element, _ = visited_children
        return element
    
    ###  ELEMENTS  ###
    
    def visit_element(self, node, visited_children):
        _, kind, _, attributes, content = visited_children
        return Element(kind, attributes, content)
    
    def visit_tag(self, node, visited_children):
        return ElementKind.resolve(self.view(node))
    
    ###  ATTRIBUTES  ###
    
    def visit_attrs_opt(self, node, visited_children):
        if not visited_children: return {}
        (attributes, _), = visited_children
        return attributes
    
    def visit_attrs(self, node, visited_children):
        _, (attributes,) = visited_children
        return attributes
    
    def visit_attrs_valid(self, node, visited_children):
        _, _, first, others, _, _ = visited_children
        attributes = {}
        for key, value in [first] + others:
            attributes[key] = value                 # duplicate keys: the last one wins
        return attributes
    
    def visit_attr_next(self, node, visited_children):
        return visited_children[-1]
    
    def visit_attr(self, node, visited_children):
        key, _, _, _, value = visited_children
        return key, value
    
    def visit_value(self, node, visited_children):
        return visited_children[0]
    
    def visit_word(self, node, visited_children):
        return self.view(node)
    
    def visit_string(self, node, visited_children):
        return TextView(self.source, node.start + 1, node.end - 1)      # surrounding quotes excluded
    
    ###  CONTENT  ###
    
    def visit_content(self, node, visited_children):
        return visited_children[0]
    
    def visit_content_closed(self, node, visited_children):
        _, children, _ = visited_children
        return [child for child in children if child is not None]
    
    def visit_child(self, node, visited_children):
        return visited_children[0]
    
    def visit_text(self, node, visited_children):
        text = self.view(node)
        if self.trim_text:
            text = text.strip()
            if not text: return None
        return PlainText(text)
    

#####################################################################################################################################################
#####
#####  GRID PARSER
#####

class GridParser:
    """
    Parser of grid markup documents. Stateless apart from configuration, so a single instance
    can be reused for any number of documents.
    """
    
    config_default = {
        'strict':       True,           # if True, any non-whitespace input after the root element is an error; otherwise it's ignored
        'trim_text':    False,          # if True, plain text runs are stripped of surrounding whitespace and whitespace-only runs are dropped
    }
    config = None
    
    def __init__(self, grammar = None, **config):
        unknown = set(config) - set(self.config_default)
        if unknown: raise ConfigError(f"unknown configuration option(s): {', '.join(sorted(unknown))}")
        
        self.config = self.config_default.copy()
        self.config.update(**config)
        self.grammar = grammar or Grammar.standard
        
    def parse(self, source):
        """Parse `source` text and return the root Element of the document tree."""
        
        logger.debug("parsing document of %s characters (strict = %s)", len(source), self.config['strict'])
        
        if not source.strip(WHITESPACE):
            raise EmptyDocument("document is empty, no root element found")

        # matching and tree building both recurse into nested blocks, with a roughly constant no. of frames per level
        depth, deepest = nesting(source)
        tree = GridTree(source, trim_text = self.config['trim_text'])
        try:
            with deeper_recursion(min(depth, MAX_NESTING) * FRAMES_PER_LEVEL):
                ast  = self._match(source)
                root = tree.visit(ast)
        except RecursionError:
            raise NestingTooDeep(f"document is nested too deeply ({depth} levels)", deepest, source) from None

        logger.debug("parsed document with root element <%s>", root.kind.value)
        return root
        
    def _match(self, source):
        """Run the grammar over `source` and return the raw AST; convert parsimonious errors to GridError."""
        try:
            if self.config['strict']:
                return self.grammar.parse(source)
            return self.grammar.match(source)
        except IncompleteParseError as ex:
            raise TrailingInput("unexpected input after the root element", ex.pos, source) from None
        except ParseError as ex:
            raise LexicalError(describe_failure(ex), ex.pos, source) from None


def parse(source, **config):
    """Parse a grid markup document with a given configuration, see GridParser.config_default."""
    return GridParser(**config).parse(source)
