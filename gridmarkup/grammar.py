"""
Grid Markup. A lightweight alternative to HTML for describing nested documents.

SYNTAX

Every element starts with a marker `~` followed directly by a tag name. An optional list of attributes
in parentheses may follow, and then a content block in braces:

    ~html {
        ~h1(id: top, class: "page title") { Hello }
        ~p { Plain text with ~b{bold} words and a ~link(href: /about.html){link}. }
        ~br{}
    }

- tag:        a word resolved against a closed vocabulary of element kinds (html, h1, p, div, ...)
- attributes: 1+ comma-separated `key: value` pairs; keys are words, values are words or "quoted strings";
              an empty list `()` is not allowed
- content:    sequence of nested elements and plain text runs; `{}` means an element with no content
- text:       any run of characters other than `~`, `{`, `}`; there is no escaping, so `~` inside
              text always starts a new element

Whitespace between structural tokens is optional and carries no meaning, except inside text,
where it is preserved as written. A document consists of exactly one root element.

PARSING

The grammar below is a PEG in parsimonious notation, so alternatives are ordered and committed.
The presence of an attribute list is decided by looking ahead for `(` only. Three rules are custom
functions passed to the grammar (see parser.py) rather than text rules, because they report errors
at the moment the matcher reaches them, so that errors always come out in document order:
- `tag`              matches a word and resolves it to an element kind; an unknown name is an error
- `attrs_malformed`  is tried after `(` when the text isn't a valid attribute list; always an error
- `content_open`     is tried when a content block has no closing brace; an error if the block
                     runs into the end of input, otherwise a plain mismatch
"""

#####################################################################################################################################################
#####
#####  GRAMMAR
#####

grammar = r"""

###  DOCUMENT

document         =  ws element ws

###  ELEMENTS

element          =  marker tag ws attrs_opt content          # tag: custom rule

###  ATTRIBUTES

attrs_opt        =  (attrs ws)?
attrs            =  &"(" (attrs_valid / attrs_malformed)            # one-character lookahead commits to an attribute list; attrs_malformed: custom rule

attrs_valid      =  "(" ws attr attr_next* ws ")"
attr_next        =  ws comma ws attr
attr             =  word ws colon ws value
value            =  string / word

###  CONTENT

content          =  content_closed / content_open               # content_open: custom rule
content_closed   =  "{" child* "}"

child            =  element / text

###  TOKENS

marker           =  "~"
comma            =  ","
colon            =  ":"

text             =  ~r"[^~{}]+"
word             =  ~r"[%(WORD_CHARS)s]+"
string           =  ~r'"[^"]*"'
ws               =  ~r"[ \t\r\n]*"

"""

#####################################################################################################################################################

# human-readable descriptions of grammar rules, for error messages;
# only the rules that make a reliable "expected ..." hint are listed
EXPECTED = {
    'document':         "an element marker '~'",
    'element':          "an element marker '~'",
    'marker':           "an element marker '~'",
    'tag':              "a tag name after '~'",
    'word':             "a word",
    'content':          "'{' opening the content block",
    'content_closed':   "'{' opening the content block",
    'content_open':     "'{' opening the content block",
    'child':            "an element, plain text or '}'",
}
