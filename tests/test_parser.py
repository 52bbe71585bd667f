"""
Run:
$
$  pytest -v tests/test_parser.py
"""

import sys, pytest

from gridmarkup import parse, GridParser, Element, PlainText, ElementKind
from gridmarkup.errors import ConfigError, UnterminatedContent, UnknownElementKind, NestingTooDeep

gp = GridParser()


#####################################################################################################################################################
#####
#####  UTILITIES
#####

def nested(n, closing = None):
    """Document with `n` uniformly nested <div> elements; `closing` is the no. of closing braces (default: n)."""
    if closing is None: closing = n
    return '~div{' * n + '}' * closing

def depth(node):
    """No. of elements on the path from `node` down along first children."""
    d = 0
    while isinstance(node, Element):
        d += 1
        node = node.content[0] if node.content else None
    return d


#####################################################################################################################################################
#####
#####  TESTS
#####

def test_001_simple_element():
    assert gp.parse("~h1{Hello}") == Element(ElementKind.H1, {}, [PlainText("Hello")])
    
    root = gp.parse("~h1 { Hello There.\nHow are you doing today? }")
    assert root == Element(ElementKind.H1, {}, [PlainText(" Hello There.\nHow are you doing today? ")])
    assert root.attributes == {}


def test_002_attributes():
    assert gp.parse("~h1(data: test){Hi}") == Element(ElementKind.H1, {"data": "test"}, [PlainText("Hi")])
    assert gp.parse("~h1(data: test) { with attributes }") == \
           Element(ElementKind.H1, {"data": "test"}, [PlainText(" with attributes ")])
    
    root = gp.parse("~link ( href : /about.html ,title:\"About us\" ) {About}")
    assert root.kind is ElementKind.LINK
    assert root.attributes == {"href": "/about.html", "title": "About us"}
    assert root.attributes["title"] == "About us"
    
    # duplicate keys: the last value wins
    assert gp.parse("~p(a: 1, b: 2, a: 3){}").attributes == {"a": "3", "b": "2"}
    
    # words may contain letters, digits and the characters: _ . - / !
    assert gp.parse("~div(data-x_1: a.b/c!){}").attributes == {"data-x_1": "a.b/c!"}


def test_003_attribute_order():
    a = gp.parse("~div(id: main, class: wide, role: nav){}")
    b = gp.parse("~div(role: nav, id: main, class: wide){}")
    assert a.attributes == b.attributes
    assert a == b


def test_004_nested_elements():
    root = gp.parse("~div(data: test){~p{inner}}")
    assert root == Element(ElementKind.DIV, {"data": "test"}, [Element(ElementKind.P, {}, [PlainText("inner")])])
    
    root = gp.parse("~div(data: test) {~p{ with attributes }}")
    assert root == Element(ElementKind.DIV, {"data": "test"}, [Element(ElementKind.P, {}, [PlainText(" with attributes ")])])


def test_005_mixed_content():
    root = gp.parse("~p{Text with ~b{bold} words and a ~link(href: x){link}.}")
    assert root == Element(ElementKind.P, {}, [
        PlainText("Text with "),
        Element(ElementKind.B, {}, [PlainText("bold")]),
        PlainText(" words and a "),
        Element(ElementKind.LINK, {"href": "x"}, [PlainText("link")]),
        PlainText("."),
    ])
    assert root.plaintext() == "Text with bold words and a link."
    
    # `~` ends a text run even in the middle of a word
    root = gp.parse("~p{abc~b{d}ef}")
    assert [str(c.text) for c in root.content if isinstance(c, PlainText)] == ["abc", "ef"]


def test_006_empty_content():
    assert gp.parse("~p{}") == Element(ElementKind.P, {}, [])
    assert gp.parse("~br{}").content == ()
    assert gp.parse("~br(clear: all){}") == Element(ElementKind.BR, {"clear": "all"})


def test_007_whitespace():
    src = """
        ~html {
            ~title{Page}
            ~body { ~h2{x} }
        }
    """
    root = gp.parse(src)
    assert root.kind is ElementKind.HTML
    kinds = [n.kind for n in root.walk() if isinstance(n, Element)]
    assert kinds == [ElementKind.HTML, ElementKind.TITLE, ElementKind.BODY, ElementKind.H2]
    
    # whitespace between elements is kept as plain text by default
    texts = [n for n in root.content if isinstance(n, PlainText)]
    assert len(texts) == 3 and all(not str(t.text).strip() for t in texts)


def test_008_trim_text():
    gp_trim = GridParser(trim_text = True)
    src = "~div{ ~p{  x  } \n }"
    assert gp_trim.parse(src) == Element(ElementKind.DIV, {}, [Element(ElementKind.P, {}, [PlainText("x")])])
    assert gp.parse(src) == Element(ElementKind.DIV, {}, [
        PlainText(" "),
        Element(ElementKind.P, {}, [PlainText("  x  ")]),
        PlainText(" \n "),
    ])
    assert gp_trim.parse("~p{   }") == Element(ElementKind.P)


def test_009_trailing_input():
    assert gp.parse("  \n~p{x}\n\t ") == Element(ElementKind.P, {}, [PlainText("x")])
    
    lenient = GridParser(strict = False)
    assert lenient.parse("~p{x} whatever ~div{}") == Element(ElementKind.P, {}, [PlainText("x")])
    assert parse("~p{x}}", strict = False) == Element(ElementKind.P, {}, [PlainText("x")])


def test_010_reparse():
    src = "~html{~h1(id: top){Title} ~div{~p{one} ~p{two ~b{three}}}}"
    assert gp.parse(src) == gp.parse(src)
    assert GridParser().parse(src) == parse(src)


def test_011_nesting_depth():
    limit = sys.getrecursionlimit()
    for n in [1, 2, 3, 10, 25, 100, 500]:
        root = gp.parse(nested(n))
        assert depth(root) == n
        
        with pytest.raises(UnterminatedContent):
            gp.parse(nested(n, closing = n - 1))
    
    assert sys.getrecursionlimit() == limit          # restored after parsing
    
    root = gp.parse("~div{" + nested(300) + "~p{x}}")
    assert depth(root) == 301 and root.content[-1] == Element(ElementKind.P, {}, [PlainText("x")])
    
    # errors found deep inside are still reported as GridError
    with pytest.raises(UnknownElementKind):
        gp.parse("~div{" * 200 + "~span{}" + "}" * 200)
    assert sys.getrecursionlimit() == limit


def test_011b_nesting_too_deep(monkeypatch):
    monkeypatch.setattr("gridmarkup.parser.MAX_NESTING", 1)
    limit = sys.getrecursionlimit()
    with pytest.raises(NestingTooDeep, match = r"nested too deeply \(400 levels\)") as ex_info:
        gp.parse(nested(400))
    assert ex_info.value.pos == 5 * 399 + 4                   # the innermost "{"
    assert sys.getrecursionlimit() == limit


def test_012_zero_copy():
    src = "~div(key: value){~p{some text}}"
    root = gp.parse(src)
    key, value = next(iter(root.attributes.items()))
    text = root.content[0].content[0].text
    
    assert key.source is src and value.source is src and text.source is src
    assert (key.start, key.end) == (5, 8)
    assert src[text.start:text.end] == "some text"


def test_013_aliases():
    assert gp.parse("~l(href: x){y}").kind is ElementKind.LINK


def test_014_config():
    with pytest.raises(ConfigError, match = 'colour'):
        GridParser(colour = True)
    assert GridParser(strict = False).config == {'strict': False, 'trim_text': False}
