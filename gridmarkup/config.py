"""
Global configuration.
"""

#####################################################################################################################################################
#####
#####  LEXICAL CONFIGURATION
#####

# characters of a word (tag name, attribute key or value) as a regex character class:
# Unicode letters & digits, underscore, and the punctuation listed after \w;
# a word ends at the first character outside this class
WORD_CHARS = r"\w./!-"

# whitespace that may separate structural tokens
WHITESPACE = " \t\r\n"

# tag names accepted in addition to the canonical names of element kinds
TAG_ALIASES = {
    'l':    'link',
}


#####################################################################################################################################################
#####
#####  ERROR REPORTING
#####

EXCERPT_LENGTH = 20         # max. no. of source characters quoted in an error message after the error position


#####################################################################################################################################################
#####
#####  NESTING
#####

# parsing recurses into nested blocks; for every level of nesting in a document, the interpreter's
# recursion limit is raised by FRAMES_PER_LEVEL for the duration of parsing, up to MAX_NESTING levels;
# deeper documents fail with NestingTooDeep
FRAMES_PER_LEVEL = 16
MAX_NESTING      = 1000
