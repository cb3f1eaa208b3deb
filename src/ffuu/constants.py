"""Markup Constants

Fixed element and attribute sets used by the tokenizer, the formatter and the
asset collector.

Usage:
    from ffuu.constants import VOID_ELEMENTS, URI_ATTRIBUTES

References:
    - https://html.spec.whatwg.org/multipage/syntax.html#void-elements
    - https://html.spec.whatwg.org/multipage/indices.html#attributes-3
"""

# Elements that never have content or a separate close tag. Matching is done on
# the lowercased tag name; a trailing " /" marks any other tag as void too.
VOID_ELEMENTS = frozenset(
    [
        "area",
        "base",
        "basefont",
        "bgsound",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "keygen",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    ]
)

# Attributes whose values are URIs. Relative values are followed when copying a
# site's assets.
URI_ATTRIBUTES = frozenset(
    [
        "href",
        "src",
    ]
)

# Reserved tag that runs an external command and splices its output back in.
EMBED_TAG_NAME = "run"
EMBED_COMMAND_ATTRIBUTE = "command"
EMBED_ARGS_ATTRIBUTE = "args"

INDENT = "  "

# Source suffixes handled by a directory build.
HTML_SUFFIXES = frozenset([".html", ".htm"])
MARKDOWN_SUFFIXES = frozenset([".md", ".markdown"])
