"""Structural lines whose coverage data can't be trusted.

Closing braces, ``else`` lines, attributes, generic impl headers and
comment-only lines are often non-executable, or reported inconsistently by
coverage tools. After the region state machine has resolved such a line it
is forced to ``MaybeTested(explicit=False)``; the region carried forward is
left alone.

``* text`` and ``*/`` lines only count as comment lines inside an open
``/* ... */`` block, so the scanner tracks that state with
:func:`block_comment_open_after`.
"""

from __future__ import annotations

import re

from covannot.annotations.models import Coverage, LineAnnotation

UNTRUSTED_ANNOTATION = LineAnnotation(Coverage.MAYBE_TESTED, explicit=False)

_UNTRUSTED_PATTERNS: tuple[re.Pattern[str], ...] = (
    # }   })   }));   };
    re.compile(r"^\s*\}[\s)]*;?\s*$"),
    # else   else {   } else   } else {
    re.compile(r"^\s*(\}\s*)?else\s*\{?\s*$"),
    # #[derive(Debug)]   #![allow(dead_code)]
    re.compile(r"^\s*#!?\[.*\]\s*$"),
    # @Override   @Test(expected = Foo.class)
    re.compile(r"^\s*@\w+(\(.*\))?\s*$"),
    # impl<T> Trait for Type<T> {   impl<'a> Type<'a>
    re.compile(r"^\s*(unsafe\s+)?impl\s*<.*>.*$"),
    # // comment   /* comment */
    re.compile(r"^\s*(//|/\*)"),
)

# * continuation   */
_BLOCK_CONTINUATION = re.compile(r"^\s*(\*/|\*(\s|$))")


def is_untrusted_line(line: str, *, in_block_comment: bool = False) -> bool:
    """Whether the raw line text matches one of the structural patterns.

    Args:
        line: Physical line text.
        in_block_comment: Whether a ``/*`` comment is still open at the
            start of the line.
    """
    text = line.rstrip("\r\n")
    if in_block_comment and _BLOCK_CONTINUATION.match(text):
        return True
    return any(pattern.match(text) for pattern in _UNTRUSTED_PATTERNS)


def block_comment_open_after(line: str, in_block_comment: bool) -> bool:
    """Whether a ``/*`` comment is still open at the end of the line.

    String literals are not recognized.
    """
    pos = 0
    while True:
        if in_block_comment:
            end = line.find("*/", pos)
            if end < 0:
                return True
            in_block_comment = False
            pos = end + 2
        else:
            start = line.find("/*", pos)
            if start < 0:
                return False
            line_comment = line.find("//", pos)
            if 0 <= line_comment < start:
                return False
            in_block_comment = True
            pos = start + 2
