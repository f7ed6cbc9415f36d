"""Math rendering collaborator for pseudotex.

The renderer never typesets math itself. Each ``$...$`` fragment is handed
to a ``render_math(source) -> markup`` callable and the returned markup is
spliced into the output verbatim. Inject KaTeX, MathJax server-side
rendering, or a test stub by passing a different callable.

The default emits the TeX source inside MathJax/KaTeX auto-render
delimiters, leaving actual typesetting to the client.

Thread Safety:
Collaborators may be called from several render threads at once and must
be reentrant. The default is stateless.

"""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeAlias
from html import escape as html_escape

MathRenderer: TypeAlias = Callable[[str], str]


def render_math_delimited(source: str) -> str:
    """Render math for client-side typesetting.

    Uses a span with the math class for CSS styling and JS rendering. The
    content is escaped and wrapped in ``\\(`` ``\\)`` delimiters.

    Example:
        >>> render_math_delimited("x < y")
        '<span class="math notranslate nohighlight">\\\\(x &lt; y\\\\)</span>'
    """
    return f'<span class="math notranslate nohighlight">\\({html_escape(source)}\\)</span>'
