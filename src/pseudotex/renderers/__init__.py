"""pseudotex renderers.

Renderers convert typed AST nodes into output formats.

Available Renderers:
- HtmlRenderer: Renders AST to indentation-aware HTML using StringBuilder

Thread Safety:
All renderers use a RenderContext local to each render() call.
Safe for concurrent use from multiple threads.

"""

from pseudotex.renderers.html import HtmlRenderer, RenderContext

__all__ = ["HtmlRenderer", "RenderContext"]
