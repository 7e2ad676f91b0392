"""Book stylesheet and HTML page template."""

from html import escape

from pygments.formatters import HtmlFormatter

CODE_STYLE = "github-dark"

BOOK_CSS = """
* { margin: 0; padding: 0; box-sizing: border-box; }

:root {
  --color-text: #1f2328;
  --color-text-muted: #59636e;
  --color-accent: #0969da;
  --color-code-bg: #0d1117;
  --color-code-border: #d0d7de;
  --font-sans: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, Helvetica, Arial, sans-serif;
  --font-mono: "IBM Plex Mono", Consolas, Monaco, "Courier New", monospace;
  --space-sm: 0.5rem;
  --space-md: 1rem;
  --space-lg: 1.5rem;
  --space-xl: 2rem;
  --space-2xl: 3rem;
  --sidebar-width: 280px;
  --content-width: 820px;
}

body {
  font-family: var(--font-sans);
  font-size: 16px;
  line-height: 1.7;
  color: var(--color-text);
  background: #fff;
}

.book-container { display: flex; }

.toc-sidebar {
  position: fixed;
  top: 0;
  left: 0;
  width: var(--sidebar-width);
  height: 100vh;
  overflow-y: auto;
  padding: var(--space-xl) var(--space-lg);
  border-right: 1px solid var(--color-code-border);
  background: #f6f8fa;
}
.toc-sidebar h2 { font-size: 1rem; margin-bottom: var(--space-md); }
.toc-list { list-style: none; }
.toc-list li { margin-bottom: 0.25rem; }
.toc-list a { color: var(--color-text-muted); text-decoration: none; font-size: 0.875rem; }
.toc-list li.toc-h2 a { padding-left: var(--space-xl); font-size: 0.8125rem; }

.main-content {
  margin-left: var(--sidebar-width);
  padding: var(--space-2xl);
  max-width: calc(var(--content-width) + var(--space-2xl) * 2);
}

h1 { font-size: 2.25rem; margin: var(--space-2xl) 0 var(--space-lg); }
h2 { font-size: 1.75rem; margin: var(--space-xl) 0 var(--space-md); }
h3 { font-size: 1.375rem; margin: var(--space-lg) 0 var(--space-sm); }
h4 { font-size: 1.125rem; margin: var(--space-md) 0 var(--space-sm); }
p { margin-bottom: var(--space-md); }
a { color: var(--color-accent); }
ul, ol { margin: 0 0 var(--space-md) var(--space-xl); }
blockquote {
  margin: var(--space-md) 0;
  padding: var(--space-sm) var(--space-md);
  border-left: 4px solid var(--color-accent);
  color: var(--color-text-muted);
}

code { font-family: var(--font-mono); font-size: 0.875em; }
:not(pre) > code { background: #eff1f3; padding: 0.1em 0.35em; border-radius: 4px; }
.codehilite {
  margin-bottom: var(--space-md);
  padding: var(--space-md);
  border-radius: 6px;
  overflow-x: auto;
  background: var(--color-code-bg);
}
.codehilite pre { white-space: pre; }

table { border-collapse: collapse; width: 100%; margin-bottom: var(--space-md); }
th, td { border: 1px solid var(--color-code-border); padding: var(--space-sm) var(--space-md); text-align: left; }
th { background: #f6f8fa; font-weight: 600; }

hr { border: 0; border-top: 1px solid var(--color-code-border); margin: var(--space-2xl) 0; }

.title-page { text-align: center; padding: 6rem 0 4rem; }
.title-page h1 { font-size: 3rem; margin-bottom: var(--space-md); }
.title-page .subtitle { font-size: 1.5rem; color: var(--color-text-muted); margin-bottom: var(--space-xl); }
.title-page .author { font-size: 1.125rem; color: var(--color-text-muted); }

@media print {
  .toc-sidebar { display: none; }
  .main-content { margin-left: 0; padding: 0; max-width: none; }
  .title-page { page-break-after: always; }
  .chapter-section { page-break-before: always; }
  .codehilite { white-space: pre-wrap; page-break-inside: avoid; }
  .codehilite pre { white-space: pre-wrap; }
  h1, h2, h3 { page-break-after: avoid; }
  blockquote { page-break-inside: avoid; }
  hr { display: none; }
}
"""


def book_stylesheet() -> str:
    """Full stylesheet: layout rules plus the Pygments code theme."""
    code_css = HtmlFormatter(style=CODE_STYLE).get_style_defs(".codehilite")
    return f"{BOOK_CSS}\n/* Syntax highlighting ({CODE_STYLE}) */\n{code_css}\n"


def title_page(title: str, subtitle: str, author: str) -> str:
    return (
        '<div class="title-page">'
        f"<h1>{escape(title)}</h1>"
        f'<p class="subtitle">{escape(subtitle)}</p>'
        f'<p class="author">By {escape(author)}</p>'
        "</div>"
    )


def toc_list(entries: list[tuple[int, str, str]]) -> str:
    """Render (level, anchor id, label) entries as the sidebar list."""
    items = [
        f'<li class="toc-h{level}"><a href="#{escape(anchor)}">{escape(label)}</a></li>'
        for level, anchor, label in entries
    ]
    return "\n".join(items)


def page(title: str, content: str, toc: str, css: str) -> str:
    """Wrap the assembled book in a standalone HTML page."""
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{escape(title)}</title>
    <style>{css}</style>
</head>
<body>
    <div class="book-container">
        <nav class="toc-sidebar">
            <h2>Table of Contents</h2>
            <ul class="toc-list">
{toc}
            </ul>
        </nav>
        <main class="main-content">
            <div class="chapter">
{content}
            </div>
        </main>
    </div>
</body>
</html>
"""
