"""Feature modules: book (HTML assembly) and render (PDF export)."""
