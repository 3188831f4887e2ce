"""Input/output layer around the analyzer.

Public API:
    load_input(directory)          -- read CSV input dir -> (snapshot, meta)
    write_output(report, dir)      -- write exceptions.csv + summary.json
    summarize_exceptions(...)      -- aggregate counts for a result list
    render_xlsx(report, path)      -- multi-sheet exceptions.xlsx workbook
"""

from .reader import load_input
from .writer import summarize_exceptions, write_output

__all__ = [
    "load_input",
    "render_xlsx",
    "summarize_exceptions",
    "write_output",
]

# Lazy import for the optional heavy dependency (openpyxl).
def render_xlsx(*args, **kwargs):
    from .xlsx import render_xlsx as _fn
    return _fn(*args, **kwargs)
