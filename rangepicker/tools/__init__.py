"""rangepicker.tools package

Command-line utilities that drive the engine from JSON (command replay).

Keep this package's __init__ free of eager imports so that
`python -m rangepicker.tools.<name>` has no import-time side effects.
"""

__all__: list[str] = []
