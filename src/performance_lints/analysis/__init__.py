"""
Static Analysis Package.

LibCST visitors and pure functions implementing the resource lifecycle checks.

Modules:
    - ``type_index``: Per-module declarations backing type resolution.
    - ``classifier``: Deciding whether an instantiation is disposable.
    - ``scope``: Local Scope Analyzer (function bodies).
    - ``fields``: Class Field Analyzer (class declarations).
    - ``missing_dispose``: The rule visitor dispatching to both analyzers.
"""
