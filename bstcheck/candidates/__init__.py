"""
Bundled ordered-set submissions.

Every module in this package that exposes make_candidate() is picked up by
bstcheck.registry.discover_package(). Modules whose name starts with an
underscore are skipped.
"""
