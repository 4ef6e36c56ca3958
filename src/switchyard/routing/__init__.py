"""Routing — guarded handlers combined with first-match-wins semantics.

Routes are declared once at startup: templates are compiled into cached
matchers and binding specifications are parsed before any request is
served. Dispatch itself is a pure, one-shot decision per request.
"""
