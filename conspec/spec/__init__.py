"""Spec model and matching engine.

This package provides the building blocks of a spec:
1. Model — predicates, and/or, tuples, collections, conformers
2. Regex-ops — cat, alt, repetition, maybe and amp over sequences
3. Keys — required/optional key sets for maps, and flat key/value runs
4. Multi-specs and function specs
5. Engine — conform, explain, valid and unform entry points
"""
