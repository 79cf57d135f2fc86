"""Services Layer — async operations over the document store.

Invariants:
    - Every mutation is one DocumentStore.with_document() call
    - Services own the clock and logging; core owns the rules
"""
