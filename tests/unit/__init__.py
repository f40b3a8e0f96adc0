"""
Unit tests for the test-double engine.

Each module covers one component: matchers, expectation store, proxy
dispatcher, verifier and the fluent Mock API built on top of them.
"""
