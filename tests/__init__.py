"""
Test suite for the understudy engine and its tutorial samples.

This package contains:
- unit/: Engine tests, one module per component
- samples/: Tutorial tests for stubs, mocks and mock repositories
- mocks/: The same scenarios written with unittest.mock for comparison
- contracts/: Interaction contracts loaded from contracts/*.yaml
"""
