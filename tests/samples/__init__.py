"""
Tutorial tests for the sample loggers.

These modules demonstrate:
- Stubs: canned answers for state-based tests
- Mocks: verifying interactions with collaborators
- Combining stub answers and interaction checks on one fake
- Creating and verifying several mocks through a repository
"""
