"""
Mocking examples written with the standard library.

This package repeats the sample logger scenarios with ``unittest.mock`` so
the two styles can be compared side by side:
- MagicMock with a spec versus generated proxies
- assert_called_* helpers versus verify with Times
- side_effect versus returns_using / raises
"""
