"""
Test suites package.

Kept importable so tests can share fakes (`testsuites.unit.fakes`) and so
`run_tests.py` can address suites by path.
"""
