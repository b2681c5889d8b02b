"""
AuthModeler Test Suite

Test organization:
- unit/: Unit tests for individual modules
- property/: Property-based tests using Hypothesis
- conformance/: Spec conformance tests (TLA+ trace validation)
- integration/: AD integration tests (requires real AD environment)
"""
