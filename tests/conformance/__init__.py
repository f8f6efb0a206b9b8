"""
Conformance Test Suite

This suite defines the NORMATIVE behavior of an asset instance.
Any compliant implementation MUST pass these tests.

The tests are organized by invariant:
1. conservation.py - Transfers move balance but never create or destroy it
2. atomicity.py - Failed operations leave state unchanged
3. authorization.py - Role gates hold for every non-holder
4. determinism.py - Same calls, same state, same events

These tests use hypothesis for property-based testing.
"""
