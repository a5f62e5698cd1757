"""pytest integration for callbook: fixtures and the unverified-call teardown sweep."""
