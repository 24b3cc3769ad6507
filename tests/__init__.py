# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the ArgenStats API:
# - test_models.py, test_utils.py: Unit tests for schemas and helpers
# - test_<indicator>.py: Service and route tests per indicator
# - test_middleware.py, test_webhooks.py, ...: Integration tests for the app
#
# Services talk to a FakeDatabase (see conftest.py) instead of Supabase.
#
# Run tests with: pytest
# =============================================================================
