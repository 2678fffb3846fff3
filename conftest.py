"""
Global pytest configuration for fuzzysig.
"""


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests exercising the full evaluation pipeline"
    )
    config.addinivalue_line("markers", "stress: marks tests as stress tests")
