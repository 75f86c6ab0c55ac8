def pytest_configure(config):
    config.addinivalue_line("markers", "slow: long-running stress tests (deselect with '-m \"not slow\"')")
