pytest_plugins = ["reelcheck.harness.plugin", "pytester"]
