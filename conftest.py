pytest_plugins = [
    "tests.fixtures.discord_fixtures",
    "tests.fixtures.store_fixtures",
]
