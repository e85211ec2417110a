from chorepack.testing.fixtures import manual_scheduler, memory_app  # noqa: F401
