from fishforge.testing.fixtures import manual_clock, memory_app  # noqa: F401
