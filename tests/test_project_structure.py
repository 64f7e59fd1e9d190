"""Basic project scaffolding tests."""

import importlib


def test_package_importable() -> None:
    """Verify the top-level package is importable."""
    import salvo  # noqa: F401  (import used to ensure availability)

    assert salvo is not None


def test_submodules_exist() -> None:
    modules = [
        "salvo.cli",
        "salvo.config",
        "salvo.preferences",
        "salvo.telemetry",
        "salvo.engine.board",
        "salvo.engine.ship",
        "salvo.engine.placement",
        "salvo.engine.attack",
        "salvo.engine.targeting",
        "salvo.engine.scheduler",
        "salvo.engine.session",
        "salvo.engine.instrumented_session",
    ]

    for module in modules:
        assert importlib.import_module(module) is not None
