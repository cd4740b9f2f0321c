def test_import_cursedfarm_package() -> None:
    import importlib

    module = importlib.import_module("cursedfarm")
    assert module is not None
    assert module.__version__


def test_import_services_no_side_effects() -> None:
    from cursedfarm.services import build_services

    assert callable(build_services)


def test_import_rng_no_side_effects() -> None:
    from cursedfarm.core.rng import RNG

    rng = RNG(42)
    value = rng.randint(0, 1)
    assert value in (0, 1)
