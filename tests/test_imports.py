"""
Smoke tests to verify all modules can be imported.
"""

def test_import_forge_core():
    import forge_core
    assert hasattr(forge_core, '__version__')


def test_import_evaluator():
    import evaluator
    assert hasattr(evaluator, '__version__')


def test_import_materializer():
    import materializer
    assert hasattr(materializer, '__version__')


def test_import_store():
    import store
    assert hasattr(store, '__version__')


def test_import_jobs():
    import jobs
    assert hasattr(jobs, '__version__')


def test_import_cli():
    from jobs.cli import app
    assert app is not None
