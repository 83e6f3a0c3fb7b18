import pytest
import sys

@pytest.fixture(autouse=True)
def clean_jcoare_imports():
    yield
    keys_to_delete = {key for key in sys.modules if key == "jcoare" or key.startswith("jcoare.")}
    for key in keys_to_delete:
        del sys.modules[key]
