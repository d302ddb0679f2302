import pytest
import sys

@pytest.fixture(autouse=True)
def clean_aerojax_imports():
    yield
    keys_to_delete = {key for key in sys.modules if key == "aerojax" or key.startswith("aerojax.")}
    for key in keys_to_delete:
        del sys.modules[key]
