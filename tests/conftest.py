import pytest
from _pytest.nodes import Item

MARKERS_BY_DIRECTORY = {
    "units": pytest.mark.unit,
    "integrations": pytest.mark.integration,
    "e2e": pytest.mark.e2e,
}


def pytest_collection_modifyitems(items: list[Item]) -> None:
    """Marks every collected test after the suite directory it lives in.

    Args:
        items: A list of test items collected by pytest.
    """
    for item in items:
        for directory, marker in MARKERS_BY_DIRECTORY.items():
            if directory in item.path.parts:
                item.add_marker(marker)
                break
