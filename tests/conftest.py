"""
Pytest configuration and shared fixtures
"""

import pytest


@pytest.fixture
def write_relation(tmp_path):
    """Factory: write lines into a relation file and return its path"""

    def _write(name, lines):
        path = tmp_path / name
        path.write_text("".join(line + "\n" for line in lines), encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture
def left_lines():
    """Left relation (key column 0)"""
    return ["001 a x", "001 a y", "002 b z"]


@pytest.fixture
def right_lines():
    """Right relation (key column 0)"""
    return ["001 p", "002 q", "002 r"]


@pytest.fixture
def customers_lines():
    """Customers: id name city (unsorted, key column 0)"""
    return [
        "3 Charlie SF",
        "1 Alice NYC",
        "4 David NYC",
        "2 Bob LA",
    ]


@pytest.fixture
def orders_lines():
    """Orders: order_id customer_id amount (unsorted, key column 1)"""
    return [
        "104 3 300",
        "101 1 100",
        "103 2 150",
        "102 1 200",
        "105 1 50",
        "106 9 999",
    ]
