#!/usr/bin/env python
"""
flatjoin Demo - sort, join and search two flat files

Demonstrates:
- Sorting with pre-sort filters
- Merge join on different key columns
- Output column selection
- Searching joined rows
- Execution plans
"""

import tempfile
from pathlib import Path

from flatjoin import Operator, build_filter, join, manipulate, search, sort


def write_sample_files(directory: Path):
    """Customers (id name city) and orders (order_id customer_id amount)"""
    customers = directory / "customers.txt"
    customers.write_text(
        "3 Charlie Tokyo\n"
        "1 Alice Osaka\n"
        "4 David Tokyo\n"
        "2 Bob Kyoto\n"
    )
    orders = directory / "orders.txt"
    orders.write_text(
        "104 3 3000\n"
        "101 1 1000\n"
        "103 2 1500\n"
        "102 1 2000\n"
        "105 4 500\n"
        "106 9 9999\n"
    )
    return str(customers), str(orders)


def demo_library_functions(customers, orders, work_dir):
    """Demo the sort/join/search functions"""
    print("=" * 60)
    print("DEMO 1: Library functions")
    print("=" * 60)

    print("\n1. sort(customers, key_column=0)")
    left_sorted = sort(customers, key_column=0, directory=work_dir)
    print(f"  {Path(left_sorted).read_text().splitlines()}")

    print("\n2. sort(orders, key_column=1, filters=amount >= 1000)")
    right_sorted = sort(
        orders, key_column=1, filters=build_filter(2, Operator.GTE, 1000), directory=work_dir
    )
    print(f"  {Path(right_sorted).read_text().splitlines()}")

    print("\n3. join(left_sorted, right_sorted, 0, 1)")
    rows = join(left_sorted, right_sorted, left_key_column=0, right_key_column=1)
    for row in rows:
        print(f"  {row!r}")

    print("\n4. search(rows, city = 'Tokyo')")
    for row in search(rows, build_filter(2, Operator.EQ, "Tokyo")):
        print(f"  {row!r}")

    Path(left_sorted).unlink()
    Path(right_sorted).unlink()


def demo_front_end(customers, orders, work_dir):
    """Demo the FlatFileManipulator front-end"""
    print("\n" + "=" * 60)
    print("DEMO 2: manipulate() front-end")
    print("=" * 60)

    with manipulate(
        customers,
        orders,
        left_key=0,
        right_key=1,
        left_columns=[1, 2],
        right_columns=[0, 2],
        temp_dir=work_dir,
    ) as m:
        m.left_sort_filter(2, "NE", "Kyoto")
        m.right_sort_filter(2, ">", 600)
        m.search_filter(3, "<", 3000)

        print("\nExecution plan:")
        print(m.explain())

        m.sort()
        joined = m.join()
        print(f"\nJoined ({len(joined)} rows):")
        for row in joined:
            print(f"  {row!r}")

        found = m.search()
        print(f"\nSearched ({len(found)} rows):")
        for record in found.split():
            print(f"  {record}")


def main():
    with tempfile.TemporaryDirectory() as tmp:
        work_dir = str(Path(tmp))
        customers, orders = write_sample_files(Path(tmp))

        demo_library_functions(customers, orders, work_dir)
        demo_front_end(customers, orders, work_dir)

    print("\n" + "=" * 60)
    print("All demos complete")
    print("=" * 60)


if __name__ == "__main__":
    main()
