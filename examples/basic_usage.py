#!/usr/bin/env python3
"""
Basic usage example for the TypedConfig package.
"""
import json
import tempfile
import time
from datetime import date
from pathlib import Path

from TypedConfig import TimeUnit, load_properties


def print_json(data):
    """Print data as formatted JSON."""
    print(json.dumps(data, indent=2, ensure_ascii=False))


def main():
    """Main function."""
    with tempfile.TemporaryDirectory() as temp_dir:
        path = Path(temp_dir) / "app.properties"
        path.write_text("name=Ada\nretries=3\nhosts=alpha,beta\n", encoding="utf-8")

        # Load the file and poll it for changes every 100 ms
        with load_properties(path, polling_interval=100, polling_unit=TimeUnit.MILLISECONDS) as config:
            print(f"name: {config.get(str, 'name')}")
            print(f"retries: {config.get(int, 'retries')}")
            print(f"hosts: {config.get_list(str, 'hosts')}")

            # Nested keys create intermediate maps on demand
            config.set_nested("database.pool.size", 10)
            config.set_nested("database.started", date(2012, 2, 25))
            print("\nTree after nested writes:")
            print_json(config.as_dict())

            # Edit the file; the poller replaces the tree with the new contents
            print("\nRewriting the file...")
            path.write_text("name=Grace\nretries=5\n", encoding="utf-8")
            time.sleep(1.5)
            print(f"retries after reload: {config.get(int, 'retries')}")
            print(f"database.pool.size after reload: {config.get_nested(int, 'database.pool.size')}")

            # Save the current tree as YAML; the suffix picks the format
            saved = config.save(Path(temp_dir) / "app.yml")
            print(f"\nSaved to {saved.name}:")
            print(saved.read_text(encoding="utf-8"))


if __name__ == "__main__":
    main()
