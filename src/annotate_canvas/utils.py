"""Module containing useful util functions"""

import json
import os


def read_json(file_path: str) -> dict:
    """Reads a JSON file and returns its contents as a dictionary."""
    with open(file_path, "r") as f:
        return json.load(f)


def write_json(file_path: str, data: dict) -> None:
    """Writes a dictionary to a JSON file, creating parent folders."""
    folder = os.path.dirname(file_path)
    if folder:
        os.makedirs(folder, exist_ok=True)
    with open(file_path, "w") as f:
        json.dump(data, f)
