"""Pytest fixtures."""

import json
import pathlib
import shutil

import pytest

from stutrack.model import config, database, session


TEST_FOLDER = pathlib.Path(__file__).parent
DATA_FOLDER = TEST_FOLDER / "data"
OUTPUT_FOLDER = TEST_FOLDER / "output"


@pytest.fixture()
def empty_output_folder() -> pathlib.Path:
    """Create an empty output folder prior to each test."""
    if OUTPUT_FOLDER.exists():
        for item in OUTPUT_FOLDER.iterdir():
            if item.is_dir():
                shutil.rmtree(item, ignore_errors=True)
            else:
                item.unlink()
    else:
        OUTPUT_FOLDER.mkdir(parents=True)
    return OUTPUT_FOLDER


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove MySQL environment variables that could leak into tests."""
    for var_name in config.ENV_VARS.values():
        monkeypatch.delenv(var_name, raising=False)
    return monkeypatch


@pytest.fixture
def empty_database(empty_output_folder: pathlib.Path) -> database.DBase:
    """An empty stutrack database, with tables created."""
    return database.DBase(OUTPUT_FOLDER / "testdatabase.db", create_new=True)


@pytest.fixture
def full_dbase(empty_database: database.DBase) -> database.DBase:
    """Database with students and interactions."""
    with open(DATA_FOLDER / "testdata-full.json") as jfile:
        tracker_data = json.load(jfile)
    empty_database.load_from_dict(tracker_data)
    return empty_database


@pytest.fixture
def tracker_test_data() -> dict[str, list]:
    """Get test data as a dictionary.

    Dictionary has two keys: students and interactions, where each key is a
    list of dictionaries.
    """
    with open(DATA_FOLDER / "testdata-full.json") as jfile:
        test_data = json.load(jfile)
    return test_data


@pytest.fixture
def state() -> session.SessionState:
    """Fresh session state, nothing selected."""
    return session.SessionState()
