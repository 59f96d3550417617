"""
Shared fixtures for the Mongo_Ops test suite.
"""

from typing import Any, Dict, List

import pytest


class FakeDatabase:
    """Database stand-in replaying canned command responses in order."""

    def __init__(self, responses: List[Any]):
        self._responses = list(responses)
        self.commands: List[Dict[str, Any]] = []
        self.command_options: List[Dict[str, Any]] = []

    def command(self, command, **kwargs):
        self.commands.append(command)
        self.command_options.append(kwargs)
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class FakeClient:
    """MongoClient stand-in; every database name resolves to the same FakeDatabase."""

    def __init__(self, *responses):
        self.database = FakeDatabase(list(responses))
        self.requested_databases: List[str] = []

    def __getitem__(self, name):
        self.requested_databases.append(name)
        return self.database


@pytest.fixture
def make_client():
    return FakeClient
