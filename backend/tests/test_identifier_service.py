"""
NoteKeeper Backend: Identifier Service Tests
=============================================
"""

import uuid

import pytest

from notekeeper.exceptions import MalformedIdError
from notekeeper.services.identifier_service import is_well_formed, new_identifier, parse_identifier


class TestNewIdentifier:

    def test_identifiers_are_distinct(self):
        ids = {new_identifier() for _ in range(100)}

        assert len(ids) == 100

    def test_identifier_round_trips_through_parse(self):
        ident = new_identifier()

        assert parse_identifier(str(ident)) == ident


class TestParseIdentifier:

    def test_uppercase_is_accepted(self):
        ident = uuid.uuid4()

        assert parse_identifier(str(ident).upper()) == ident

    @pytest.mark.parametrize("raw", [
        "asdf",
        "",
        "5a3d5da59070081a82a3037f",
        "12345678123456781234567812345678",
        "{12345678-1234-5678-1234-567812345678}",
        "12345678-1234-5678-1234-56781234567g",
        " 12345678-1234-5678-1234-567812345678",
    ])
    def test_malformed(self, raw):
        assert not is_well_formed(raw)

        with pytest.raises(MalformedIdError) as exc_info:
            parse_identifier(raw, resource="note")

        assert exc_info.value.message == "malformatted id"
        assert exc_info.value.context["resource"] == "note"
        assert exc_info.value.raw_id == raw
