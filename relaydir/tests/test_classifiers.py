"""Registration and access heuristics tests"""

import pytest

from relaydir.normalizers.classifiers import determine_access_type, determine_registration_status


class TestRegistrationStatus:
    """Registration status inference"""

    @pytest.mark.parametrize(
        "record, expected",
        [
            ({"open": True}, "open"),
            ({"isOpen": False}, "closed"),
            ({"status": "募集中"}, "open"),
            ({"status": "満員"}, "closed"),
            ({"registrationStatus": "Closed"}, "closed"),
            ({"joinStatus": "Registration full"}, "closed"),
            ({"status": "Accepting new members"}, "open"),
            ({"status": "paused"}, "closed"),
            ({"open": "0"}, "closed"),
            ({"open": " 1 "}, "open"),
            ({"open": 0}, "closed"),
            ({"isOpen": 1}, "open"),
            ({"joinable": 5}, "open"),
        ],
    )
    def test_signals(self, record, expected):
        """Booleans and keywords decide the status"""
        assert determine_registration_status(record) == expected

    def test_first_decisive_candidate_wins(self):
        """An earlier field outranks a later one"""
        record = {"registrationStatus": "closed", "open": True}
        assert determine_registration_status(record) == "closed"

    def test_undecided_strings_are_skipped(self):
        """A string without keywords lets later fields decide"""
        record = {"status": "unknown", "isOpen": False}
        assert determine_registration_status(record) == "closed"

    def test_default_open(self):
        """No signal defaults to open"""
        assert determine_registration_status({}) == "open"
        assert determine_registration_status({"status": 2.5}) == "open"
        assert determine_registration_status({"status": "10 slots"}) == "open"


class TestAccessType:
    """Access type inference"""

    @pytest.mark.parametrize(
        "record, expected",
        [
            ({"inviteOnly": True}, "invite"),
            ({"requiresInvite": False}, "open"),
            ({"accessType": "招待制"}, "invite"),
            ({"registration": "Approval required"}, "invite"),
            ({"joinPolicy": "Public"}, "open"),
            ({"access": ["自由登録"]}, "open"),
            ({"joinMethod": {"type": "manual review"}}, "invite"),
        ],
    )
    def test_explicit_fields(self, record, expected):
        """Explicit access fields decide first"""
        assert determine_access_type(record, "open") == expected

    def test_tag_hints(self):
        """Invite hints in tags are used when access fields are silent"""
        assert determine_access_type({"tags": ["招待コードあり", "雑談"]}, "open") == "invite"
        assert determine_access_type({"keywords": "invite, chat"}, "open") == "invite"

    def test_default_follows_registration(self):
        """Without any signal, closed registration means invite"""
        assert determine_access_type({}, "open") == "open"
        assert determine_access_type({}, "closed") == "invite"
