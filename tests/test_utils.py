# =============================================================================
# tests/test_utils.py - Shared Helper Tests
# =============================================================================

from uuid import uuid4

import pytest

from lib.utils import email_local_part, is_uuid, sanitize_filename


class TestIsUuid:

    def test_uuid_string(self):
        assert is_uuid(str(uuid4()))

    def test_uuid_instance(self):
        assert is_uuid(uuid4())

    @pytest.mark.parametrize("value", ["abc", "nobody", "", None, "1234"])
    def test_rejects_other_values(self, value):
        assert not is_uuid(value)


class TestSanitizeFilename:

    def test_replaces_non_alphanumerics(self):
        assert sanitize_filename("The Beat-Les!") == "The_Beat_Les_"


class TestEmailLocalPart:

    def test_local_part(self):
        assert email_local_part("sam@example.com") == "sam"

    def test_missing_email(self):
        assert email_local_part(None) is None
