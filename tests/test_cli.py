"""
Tests for the atmos-sign command-line interface
"""

from unittest.mock import patch

import pytest

from atmos_sdk.cli import main, parse_header_arguments

UID = "6039ac182f194e15b9261d73ce044939/user1"
SECRET = "LJLuryj6zs8ste6Y3jTGQp71xq0="
DATE = "Tue, 01 Jan 2030 00:00:00 GMT"
EXPECTED_SIGNATURE = "MIsY3sR766DebhbAXgdGqgKlPes="

REQUEST_ARGS = [
    "--path", "/rest/objects/123",
    "--header", "x-emc-meta:foo=bar",
    "--date", DATE,
]


class TestStringToSign:
    """Test the string-to-sign command"""

    def test_prints_canonical_string(self, capsys):
        exit_code = main(["string-to-sign", *REQUEST_ARGS])

        assert exit_code == 0
        assert capsys.readouterr().out == (
            f"GET\n\n\n{DATE}\n/rest/objects/123\nx-emc-meta:foo=bar\n"
        )

    def test_includes_uid(self, capsys):
        main(["string-to-sign", *REQUEST_ARGS, "--uid", UID])

        assert capsys.readouterr().out.endswith(f"x-emc-uid:{UID}\n")

    def test_bad_header(self, capsys):
        exit_code = main(["string-to-sign", "--path", "/x", "--header", "no-colon"])

        assert exit_code == 1
        assert "NAME:VALUE" in capsys.readouterr().err


class TestSign:
    """Test the sign command"""

    def test_signs_with_flags(self, capsys):
        exit_code = main(["sign", *REQUEST_ARGS, "--uid", UID, "--secret", SECRET])

        output = capsys.readouterr().out
        assert exit_code == 0
        assert f"x-emc-uid: {UID}" in output
        assert f"Date: {DATE}" in output
        assert f"x-emc-signature: {EXPECTED_SIGNATURE}" in output

    def test_signs_with_environment(self, capsys, monkeypatch):
        monkeypatch.setenv("ATMOS_UID", UID)
        monkeypatch.setenv("ATMOS_SECRET", SECRET)

        exit_code = main(["sign", *REQUEST_ARGS])

        assert exit_code == 0
        assert EXPECTED_SIGNATURE in capsys.readouterr().out

    def test_show_string_to_sign(self, capsys):
        main(["sign", *REQUEST_ARGS, "--uid", UID, "--secret", SECRET, "--show-string-to-sign"])

        output = capsys.readouterr().out
        assert "String to sign:" in output
        assert f"x-emc-uid:{UID}" in output

    def test_missing_credentials(self, capsys, monkeypatch):
        monkeypatch.delenv("ATMOS_UID", raising=False)
        monkeypatch.delenv("ATMOS_SECRET", raising=False)

        exit_code = main(["sign", *REQUEST_ARGS])

        assert exit_code == 1
        assert "ATMOS_UID" in capsys.readouterr().err

    def test_malformed_secret(self, capsys):
        exit_code = main(["sign", *REQUEST_ARGS, "--uid", UID, "--secret", "not base64!"])

        assert exit_code == 1

    @patch("atmos_sdk.credentials.keyring")
    def test_keyring(self, mock_keyring, capsys):
        mock_keyring.get_password.return_value = SECRET

        exit_code = main(["sign", *REQUEST_ARGS, "--uid", UID, "--keyring"])

        assert exit_code == 0
        assert EXPECTED_SIGNATURE in capsys.readouterr().out


class TestMisc:
    """Test top-level behaviour"""

    def test_no_command(self, capsys):
        assert main([]) == 1

    def test_check_compatibility(self, capsys):
        assert main(["--check-compatibility"]) == 0
        assert "compatible" in capsys.readouterr().out

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])

        assert exc_info.value.code == 0

    def test_parse_header_arguments_groups_values(self):
        headers = parse_header_arguments(["X-EMC-Meta:a", "x-emc-meta: b"])

        assert headers.get_all("x-emc-meta") == ["a", "b"]
