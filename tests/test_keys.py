"""Tests for SSH key discovery and housekeeping."""
import os
import stat

import pytest

from gh_switch.utils.keys import (
    check_key_permissions,
    default_ssh_key,
    detect_ssh_keys,
    fix_key_permissions,
    read_public_key,
    ssh_key_name,
)


class TestDetectSSHKeys:
    """Tests for scanning ~/.ssh."""

    def test_missing_dir(self, tmp_path):
        assert detect_ssh_keys(tmp_path / "nope") == []

    def test_ordering_and_filtering(self, paths, make_key):
        make_key("id_rsa")
        make_key("id_ecdsa", with_pub=False)
        make_key("id_ed25519_work")
        make_key("id_ed25519")
        (paths.ssh_dir / "known_hosts").write_text("")
        (paths.ssh_dir / "config").write_text("")
        (paths.ssh_dir / "id_rsa_dir").mkdir()

        keys = detect_ssh_keys(paths.ssh_dir)

        assert [k.name for k in keys] == ["id_ed25519", "id_ed25519_work", "id_rsa", "id_ecdsa"]
        assert keys[0].has_public_key
        assert not keys[-1].has_public_key

    def test_default_prefers_key_with_pub(self, paths, make_key):
        make_key("id_ed25519", with_pub=False)
        rsa = make_key("id_rsa")

        assert default_ssh_key(detect_ssh_keys(paths.ssh_dir)) == rsa

    def test_default_falls_back_to_first(self, paths, make_key):
        ed = make_key("id_ed25519", with_pub=False)

        assert default_ssh_key(detect_ssh_keys(paths.ssh_dir)) == ed
        assert default_ssh_key([]) is None


class TestKeyHelpers:

    def test_ssh_key_name(self):
        assert ssh_key_name("Work_Acme") == "id_ed25519_work-acme"

    def test_read_public_key(self, make_key, tmp_path):
        key = make_key("id_ed25519")

        assert read_public_key(key) == "ssh-ed25519 AAAA id_ed25519"
        assert read_public_key(tmp_path / "missing") is None

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
    def test_permissions(self, make_key):
        key = make_key("id_ed25519")
        assert check_key_permissions(key)

        key.chmod(0o644)
        assert not check_key_permissions(key)

        fix_key_permissions(key)
        assert stat.S_IMODE(key.stat().st_mode) == 0o600
