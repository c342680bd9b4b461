"""Tests for the profile/config document schema."""
import pytest

from gh_switch.config.schema import (
    CONFIG_VERSION,
    ConfigDocument,
    Profile,
    expand_tilde,
    is_valid_email,
    is_valid_profile_name,
    slugify,
    ssh_host_for,
)
from gh_switch.errors import CorruptConfigError, NotFoundError

from conftest import make_profile


class TestNaming:
    """Tests for slug and host alias derivation."""

    def test_slugify_lowercases(self):
        assert slugify("Work") == "work"

    def test_slugify_replaces_invalid_chars(self):
        """Underscores and other characters become hyphens."""
        assert slugify("my_work") == "my-work"
        assert slugify("Acme Corp!") == "acme-corp-"

    def test_ssh_host_for(self):
        assert ssh_host_for("work") == "github.com-work"
        assert ssh_host_for("Client_A") == "github.com-client-a"

    def test_profile_name_pattern(self):
        assert is_valid_profile_name("work")
        assert is_valid_profile_name("client_a-2")
        assert not is_valid_profile_name("")
        assert not is_valid_profile_name("has space")
        assert not is_valid_profile_name("dot.name")

    def test_email_pattern(self):
        assert is_valid_email("jane@acme.com")
        assert not is_valid_email("jane@acme")
        assert not is_valid_email("jane acme.com")
        assert not is_valid_email("jane @acme.com")

    def test_expand_tilde(self, tmp_path):
        assert expand_tilde("~/.ssh/id_rsa", tmp_path) == str(tmp_path / ".ssh" / "id_rsa")
        assert expand_tilde("~", tmp_path) == str(tmp_path)
        assert expand_tilde("/abs/key", tmp_path) == "/abs/key"
        assert expand_tilde("~other/key", tmp_path) == "~other/key"


class TestProfileSerialization:
    """Tests for Profile to/from dict."""

    def test_to_dict_uses_camel_case(self):
        data = make_profile("work").to_dict()

        assert list(data) == [
            "name", "gitName", "gitEmail", "githubUsername", "sshKeyPath", "sshHost",
        ]
        assert data["sshHost"] == "github.com-work"

    def test_from_dict_roundtrip(self):
        profile = make_profile("work")
        assert Profile.from_dict(profile.to_dict()) == profile

    def test_from_dict_missing_field(self):
        data = make_profile("work").to_dict()
        del data["gitEmail"]

        with pytest.raises(CorruptConfigError, match="gitEmail"):
            Profile.from_dict(data)

    def test_from_dict_wrong_type(self):
        data = make_profile("work").to_dict()
        data["sshKeyPath"] = 42

        with pytest.raises(CorruptConfigError, match="sshKeyPath"):
            Profile.from_dict(data)

    def test_from_dict_not_an_object(self):
        with pytest.raises(CorruptConfigError):
            Profile.from_dict(["work"])


class TestConfigDocumentMutations:
    """Tests for add/remove/set-active on the document."""

    def test_first_profile_becomes_active(self):
        """Adding to an empty store activates the new profile."""
        doc = ConfigDocument()
        doc.add_or_update_profile(make_profile("work"))

        assert doc.active_profile == "work"

    def test_second_profile_does_not_steal_active(self):
        doc = ConfigDocument()
        doc.add_or_update_profile(make_profile("work"))
        doc.add_or_update_profile(make_profile("personal"))

        assert doc.active_profile == "work"
        assert [p.name for p in doc.profiles] == ["work", "personal"]

    def test_update_replaces_in_place(self):
        """Re-adding a name keeps its position and never duplicates it."""
        doc = ConfigDocument()
        for name in ("a", "b", "c"):
            doc.add_or_update_profile(make_profile(name))

        doc.add_or_update_profile(make_profile("b", email="new@example.com"))

        assert [p.name for p in doc.profiles] == ["a", "b", "c"]
        assert doc.get("b").git_email == "new@example.com"

    def test_remove_active_moves_to_next(self):
        """Removing the active profile activates the first remaining one."""
        doc = ConfigDocument()
        doc.add_or_update_profile(make_profile("a"))
        doc.add_or_update_profile(make_profile("b"))

        doc.remove_profile("a")

        assert doc.active_profile == "b"

    def test_remove_last_profile_clears_active(self):
        doc = ConfigDocument()
        doc.add_or_update_profile(make_profile("a"))

        doc.remove_profile("a")

        assert doc.profiles == []
        assert doc.active_profile is None

    def test_remove_inactive_keeps_active(self):
        doc = ConfigDocument()
        for name in ("a", "b", "c"):
            doc.add_or_update_profile(make_profile(name))

        doc.remove_profile("c")

        assert doc.active_profile == "a"

    def test_remove_unknown(self):
        with pytest.raises(NotFoundError):
            ConfigDocument().remove_profile("ghost")

    def test_set_active(self):
        doc = ConfigDocument()
        doc.add_or_update_profile(make_profile("a"))
        doc.add_or_update_profile(make_profile("b"))

        doc.set_active("b")

        assert doc.active.name == "b"

    def test_set_active_unknown(self):
        doc = ConfigDocument()
        doc.add_or_update_profile(make_profile("a"))

        with pytest.raises(NotFoundError):
            doc.set_active("ghost")
        assert doc.active_profile == "a"

    def test_find_by_key_path(self):
        doc = ConfigDocument()
        doc.add_or_update_profile(make_profile("a", key_path="/k/shared"))
        doc.add_or_update_profile(make_profile("b", key_path="/k/shared"))

        assert doc.find_by_key_path("/k/shared").name == "a"
        assert doc.find_by_key_path("/k/shared", exclude="a").name == "b"
        assert doc.find_by_key_path("/k/other") is None


class TestConfigDocumentParsing:
    """Tests for strict deserialization."""

    def _valid(self) -> dict:
        return {
            "profiles": [make_profile("work").to_dict()],
            "activeProfile": "work",
            "version": CONFIG_VERSION,
        }

    def test_roundtrip(self):
        doc = ConfigDocument.from_dict(self._valid())

        assert doc.active_profile == "work"
        assert ConfigDocument.from_dict(doc.to_dict()) == doc

    def test_missing_version_is_migrated(self):
        data = self._valid()
        del data["version"]

        assert ConfigDocument.from_dict(data).version == CONFIG_VERSION

    @pytest.mark.parametrize("field", ["profiles", "activeProfile"])
    def test_missing_required_field(self, field):
        data = self._valid()
        del data[field]

        with pytest.raises(CorruptConfigError, match=field):
            ConfigDocument.from_dict(data)

    def test_dangling_active_profile(self):
        data = self._valid()
        data["activeProfile"] = "ghost"

        with pytest.raises(CorruptConfigError, match="ghost"):
            ConfigDocument.from_dict(data)

    def test_duplicate_names(self):
        data = self._valid()
        data["profiles"].append(make_profile("work").to_dict())

        with pytest.raises(CorruptConfigError, match="Duplicate"):
            ConfigDocument.from_dict(data)

    def test_root_not_object(self):
        with pytest.raises(CorruptConfigError):
            ConfigDocument.from_dict([])

    def test_to_yaml(self):
        """YAML view shows the same keys as the JSON file."""
        text = ConfigDocument.from_dict(self._valid()).to_yaml()

        assert "activeProfile: work" in text
        assert "sshHost: github.com-work" in text
        assert text.index("profiles:") < text.index("activeProfile:")
