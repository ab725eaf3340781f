"""
Tests for project.py module.

Tests descriptor parsing, coordinate overrides and SCM URL handling.
"""

import os
import pytest

from git_version_stamp.errors import ConfigurationError, UnsupportedRepositoryError
from git_version_stamp.models import ProjectCoordinates
from git_version_stamp.project import fetch_url, find_descriptor, load_project, select_scm_url, validate_git_scm


class TestLoadProject:
    """Test project descriptor loading."""
    
    def test_namespaced_pom(self, tmp_path, pom_writer):
        """Test a pom with the Maven namespace."""
        pom_writer(tmp_path, scm_connection="scm:git:https://example.com/demo.git",
                   scm_developer_connection="scm:git:git@example.com:demo.git")
        coords = load_project(str(tmp_path))
        
        assert (coords.group_id, coords.artifact_id, coords.declared_version) == ("com.example", "demo", "1-SNAPSHOT")
        assert coords.descriptor_path == os.path.join(str(tmp_path), "pom.xml")
        assert coords.scm_connection == "scm:git:https://example.com/demo.git"
        assert coords.scm_developer_connection == "scm:git:git@example.com:demo.git"
        assert coords.module_versions == {}
    
    def test_plain_pom(self, tmp_path, pom_writer):
        """Test a pom without namespace declaration."""
        pom_writer(tmp_path, namespace=False, version="2.0-SNAPSHOT")
        assert load_project(str(tmp_path)).declared_version == "2.0-SNAPSHOT"
    
    def test_parent_inheritance(self, tmp_path, pom_writer):
        """Test that groupId and version are inherited from <parent>."""
        pom_writer(tmp_path, group_id=None, version=None, parent=("org.acme", "acme-parent", "7-SNAPSHOT"))
        coords = load_project(str(tmp_path))
        assert coords.group_id == "org.acme"
        assert coords.declared_version == "7-SNAPSHOT"
    
    def test_overrides(self, tmp_path, pom_writer):
        """Test that explicit values win over the descriptor."""
        pom_writer(tmp_path)
        coords = load_project(str(tmp_path), group_id="g", artifact_id="a", version="9-SNAPSHOT")
        assert (coords.group_id, coords.artifact_id, coords.declared_version) == ("g", "a", "9-SNAPSHOT")
    
    def test_no_descriptor_with_overrides(self, tmp_path):
        """Test projects without a descriptor."""
        coords = load_project(str(tmp_path), artifact_id="tool", version="1-SNAPSHOT")
        assert coords.descriptor_path is None
        assert coords.group_id == ""
    
    def test_no_descriptor_missing_coordinates(self, tmp_path):
        """Test error when artifactId and version are unknown."""
        with pytest.raises(ConfigurationError, match="artifactId and version"):
            load_project(str(tmp_path))
    
    def test_malformed_descriptor(self, tmp_path):
        """Test error on invalid XML."""
        (tmp_path / "pom.xml").write_text("<project><artifactId>", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Could not read project descriptor"):
            load_project(str(tmp_path))
    
    def test_modules(self, tmp_path, pom_writer):
        """Test collection of reactor module versions."""
        pom_writer(tmp_path, modules=("core", "cli"))
        pom_writer(tmp_path / "core", artifact_id="demo-core", group_id=None, version=None,
                   parent=("com.example", "demo", "1-SNAPSHOT"), modules=("nested",))
        pom_writer(tmp_path / "core" / "nested", artifact_id="demo-nested", group_id=None, version="1-SNAPSHOT")
        pom_writer(tmp_path / "cli", artifact_id="demo-cli", version="2-SNAPSHOT")
        coords = load_project(str(tmp_path))
        
        assert coords.module_versions == {
            "com.example:demo-core": "1-SNAPSHOT",
            "com.example:demo-nested": "1-SNAPSHOT",
            "com.example:demo-cli": "2-SNAPSHOT",
        }
    
    def test_missing_module_descriptor(self, tmp_path, pom_writer, log_messages):
        """Test that a module without a pom is skipped with a warning."""
        pom_writer(tmp_path, modules=("absent",))
        assert load_project(str(tmp_path)).module_versions == {}
        assert any(level == "WARNING" for level, _ in log_messages)
    
    def test_find_descriptor(self, tmp_path, pom_writer):
        """Test descriptor discovery."""
        assert find_descriptor(str(tmp_path)) is None
        pom_writer(tmp_path)
        assert find_descriptor(str(tmp_path)) == os.path.join(str(tmp_path), "pom.xml")


class TestScmUrls:
    """Test SCM URL selection and validation."""
    
    def _coords(self, connection="", developer=""):
        return ProjectCoordinates("g", "a", "1-SNAPSHOT", scm_connection=connection,
                                  scm_developer_connection=developer)
    
    def test_prefers_developer_connection(self):
        """Test the default preference."""
        coords = self._coords("scm:git:https://r/x.git", "scm:git:git@r:x.git")
        assert select_scm_url(coords) == "scm:git:git@r:x.git"
        assert select_scm_url(coords, prefer_developer_connection=False) == "scm:git:https://r/x.git"
    
    def test_falls_back_when_blank(self):
        """Test fallback to the other connection."""
        assert select_scm_url(self._coords(connection="scm:git:c")) == "scm:git:c"
        assert select_scm_url(self._coords(developer="scm:git:d"), False) == "scm:git:d"
        assert select_scm_url(self._coords()) == ""
    
    def test_validate_git(self):
        """Test that git and blank URLs are accepted."""
        validate_git_scm("scm:git:https://example.com/demo.git")
        validate_git_scm("")
    
    def test_validate_rejects_other_scm(self):
        """Test rejection of other providers."""
        with pytest.raises(UnsupportedRepositoryError, match="Only Git SCM type is supported"):
            validate_git_scm("scm:svn:https://example.com/svn/demo")
    
    def test_fetch_url(self):
        """Test stripping of the provider prefix."""
        assert fetch_url("scm:git:git@example.com:demo.git") == "git@example.com:demo.git"
        assert fetch_url("") is None
