"""
Tests for outputs.py module.

Tests value files, property collection and property file export.
"""

from git_version_stamp.outputs import PropertySink, write_file


class TestWriteFile:
    """Test single value files."""
    
    def test_write_file_creates_parents(self, tmp_path):
        """Test that parent directories are created and a newline appended."""
        path = tmp_path / "target" / "version.txt"
        write_file(str(path), "1.57")
        assert path.read_text(encoding="utf-8") == "1.57\n"
    
    def test_write_file_overwrites(self, tmp_path):
        """Test that an existing file is replaced."""
        path = tmp_path / "tag.txt"
        path.write_text("old\n", encoding="utf-8")
        write_file(str(path), "demo-1.57")
        assert path.read_text(encoding="utf-8") == "demo-1.57\n"
    
    def test_write_file_none(self, tmp_path):
        """Test that no path means nothing is written."""
        write_file(None, "1.57")
        assert list(tmp_path.iterdir()) == []


class TestPropertySink:
    """Test property collection."""
    
    def test_set_and_render(self):
        """Test rendering in insertion order."""
        sink = PropertySink()
        sink.set_property("releaseVersion", "1.57")
        sink.set_property("tag", "demo-1.57")
        assert sink.render() == "releaseVersion=1.57\ntag=demo-1.57\n"
    
    def test_blank_names_ignored(self):
        """Test that blank property names disable the output."""
        sink = PropertySink()
        sink.set_property("", "1.57")
        sink.set_property(None, "1.57")
        sink.set_property("   ", "1.57")
        assert sink.properties == {}
    
    def test_write_properties_file(self, tmp_path):
        """Test writing a properties file."""
        sink = PropertySink()
        sink.set_property("version", "1.0-20190322.100407-39")
        path = tmp_path / "out" / "version.properties"
        sink.write_properties_file(str(path))
        assert path.read_text(encoding="utf-8") == "version=1.0-20190322.100407-39\n"
    
    def test_append_github_output(self, tmp_path):
        """Test appending to an existing GitHub output file."""
        path = tmp_path / "github_output"
        path.write_text("existing=1\n", encoding="utf-8")
        sink = PropertySink()
        sink.set_property("tag", "demo-1.57")
        sink.append_github_output(str(path))
        assert path.read_text(encoding="utf-8") == "existing=1\ntag=demo-1.57\n"
    
    def test_append_github_output_unset(self, log_messages):
        """Test the warning when GITHUB_OUTPUT is not set."""
        PropertySink().append_github_output(None)
        assert any(level == "WARNING" for level, _ in log_messages)
