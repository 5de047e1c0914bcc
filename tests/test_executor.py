"""Tests for the backup run orchestration."""

import zipfile
from unittest.mock import MagicMock

import pytest

from conftest import child_node_names, property_values
from simplebackup.backup import (
    DESCRIPTOR_FILENAME,
    LOG_FILENAME,
    BackupExecutor,
    ConfigurationError,
    ExportUnitWriter,
    SerializationError,
    load_descriptor,
)
from simplebackup.config import WorkspaceConfig
from simplebackup.store import CONTENT_TYPE, PAGE_TYPE
from simplebackup.util.compression import Compression


class TestBackupExecutor:
    """Test complete backup runs."""

    def test_single_workspace_without_split(self, store, tmp_path):
        """Test one plain export file for a non-split workspace."""
        configs = [WorkspaceConfig(workspace="website", path="/")]

        descriptor = BackupExecutor(configs, tmp_path, store).run()

        assert list(descriptor.workspaces) == ["website"]
        assert [(i.node_path, i.file) for i in descriptor.items("website")] == [
            ("/", "website/website.xml"),
        ]
        assert descriptor.completed_workspaces == ["website"]

        export_file = tmp_path / "website" / "website.xml"
        assert export_file.stat().st_size > 0
        assert child_node_names(export_file.read_bytes()) == ["home"]
        assert load_descriptor(tmp_path).workspaces == descriptor.workspaces
        assert store.open_sessions == 0

    def test_split_workspace_with_zip(self, store, tmp_path):
        """Test splittable children get their own zip files."""
        configs = [WorkspaceConfig(workspace="dms", path="/", split=True, compress=True)]

        descriptor = BackupExecutor(configs, tmp_path, store).run()

        files = [i.file for i in descriptor.items("dms")]
        assert files == ["dms/dms.xml.zip", "dms/dms.a.xml.zip", "dms/dms.b.xml.zip"]
        assert sorted(p.name for p in (tmp_path / "dms").iterdir()) == [
            "dms.a.xml.zip", "dms.b.xml.zip", "dms.xml.zip",
        ]

        with zipfile.ZipFile(tmp_path / "dms" / "dms.xml.zip") as archive:
            assert archive.namelist() == ["dms.xml"]
            assert child_node_names(archive.read("dms.xml")) == ["notes"]

        with zipfile.ZipFile(tmp_path / "dms" / "dms.a.xml.zip") as archive:
            assert archive.namelist() == ["dms.a.xml"]

    def test_root_exclusions(self, store, tmp_path):
        """Test only the root export excludes the split-off children."""
        writer = MagicMock(spec=ExportUnitWriter)
        configs = [WorkspaceConfig(workspace="dms", path="/", split=True, compress=True,
                                   compression=Compression.GZIP)]

        BackupExecutor(configs, tmp_path, store, writer=writer).run()

        calls = [c.args for c in writer.write.call_args_list]
        assert calls == [
            ("dms", "/", ["/a", "/b"], "dms.xml", tmp_path / "dms" / "dms.xml.gz", Compression.GZIP),
            ("dms", "/a", [], "dms.a.xml", tmp_path / "dms" / "dms.a.xml.gz", Compression.GZIP),
            ("dms", "/b", [], "dms.b.xml", tmp_path / "dms" / "dms.b.xml.gz", Compression.GZIP),
        ]

    def test_binary_documents_survive_backup(self, store, tmp_path):
        """Test a document's bytes reach the export file."""
        store.workspaces["dms"].add_node("doc", CONTENT_TYPE, data=b"PDF-BYTES")
        configs = [WorkspaceConfig(workspace="dms", path="/doc")]

        BackupExecutor(configs, tmp_path, store).run()

        data = (tmp_path / "dms" / "dms.doc.xml").read_bytes()
        assert property_values(data, "data") == ["UERGLUJZVEVT"]

    def test_non_ascii_workspace_names(self, store, tmp_path):
        """Test log and descriptor are written as UTF-8 whatever the locale."""
        store.add_workspace("médias").add_node("bild", PAGE_TYPE, title="Bild")
        configs = [WorkspaceConfig(workspace="médias", path="/")]

        BackupExecutor(configs, tmp_path, store).run()

        assert "médias".encode("utf-8") in (tmp_path / LOG_FILENAME).read_bytes()
        assert "médias".encode("utf-8") in (tmp_path / DESCRIPTOR_FILENAME).read_bytes()
        assert load_descriptor(tmp_path).completed_workspaces == ["médias"]

    def test_multiple_workspaces_in_order(self, store, tmp_path):
        """Test workspaces are processed one after another."""
        configs = [
            WorkspaceConfig(workspace="website", path="/"),
            WorkspaceConfig(workspace="dms", path="/", split=True),
        ]

        descriptor = BackupExecutor(configs, tmp_path, store).run()

        assert list(descriptor.workspaces) == ["website", "dms"]
        assert descriptor.completed_workspaces == ["website", "dms"]
        assert len(descriptor.items("dms")) == 3

    def test_missing_base_path(self, store, tmp_path):
        """Test validation fails before anything is written."""
        base_path = tmp_path / "missing"
        configs = [WorkspaceConfig(workspace="website", path="/")]

        with pytest.raises(ConfigurationError):
            BackupExecutor(configs, base_path, store).run()

        assert not base_path.exists()
        assert list(tmp_path.iterdir()) == []

    def test_base_path_is_a_file(self, store, tmp_path):
        """Test a file is not a valid base path."""
        base_file = tmp_path / "file"
        base_file.write_text("x")

        with pytest.raises(ConfigurationError):
            BackupExecutor([WorkspaceConfig(workspace="website")], base_file, store).run()

    def test_rerun_overwrites_same_files(self, store, tmp_path):
        """Test a second run lands on the same paths."""
        configs = [WorkspaceConfig(workspace="website", path="/")]

        BackupExecutor(configs, tmp_path, store).run()
        first = sorted(p.relative_to(tmp_path) for p in tmp_path.rglob("*"))

        descriptor = BackupExecutor(configs, tmp_path, store).run()
        second = sorted(p.relative_to(tmp_path) for p in tmp_path.rglob("*"))

        assert first == second
        assert len(descriptor.items("website")) == 1

    def test_failure_aborts_run(self, store, tmp_path):
        """Test a failing workspace stops the run without a descriptor."""
        configs = [
            WorkspaceConfig(workspace="website", path="/"),
            WorkspaceConfig(workspace="dms", path="/missing", split=True),
            WorkspaceConfig(workspace="dms", path="/"),
        ]
        executor = BackupExecutor(configs, tmp_path, store)

        with pytest.raises(ConfigurationError):
            executor.run()

        assert (tmp_path / "website" / "website.xml").exists()
        assert not (tmp_path / DESCRIPTOR_FILENAME).exists()
        assert executor.descriptor.completed_workspaces == ["website"]

        log = (tmp_path / LOG_FILENAME).read_text()
        assert "Finished backup of workspace website" in log
        assert "Failed backup of workspace dms" in log
        assert "Backup aborted after" in log
        assert store.open_sessions == 0

    def test_writer_failure_is_logged(self, store, tmp_path):
        """Test node failures are logged with their timing and re-raised."""
        writer = MagicMock(spec=ExportUnitWriter)
        writer.write.side_effect = SerializationError("walk failed", workspace="website", path="/")
        executor = BackupExecutor([WorkspaceConfig(workspace="website")], tmp_path, store, writer=writer)

        with pytest.raises(SerializationError):
            executor.run()

        assert executor.descriptor.items("website") == []
        log = (tmp_path / LOG_FILENAME).read_text()
        assert "Failed backup of node / in workspace website after" in log

    def test_log_lines(self, store, tmp_path):
        """Test the run log is timestamped and covers every step."""
        descriptor = BackupExecutor([WorkspaceConfig(workspace="website")], tmp_path, store).run()

        lines = (tmp_path / LOG_FILENAME).read_text().splitlines()
        assert lines[0].endswith(f": Starting Backup into {tmp_path}")
        assert "Starting backup of node / in workspace website" in lines[2]
        assert lines[-1].split(": ", 1)[1].startswith("Finished Backup in")
        assert len(lines[0].split(": ", 1)[0]) == len("2024-01-01T000000")
        assert descriptor.messages == lines

    def test_progress_callback(self, store, tmp_path):
        """Test progress is reported after every exported node."""
        progress = MagicMock()
        configs = [WorkspaceConfig(workspace="dms", split=True)]

        BackupExecutor(configs, tmp_path, store, progress_callback=progress).run()

        assert [c.args for c in progress.call_args_list] == [
            ("dms", "/", 1, 3),
            ("dms", "/a", 2, 3),
            ("dms", "/b", 3, 3),
        ]

    def test_job_definitions(self, store, tmp_path):
        """Test job definitions derive destination and compression."""
        configs = [
            WorkspaceConfig(workspace="My Site", path="/home", split=True, compress=True),
            WorkspaceConfig(workspace="dms", compress=False, compression=Compression.GZIP),
        ]

        jobs = BackupExecutor(configs, tmp_path, store).build_job_definitions()

        assert jobs[0].destination == tmp_path / "mysite"
        assert jobs[0].root_path == "/home"
        assert jobs[0].split is True
        assert jobs[0].compression == Compression.ZIP
        assert jobs[1].compression == Compression.NONE
