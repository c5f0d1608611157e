# tests/commands/test_ingest_cmd.py
"""Tests for the ingest command."""

import os

from docent.commands import CommandStage, ingest
from docent.commands.documents import list_documents


def write(directory: str, name: str, text: str) -> str:
    path = os.path.join(directory, name)
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)
    return path


class TestIngestCommand:
    """Tests for ingest.ingest()."""

    def test_ingest_nonexistent_path(self, isolated_env) -> None:
        """Ingest with nonexistent path returns error."""
        result = ingest.ingest(path="/nonexistent/path/file.md")

        assert result.success is False
        assert result.error is not None
        assert "not found" in result.error.lower()

    def test_ingest_without_models_configured(self, isolated_env) -> None:
        """Missing model configuration is reported, not raised."""
        path = write(isolated_env, "notes.txt", "Some notes.")

        result = ingest.ingest(path=path)

        assert result.success is False
        assert "llm_model" in (result.error or "")

    def test_ingest_file(self, configured_env, isolated_env) -> None:
        path = write(isolated_env, "docs/notes.txt", "The cat sat on the mat.")

        result = ingest.ingest(path=path, thread_id="thread-1")

        assert result.success is True
        assert result.files_processed == 1
        assert result.total_chunks == 1
        assert result.file_results[0].document_id is not None

        listed = list_documents("thread-1")
        assert [d.filename for d in listed.documents] == ["notes.txt"]
        assert listed.documents[0].threads == ["thread-1"]

    def test_ingest_directory_skips_unsupported(self, configured_env, isolated_env) -> None:
        write(isolated_env, "docs/a.txt", "Alpha.")
        write(isolated_env, "docs/b.md", "# Beta")
        write(isolated_env, "docs/image.png", "not really a png")

        result = ingest.ingest(path=os.path.join(isolated_env, "docs"))

        assert result.success is True
        assert result.files_processed == 2
        assert sorted(os.path.basename(r.filepath) for r in result.file_results) == [
            "a.txt",
            "b.md",
        ]

    def test_empty_directory(self, configured_env, isolated_env) -> None:
        os.makedirs(os.path.join(isolated_env, "empty"))

        result = ingest.ingest(path=os.path.join(isolated_env, "empty"))

        assert result.success is True
        assert result.files_processed == 0
        assert "No supported files" in (result.error or "")

    def test_callbacks_called(self, configured_env, isolated_env) -> None:
        """Ingest calls file and progress callbacks."""
        path = write(isolated_env, "notes.txt", "Test content for ingestion.")
        file_starts: list[tuple[str, int, int]] = []
        file_completes: list = []
        stages: list[CommandStage] = []

        result = ingest.ingest(
            path=path,
            on_progress=lambda update: stages.append(update.stage),
            on_file_start=lambda filepath, index, total: file_starts.append(
                (filepath, index, total)
            ),
            on_file_complete=file_completes.append,
        )

        assert result.success is True
        assert file_starts == [(path, 0, 1)]
        assert len(file_completes) == 1
        assert CommandStage.SPLITTING in stages
        assert CommandStage.EMBEDDING in stages
        assert CommandStage.STORING in stages


class TestIngestWithDocent:
    """Tests for ingest.ingest_with_docent()."""

    def test_failed_file_is_reported(self, docent, temp_dir) -> None:
        path = write(temp_dir, "blank.txt", "   \n\n  ")

        result = ingest.ingest_with_docent(docent, path)

        assert result.success is False
        assert result.files_failed == 1
        assert result.errors[0][0] == path
        assert "IngestionError" in result.errors[0][1]

    def test_partial_failure_still_succeeds(self, docent, temp_dir) -> None:
        write(temp_dir, "docs/blank.txt", "   ")
        write(temp_dir, "docs/good.txt", "Dogs are loyal.")

        result = ingest.ingest_with_docent(docent, os.path.join(temp_dir, "docs"), "A")

        assert result.success is True
        assert result.files_processed == 1
        assert result.files_failed == 1
        assert [d.filename for d in docent.list_documents("A")] == ["good.txt"]

    def test_quota_exceeded_is_a_file_failure(self, mock_provider, temp_dir) -> None:
        from docent import Docent, MemoryStorage, Settings

        docent = Docent(
            provider=mock_provider,
            storage=MemoryStorage(),
            settings=Settings(max_total_bytes=20),
        )
        write(temp_dir, "docs/a.txt", "x" * 15)
        write(temp_dir, "docs/b.txt", "y" * 15)

        result = ingest.ingest_with_docent(docent, os.path.join(temp_dir, "docs"))

        assert result.files_processed == 1
        assert "StorageQuotaExceededError" in result.errors[0][1]
