from fieldmatch.exceptions import (
    BackendError,
    DependencyError,
    DocumentLoadError,
    EmbeddingError,
    ExtractionError,
    PackageError,
    SchemaParseError,
    SettingsError,
)


def test_root_exception_hierarchy() -> None:
    for error_type in (
        SettingsError,
        SchemaParseError,
        DocumentLoadError,
        ExtractionError,
        EmbeddingError,
        BackendError,
        DependencyError,
    ):
        assert issubclass(error_type, PackageError)


def test_error_messages() -> None:
    assert str(DocumentLoadError(message="bad pdf")) == "bad pdf"
    assert str(SettingsError(exc=ValueError("boom"))) == "Failed to load settings: boom"
    assert str(DependencyError(missing_package=["pymupdf"], message="compare")) == (
        "Missing runtime dependencies for 'compare': pymupdf"
    )
